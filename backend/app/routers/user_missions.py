# backend/app/routers/user_missions.py
"""Member-facing mission list, detail, submit and cancel."""
import logging
from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.auth import CurrentUser, get_current_user
from app.db import get_db
from app.errors import AuthorizationError
from app.models.mission import Mission
from app.models.sub_mission import SubMission
from app.models.submission import Submission
from app.schemas.submission import SubmissionIn, SubmissionOut
from app.schemas.user_mission import MissionProgressOut, UserMissionDetail, UserMissionOut
from app.services import missions as mission_svc
from app.services import progress, submissions
from app.services.periods import period_status
from app.services.review import MissionGraph

router = APIRouter(prefix="/api/missions", tags=["user-missions"])
logger = logging.getLogger(__name__)


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------
def _progress(mission: Mission, active_subs: List[SubMission], approved_ids: set) -> dict:
    total = len(active_subs)
    done = sum(1 for s in active_subs if s.id in approved_ids)
    return {
        "id": mission.id,
        "title": mission.title,
        "description": mission.description or "",
        "category_id": mission.category_id,
        "visibility": mission.visibility,
        "header_image_url": mission.header_image_url,
        "start_date": mission.start_date,
        "end_date": mission.end_date,
        "period_status": period_status(mission.start_date, mission.end_date),
        "total_sub_missions": total,
        "completed_sub_missions": done,
        "progress_percent": progress.percent(done, total),
    }


# ----------------------------------------------------------------------
# Reads
# ----------------------------------------------------------------------
@router.get("", response_model=List[UserMissionOut])
def list_visible_missions(
    user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)
):
    """Active missions the caller may see, with their own progress."""
    graph = MissionGraph.load(db)
    missions = db.scalars(
        select(Mission).where(Mission.is_active.is_(True)).order_by(Mission.order, Mission.id)
    ).all()
    visible = [m for m in missions if submissions.can_view(m, user, graph.effective_hospital(m.id))]
    if not visible:
        return []

    subs = db.scalars(
        select(SubMission).where(
            SubMission.mission_id.in_([m.id for m in visible]), SubMission.is_active.is_(True)
        )
    ).all()
    by_mission = {}
    for s in subs:
        by_mission.setdefault(s.mission_id, []).append(s)
    approved = submissions.approved_sub_mission_ids(db, user.id, [s.id for s in subs])

    return [_progress(m, by_mission.get(m.id, []), approved) for m in visible]


@router.get("/{mission_id}", response_model=UserMissionDetail)
def get_visible_mission(
    mission_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    mission = mission_svc.get_mission(db, mission_id)
    graph = MissionGraph.load(db)
    if not submissions.can_view(mission, user, graph.effective_hospital(mission_id)):
        raise AuthorizationError("You do not have access to this mission")

    siblings = list(mission.sub_missions)
    active = [s for s in siblings if s.is_active]
    approved = submissions.approved_sub_mission_ids(db, user.id, [s.id for s in siblings])
    own = {
        row.sub_mission_id: row
        for row in db.scalars(
            select(Submission).where(
                Submission.user_id == user.id,
                Submission.sub_mission_id.in_([s.id for s in siblings] or [0]),
            )
        ).all()
    }

    out = _progress(mission, active, approved)
    out.update(
        event_date=mission.event_date,
        event_end_time=mission.event_end_time,
        capacity=mission.capacity,
        is_first_come=mission.is_first_come,
        notice_items=mission.notice_items or [],
        gift_image_url=mission.gift_image_url,
        gift_description=mission.gift_description,
        venue_image_url=mission.venue_image_url,
        sub_missions=[
            {
                "id": s.id,
                "title": s.title,
                "description": s.description,
                "submission_types": s.submission_types or [],
                "submission_labels": s.submission_labels or [],
                "sequential_level": s.sequential_level,
                "attendance_type": s.attendance_type,
                "start_date": s.start_date,
                "end_date": s.end_date,
                "period_status": period_status(s.start_date, s.end_date),
                "unlocked": not submissions.blocking_sub_missions(s, siblings, approved),
                "submission": own.get(s.id),
            }
            for s in active
        ],
    )
    return out


# ----------------------------------------------------------------------
# Submit / cancel
# ----------------------------------------------------------------------
@router.post("/{mission_id}/sub-missions/{sub_mission_id}/submit", response_model=SubmissionOut)
def submit(
    mission_id: int,
    sub_mission_id: int,
    payload: SubmissionIn,
    response: Response,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """201 for a first submission, 200 when a previous one is overwritten."""
    row, created = submissions.submit(db, user, mission_id, sub_mission_id, payload.slots)
    response.status_code = 201 if created else 200
    return row


@router.delete("/{mission_id}/sub-missions/{sub_mission_id}/submission", status_code=204)
def cancel_submission(
    mission_id: int,
    sub_mission_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    submissions.cancel(db, user, mission_id, sub_mission_id)
    return None


# ----------------------------------------------------------------------
# Progress
# ----------------------------------------------------------------------
@router.post("/{mission_id}/start", response_model=MissionProgressOut, status_code=201)
def start_mission(
    mission_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """400 when the caller already started this mission."""
    return progress.start(db, user, mission_id)


@router.post("/{mission_id}/complete", response_model=MissionProgressOut)
def complete_mission(
    mission_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Allowed once every active sub-mission has an approved submission."""
    return progress.complete(db, user, mission_id)

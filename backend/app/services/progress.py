# backend/app/services/progress.py
"""
Per-member mission progress.

    start --> in_progress --complete--> completed

Completing needs an approved submission on every active sub-mission.
Percentages come from the member's approvals at read time; only the
status and its timestamps are stored.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.auth import CurrentUser
from app.constants import PROGRESS_COMPLETED, PROGRESS_IN_PROGRESS
from app.errors import NotFoundError, ValidationError
from app.models.mission import Mission
from app.models.mission_progress import UserMissionProgress
from app.models.sub_mission import SubMission
from app.services import submissions

logger = logging.getLogger(__name__)


def percent(done: int, total: int) -> int:
    return round(done * 100 / total) if total else 0


def approval_counts(db: Session, user_id: int, mission_ids: Iterable[int]) -> Dict[int, Tuple[int, int]]:
    """(approved, total) over each mission's active sub-missions."""
    mission_ids = list(mission_ids)
    out = {mid: (0, 0) for mid in mission_ids}
    if not mission_ids:
        return out
    subs = db.execute(
        select(SubMission.id, SubMission.mission_id).where(
            SubMission.mission_id.in_(mission_ids), SubMission.is_active.is_(True)
        )
    ).all()
    approved = submissions.approved_sub_mission_ids(db, user_id, [sid for sid, _ in subs])
    for sid, mid in subs:
        done, total = out[mid]
        out[mid] = (done + (1 if sid in approved else 0), total + 1)
    return out


def serialize(row: UserMissionProgress, mission: Mission, counts: Tuple[int, int]) -> dict:
    done, total = counts
    return {
        "id": row.id,
        "user_id": row.user_id,
        "mission_id": mission.id,
        "mission_title": mission.title,
        "header_image_url": mission.header_image_url,
        "status": row.status,
        "started_at": row.started_at,
        "completed_at": row.completed_at,
        "total_sub_missions": total,
        "completed_sub_missions": done,
        "progress_percent": percent(done, total),
        "created_at": row.created_at,
        "updated_at": row.updated_at,
    }


def get_progress(db: Session, user_id: int, mission_id: int) -> Optional[UserMissionProgress]:
    return db.scalar(
        select(UserMissionProgress).where(
            UserMissionProgress.user_id == user_id, UserMissionProgress.mission_id == mission_id
        )
    )


def start(db: Session, user: CurrentUser, mission_id: int) -> dict:
    mission = submissions.load_visible_mission(db, user, mission_id)
    if get_progress(db, user.id, mission_id) is not None:
        raise ValidationError("Mission already started", field="missionId")

    row = UserMissionProgress(user_id=user.id, mission_id=mission_id, status=PROGRESS_IN_PROGRESS)
    db.add(row)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError("Mission already started", field="missionId")
    db.refresh(row)
    logger.info(f"[progress] user {user.id} started mission {mission_id}")
    return serialize(row, mission, approval_counts(db, user.id, [mission_id])[mission_id])


def complete(db: Session, user: CurrentUser, mission_id: int) -> dict:
    mission = submissions.load_visible_mission(db, user, mission_id)
    row = get_progress(db, user.id, mission_id)
    if row is None:
        raise NotFoundError("Mission progress not found")

    done, total = approval_counts(db, user.id, [mission_id])[mission_id]
    if done < total:
        raise ValidationError(
            f"Every sub-mission must be approved before completing ({done}/{total})",
            field="subMissions",
        )

    if row.status != PROGRESS_COMPLETED:
        row.status = PROGRESS_COMPLETED
        row.completed_at = datetime.now(timezone.utc)
        db.commit()
        db.refresh(row)
        logger.info(f"[progress] user {user.id} completed mission {mission_id}")
    return serialize(row, mission, (done, total))


def list_for_user(db: Session, user: CurrentUser) -> List[dict]:
    """Newest first."""
    rows = db.execute(
        select(UserMissionProgress, Mission)
        .join(Mission, Mission.id == UserMissionProgress.mission_id)
        .where(UserMissionProgress.user_id == user.id)
        .order_by(UserMissionProgress.created_at.desc(), UserMissionProgress.id.desc())
    ).all()
    counts = approval_counts(db, user.id, {m.id for _, m in rows})
    return [serialize(row, m, counts[m.id]) for row, m in rows]

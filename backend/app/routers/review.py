# backend/app/routers/review.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.auth import CurrentUser, require_review_admin
from app.db import get_db
from app.schemas.common import ReviewCounts
from app.schemas.review import MissionStatsNode, SubMissionStatsOut
from app.schemas.submission import ReviewDecision, ReviewSubmissionOut, SubmissionOut
from app.services import review, submissions
from app.services.scoping import resolve_hospital_scope

router = APIRouter(prefix="/api/admin/review", tags=["review"])

# hospitalId is a number or "all"; only superadmins may choose it


@router.get("/stats", response_model=ReviewCounts)
def review_stats(
    hospital_id: Optional[str] = Query(None, alias="hospitalId"),
    user: CurrentUser = Depends(require_review_admin),
    db: Session = Depends(get_db),
):
    """Pending / approved / rejected totals over every mission in scope."""
    scope = resolve_hospital_scope(user, hospital_id)
    return review.global_counts(db, scope)


@router.get("/theme-missions", response_model=List[MissionStatsNode])
def theme_missions(
    hospital_id: Optional[str] = Query(None, alias="hospitalId"),
    user: CurrentUser = Depends(require_review_admin),
    db: Session = Depends(get_db),
):
    """Mission tree; each node counts its own and its descendants' submissions."""
    scope = resolve_hospital_scope(user, hospital_id)
    return review.theme_mission_tree(db, scope)


@router.get("/theme-missions/{mission_id}/sub-missions", response_model=List[SubMissionStatsOut])
def theme_mission_sub_missions(
    mission_id: int,
    hospital_id: Optional[str] = Query(None, alias="hospitalId"),
    user: CurrentUser = Depends(require_review_admin),
    db: Session = Depends(get_db),
):
    scope = resolve_hospital_scope(user, hospital_id)
    return review.sub_missions_with_stats(db, mission_id, scope)


@router.get("/submissions", response_model=List[ReviewSubmissionOut])
def list_submissions(
    sub_mission_id: Optional[int] = Query(None, alias="subMissionId"),
    status: Optional[str] = None,
    hospital_id: Optional[str] = Query(None, alias="hospitalId"),
    user: CurrentUser = Depends(require_review_admin),
    db: Session = Depends(get_db),
):
    """Newest first. `status=all` (or absent) lists every state."""
    scope = resolve_hospital_scope(user, hospital_id)
    return review.list_submissions(db, scope, sub_mission_id, status)


@router.post("/submissions/{submission_id}/approve", response_model=SubmissionOut)
def approve_submission(
    submission_id: int,
    payload: Optional[ReviewDecision] = None,
    user: CurrentUser = Depends(require_review_admin),
    db: Session = Depends(get_db),
):
    scope = resolve_hospital_scope(user, None)
    note = payload.reviewer_note if payload else None
    return submissions.approve(db, user, submission_id, note, scope)


@router.post("/submissions/{submission_id}/reject", response_model=SubmissionOut)
def reject_submission(
    submission_id: int,
    payload: Optional[ReviewDecision] = None,
    user: CurrentUser = Depends(require_review_admin),
    db: Session = Depends(get_db),
):
    """A non-blank reviewerNote is required; the user may resubmit afterwards."""
    scope = resolve_hospital_scope(user, None)
    note = payload.reviewer_note if payload else None
    return submissions.reject(db, user, submission_id, note, scope)

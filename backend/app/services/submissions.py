# backend/app/services/submissions.py
"""
Submission lifecycle: users submit / cancel, admins approve / reject.

    submitted --approve--> approved   (terminal, row locked)
    submitted --reject---> rejected   (user may resubmit -> submitted)

Review decisions are compare-and-set on status = submitted.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.auth import CurrentUser
from app.constants import (
    PERIOD_OPEN,
    STATUS_APPROVED,
    STATUS_REJECTED,
    STATUS_SUBMITTED,
    VISIBILITY_DEV,
    VISIBILITY_HOSPITAL,
)
from app.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from app.models.mission import Mission
from app.models.sub_mission import SubMission
from app.models.submission import Submission
from app.services import review
from app.services.periods import period_status

logger = logging.getLogger(__name__)


# ----------------------------------------------------------------------
# Visibility and gating
# ----------------------------------------------------------------------
def can_view(mission: Mission, user: CurrentUser, hospital_id: Optional[int] = None) -> bool:
    """`hospital_id` is the mission's effective hospital when it inherits one."""
    if not mission.is_active:
        return False
    if mission.visibility == VISIBILITY_DEV:
        return user.is_content_admin
    if mission.visibility == VISIBILITY_HOSPITAL:
        target = hospital_id if hospital_id is not None else mission.hospital_id
        return user.hospital_id is not None and user.hospital_id == target
    return True


def approved_sub_mission_ids(db: Session, user_id: int, sub_mission_ids: Sequence[int]) -> set:
    if not sub_mission_ids:
        return set()
    return set(
        db.scalars(
            select(Submission.sub_mission_id).where(
                Submission.user_id == user_id,
                Submission.status == STATUS_APPROVED,
                Submission.sub_mission_id.in_(list(sub_mission_ids)),
            )
        ).all()
    )


def blocking_sub_missions(
    sub: SubMission, siblings: Sequence[SubMission], approved_ids: set
) -> List[SubMission]:
    """Active lower-level siblings the user still lacks an approval for."""
    if sub.sequential_level <= 0:
        return []
    return [
        s for s in siblings
        if s.id != sub.id
        and s.is_active
        and 0 < s.sequential_level < sub.sequential_level
        and s.id not in approved_ids
    ]


def is_unlocked(db: Session, user_id: int, sub: SubMission) -> bool:
    siblings = db.scalars(select(SubMission).where(SubMission.mission_id == sub.mission_id)).all()
    approved = approved_sub_mission_ids(db, user_id, [s.id for s in siblings])
    return not blocking_sub_missions(sub, siblings, approved)


def validate_slots(sub: SubMission, slots: list) -> None:
    """Every slot addresses a declared type by index; at most one slot per index."""
    declared = list(sub.submission_types or [])
    seen = set()
    for slot in slots:
        if slot.index >= len(declared):
            raise ValidationError(
                f"Slot index {slot.index} is out of range ({len(declared)} declared)", field="slots"
            )
        if declared[slot.index] != slot.type:
            raise ValidationError(
                f"Slot {slot.index} expects '{declared[slot.index]}', got '{slot.type}'", field="slots"
            )
        if slot.index in seen:
            raise ValidationError(f"Slot {slot.index} submitted twice", field="slots")
        seen.add(slot.index)

        if slot.type == "attendance" and sub.attendance_type == "password":
            if not slot.password or slot.password != sub.attendance_password:
                raise ValidationError("Attendance password does not match", field="slots")


def _check_window(label: str, start, end, now: Optional[datetime]) -> None:
    status = period_status(start, end, now)
    if status != PERIOD_OPEN:
        raise ValidationError(f"{label} is not open for submissions ({status})", field="period")


def load_visible_mission(db: Session, user: CurrentUser, mission_id: int) -> Mission:
    mission = db.get(Mission, mission_id)
    if not mission:
        raise NotFoundError("Mission not found")
    graph = review.MissionGraph.load(db)
    if not can_view(mission, user, graph.effective_hospital(mission_id)):
        raise AuthorizationError("You do not have access to this mission")
    return mission


def _load_target(db: Session, user: CurrentUser, mission_id: int, sub_mission_id: int):
    mission = load_visible_mission(db, user, mission_id)
    sub = db.get(SubMission, sub_mission_id)
    if not sub or sub.mission_id != mission_id:
        raise NotFoundError("Sub-mission not found")
    return mission, sub


# ----------------------------------------------------------------------
# User side
# ----------------------------------------------------------------------
def submit(
    db: Session,
    user: CurrentUser,
    mission_id: int,
    sub_mission_id: int,
    slots: list,
    now: Optional[datetime] = None,
) -> tuple[Submission, bool]:
    """Create or overwrite the caller's submission. Returns (row, created)."""
    mission, sub = _load_target(db, user, mission_id, sub_mission_id)
    if not sub.is_active:
        raise ValidationError("This sub-mission is not active", field="subMissionId")

    _check_window("Sub-mission", sub.start_date, sub.end_date, now)
    _check_window("Mission", mission.start_date, mission.end_date, now)

    if not is_unlocked(db, user.id, sub):
        raise ValidationError(
            "Complete every lower-level sub-mission before this one", field="sequentialLevel"
        )

    validate_slots(sub, slots)
    payload = [s.model_dump(mode="json") for s in slots]

    existing = db.scalar(
        select(Submission).where(
            Submission.user_id == user.id, Submission.sub_mission_id == sub.id
        )
    )
    stamp = datetime.now(timezone.utc)
    if existing is not None:
        if existing.is_locked:
            raise ConflictError("Approved submissions can not be changed")
        existing.slots = payload
        existing.status = STATUS_SUBMITTED
        existing.submitted_at = stamp
        existing.reviewer_note = None
        existing.reviewed_by = None
        existing.reviewed_at = None
        row, created = existing, False
    else:
        row = Submission(
            user_id=user.id,
            sub_mission_id=sub.id,
            slots=payload,
            status=STATUS_SUBMITTED,
            submitted_at=stamp,
        )
        db.add(row)
        created = True

    try:
        db.commit()
    except IntegrityError:
        # a concurrent first submission for the same user and sub-mission won
        db.rollback()
        logger.warning(f"[submissions] duplicate submission by user {user.id} for sub-mission {sub.id}")
        raise ConflictError("A submission for this sub-mission already exists")
    db.refresh(row)
    review.invalidate_for_sub_mission(db, sub.id)
    logger.info(
        f"[submissions] user {user.id} {'created' if created else 'resubmitted'} "
        f"submission {row.id} for sub-mission {sub.id}"
    )
    return row, created


def cancel(db: Session, user: CurrentUser, mission_id: int, sub_mission_id: int) -> Submission:
    _load_target(db, user, mission_id, sub_mission_id)
    row = db.scalar(
        select(Submission).where(
            Submission.user_id == user.id, Submission.sub_mission_id == sub_mission_id
        )
    )
    if row is None:
        raise NotFoundError("Submission not found")
    if row.is_locked:
        raise ConflictError("Approved submissions can not be cancelled")
    db.delete(row)
    db.commit()
    review.invalidate_for_sub_mission(db, sub_mission_id)
    logger.info(f"[submissions] user {user.id} cancelled submission {row.id}")
    return row


# ----------------------------------------------------------------------
# Admin side
# ----------------------------------------------------------------------
def _scoped_submission(db: Session, submission_id: int, scope: Optional[int]) -> Submission:
    row = db.get(Submission, submission_id)
    if row is None:
        raise NotFoundError("Submission not found")
    mission_id = db.scalar(select(SubMission.mission_id).where(SubMission.id == row.sub_mission_id))
    if not review.MissionGraph.load(db).in_scope(mission_id, scope):
        raise NotFoundError("Submission not found")
    return row


def _decide(
    db: Session,
    reviewer: CurrentUser,
    submission_id: int,
    scope: Optional[int],
    new_status: str,
    note: Optional[str],
) -> Submission:
    row = _scoped_submission(db, submission_id, scope)

    res = db.execute(
        update(Submission)
        .where(Submission.id == submission_id, Submission.status == STATUS_SUBMITTED)
        .values(
            status=new_status,
            reviewer_note=note,
            reviewed_by=reviewer.id,
            reviewed_at=datetime.now(timezone.utc),
            is_locked=(new_status == STATUS_APPROVED),
            updated_at=datetime.now(timezone.utc),
        )
        .execution_options(synchronize_session=False)
    )
    if res.rowcount == 0:
        db.rollback()
        db.refresh(row)
        raise ConflictError(f"Submission was already reviewed (status: {row.status})")

    db.commit()
    db.refresh(row)
    review.invalidate_for_sub_mission(db, row.sub_mission_id)
    logger.info(f"[review] submission {submission_id} {new_status} by user {reviewer.id}")
    return row


def approve(
    db: Session, reviewer: CurrentUser, submission_id: int, note: Optional[str], scope: Optional[int]
) -> Submission:
    note = note.strip() if note and note.strip() else None
    return _decide(db, reviewer, submission_id, scope, STATUS_APPROVED, note)


def reject(
    db: Session, reviewer: CurrentUser, submission_id: int, note: Optional[str], scope: Optional[int]
) -> Submission:
    if not note or not note.strip():
        raise ValidationError("A reason is required to reject a submission", field="reviewerNote")
    return _decide(db, reviewer, submission_id, scope, STATUS_REJECTED, note.strip())

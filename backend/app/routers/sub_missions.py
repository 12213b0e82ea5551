# backend/app/routers/sub_missions.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.auth import require_content_admin
from app.db import get_db
from app.errors import NotFoundError, ValidationError
from app.models.sub_mission import SubMission
from app.schemas.sub_mission import (
    SubMissionCreate,
    SubMissionOut,
    SubMissionReorder,
    SubMissionUpdate,
)
from app.services import missions as mission_svc
from app.services.ordering import next_order, reorder_sub_missions
from app.services.review import stats_cache

router = APIRouter(
    prefix="/api/admin/missions/{mission_id}/sub-missions",
    tags=["sub-missions"],
    dependencies=[Depends(require_content_admin)],
)
logger = logging.getLogger(__name__)

_NOT_NULL = (
    "title", "submission_types", "submission_labels", "require_review",
    "sequential_level", "studio_dpi", "studio_file_format", "is_active",
)


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------
def _get_sub_mission(db: Session, mission_id: int, sub_mission_id: int) -> SubMission:
    sub = db.get(SubMission, sub_mission_id)
    if not sub or sub.mission_id != mission_id:
        raise NotFoundError("Sub-mission not found")
    return sub


def _check(db: Session, values: dict, current: Optional[SubMission] = None) -> None:
    """Cross-field rules the request models can't express on their own."""
    def pick(key):
        return values[key] if key in values else (getattr(current, key) if current else None)

    types = pick("submission_types") or []
    labels = pick("submission_labels") or []
    seen = set()
    for label in labels:
        index = label["index"]
        if index >= len(types):
            raise ValidationError(
                f"Label index {index} has no submission type ({len(types)} declared)",
                field="submissionLabels",
            )
        if index in seen:
            raise ValidationError(f"Label index {index} given twice", field="submissionLabels")
        seen.add(index)

    if pick("attendance_type") == "password" and not (pick("attendance_password") or "").strip():
        raise ValidationError(
            "Password attendance needs an attendance password", field="attendancePassword"
        )

    if "action_type_id" in values:
        mission_svc.check_action_type(db, values["action_type_id"])
    mission_svc.check_window(pick("start_date"), pick("end_date"))


# ----------------------------------------------------------------------
# CRUD
# ----------------------------------------------------------------------
@router.get("", response_model=List[SubMissionOut])
def list_sub_missions(mission_id: int, db: Session = Depends(get_db)):
    mission_svc.get_mission(db, mission_id)
    return db.scalars(
        select(SubMission)
        .where(SubMission.mission_id == mission_id)
        .order_by(SubMission.order, SubMission.id)
    ).all()


@router.post("", response_model=SubMissionOut, status_code=201)
def create_sub_mission(mission_id: int, payload: SubMissionCreate, db: Session = Depends(get_db)):
    mission_svc.get_mission(db, mission_id)
    values = payload.model_dump()
    values["title"] = values["title"].strip()
    _check(db, values)

    sub = SubMission(
        mission_id=mission_id,
        order=next_order(db, SubMission.order, SubMission.mission_id == mission_id),
        **values,
    )
    db.add(sub)
    db.commit()
    db.refresh(sub)
    logger.info(f"[sub-missions] mission {mission_id}: created {sub.id} '{sub.title}'")
    return sub


@router.patch("/reorder", response_model=List[SubMissionOut])
def reorder(mission_id: int, payload: SubMissionReorder, db: Session = Depends(get_db)):
    """`subMissionIds` must list every sub-mission of the mission."""
    mission_svc.get_mission(db, mission_id)
    reorder_sub_missions(db, mission_id, payload.sub_mission_ids)
    return list_sub_missions(mission_id, db)


@router.put("/{sub_mission_id}", response_model=SubMissionOut)
def update_sub_mission(
    mission_id: int, sub_mission_id: int, payload: SubMissionUpdate, db: Session = Depends(get_db)
):
    sub = _get_sub_mission(db, mission_id, sub_mission_id)
    values = payload.model_dump(exclude_unset=True)
    for key in _NOT_NULL:
        if key in values and values[key] is None:
            values.pop(key)
    if "title" in values:
        values["title"] = values["title"].strip()
    _check(db, values, sub)

    for key, value in values.items():
        setattr(sub, key, value)
    db.commit()
    db.refresh(sub)
    return sub


@router.patch("/{sub_mission_id}/toggle-active", response_model=SubMissionOut)
def toggle_active(mission_id: int, sub_mission_id: int, db: Session = Depends(get_db)):
    sub = _get_sub_mission(db, mission_id, sub_mission_id)
    sub.is_active = not sub.is_active
    db.commit()
    db.refresh(sub)
    logger.info(f"[sub-missions] {sub.id} is_active={sub.is_active}")
    return sub


@router.delete("/{sub_mission_id}", status_code=204)
def delete_sub_mission(mission_id: int, sub_mission_id: int, db: Session = Depends(get_db)):
    sub = _get_sub_mission(db, mission_id, sub_mission_id)
    db.delete(sub)
    db.commit()
    stats_cache.clear()
    logger.info(f"[sub-missions] mission {mission_id}: deleted {sub_mission_id}")
    return None

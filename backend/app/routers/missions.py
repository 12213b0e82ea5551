# backend/app/routers/missions.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.auth import require_content_admin
from app.constants import VISIBILITY_HOSPITAL, VISIBILITY_PUBLIC
from app.db import get_db
from app.errors import ConflictError, ValidationError
from app.models.mission import Mission
from app.models.sub_mission import SubMission
from app.schemas.mission import (
    MissionCreate,
    MissionDetailOut,
    MissionOut,
    MissionReorder,
    MissionReorderResult,
    MissionStats,
    MissionTreeOut,
    MissionUpdate,
)
from app.services import missions as svc
from app.services.ordering import next_order, normalize_folder_id, reorder_missions
from app.services.review import MissionGraph, stats_cache

router = APIRouter(
    prefix="/api/admin/missions",
    tags=["missions"],
    dependencies=[Depends(require_content_admin)],
)
logger = logging.getLogger(__name__)

# columns that may be left out of a PUT but never nulled by one
_NOT_NULL = ("title", "description", "visibility", "is_active", "is_first_come", "notice_items", "order")


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------
def _order_scope(parent_id: Optional[int], folder_id: Optional[int]):
    if parent_id is not None:
        return (Mission.parent_id == parent_id,)
    return (Mission.parent_id.is_(None), Mission.folder_id == folder_id)


def _commit(db: Session, what: str) -> None:
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.error(f"[missions] IntegrityError on {what}: {e}")
        raise ConflictError(f"Could not {what}: conflicting data")


def _top_level_orders(db: Session) -> list:
    rows = db.execute(
        select(Mission.id, Mission.order, Mission.folder_id)
        .where(Mission.parent_id.is_(None))
        .order_by(Mission.folder_id, Mission.order, Mission.id)
    ).all()
    return [{"id": r.id, "order": r.order, "folder_id": r.folder_id} for r in rows]


# ----------------------------------------------------------------------
# Reads
# ----------------------------------------------------------------------
@router.get("", response_model=List[MissionTreeOut])
def list_missions(
    visibility: Optional[str] = None,
    hospital_id: Optional[int] = Query(None, alias="hospitalId"),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    category_id: Optional[int] = Query(None, alias="categoryId"),
    folder_id: Optional[str] = Query(None, alias="folderId"),
    db: Session = Depends(get_db),
):
    """Mission tree. `folderId=0` selects uncategorized top-level missions."""
    missions = db.scalars(select(Mission).order_by(Mission.order, Mission.id)).all()
    graph = MissionGraph.load(db)

    def keep(m: Mission) -> bool:
        if visibility and m.visibility != visibility:
            return False
        if is_active is not None and m.is_active != is_active:
            return False
        if category_id is not None and m.category_id != category_id:
            return False
        if hospital_id is not None and graph.effective_hospital(m.id) != hospital_id:
            return False
        return True

    kept = [m for m in missions if keep(m)]
    kept_ids = {m.id for m in kept}
    roots = [m for m in kept if m.parent_id is None or m.parent_id not in kept_ids]
    if folder_id is not None:
        folder = normalize_folder_id(folder_id)
        roots = [r for r in roots if r.parent_id is None and r.folder_id == folder]

    return svc.mission_tree(kept, svc.sub_mission_counts(db), roots)


@router.get("/stats", response_model=MissionStats)
def mission_stats(db: Session = Depends(get_db)):
    def count(*criteria) -> int:
        return db.scalar(select(func.count()).select_from(Mission).where(*criteria)) or 0

    return {
        "total": count(),
        "active": count(Mission.is_active.is_(True)),
        "public": count(Mission.visibility == VISIBILITY_PUBLIC),
        "hospital": count(Mission.visibility == VISIBILITY_HOSPITAL),
    }


# ----------------------------------------------------------------------
# Reorder (declared before /{mission_id})
# ----------------------------------------------------------------------
@router.put("/reorder", response_model=MissionReorderResult)
def reorder(payload: MissionReorder, db: Session = Depends(get_db)):
    """Apply {id, order, folderId} items; returns the canonical top-level order."""
    updated, skipped = reorder_missions(db, payload.mission_orders)
    return {"updated": updated, "skipped": skipped, "missions": _top_level_orders(db)}


@router.get("/{mission_id}", response_model=MissionDetailOut)
def get_mission(mission_id: int, db: Session = Depends(get_db)):
    mission = svc.get_mission(db, mission_id)
    missions = db.scalars(select(Mission)).all()
    out = svc.mission_tree(missions, svc.sub_mission_counts(db), [mission])[0]
    out["sub_missions"] = list(mission.sub_missions)
    return out


# ----------------------------------------------------------------------
# Writes
# ----------------------------------------------------------------------
@router.post("", response_model=MissionOut, status_code=201)
def create_mission(payload: MissionCreate, db: Session = Depends(get_db)):
    values = payload.model_dump()
    values["title"] = values["title"].strip()
    values["folder_id"] = normalize_folder_id(values.get("folder_id"))

    if values["parent_id"] is not None and values["folder_id"] is not None:
        raise ValidationError("Child missions can not be placed in a folder", field="folderId")
    svc.apply_visibility(values)
    svc.check_references(db, values)
    svc.check_parent(db, None, values["parent_id"])
    svc.check_window(values["start_date"], values["end_date"])

    values["order"] = next_order(db, Mission.order, *_order_scope(values["parent_id"], values["folder_id"]))
    mission = Mission(**values)
    db.add(mission)
    _commit(db, "create mission")
    db.refresh(mission)
    logger.info(f"[missions] created {mission.id} '{mission.title}' (order {mission.order})")
    return svc.serialize_mission(mission)


@router.put("/{mission_id}", response_model=MissionOut)
def update_mission(mission_id: int, payload: MissionUpdate, db: Session = Depends(get_db)):
    """Partial update. A `{folderId}`-only body moves the mission between folders."""
    mission = svc.get_mission(db, mission_id)
    values = payload.model_dump(exclude_unset=True)
    for key in _NOT_NULL:
        if key in values and values[key] is None:
            values.pop(key)
    if "title" in values:
        values["title"] = values["title"].strip()
    if "folder_id" in values:
        values["folder_id"] = normalize_folder_id(values["folder_id"])
    if "parent_id" in values:
        svc.check_parent(db, mission.id, values["parent_id"])

    parent_id = values.get("parent_id", mission.parent_id)
    if parent_id is not None:
        if values.get("folder_id") is not None:
            raise ValidationError("Child missions can not be placed in a folder", field="folderId")
        values["folder_id"] = None

    svc.apply_visibility(values, mission)
    svc.check_references(db, values)
    svc.check_window(values.get("start_date", mission.start_date), values.get("end_date", mission.end_date))

    folder_id = values.get("folder_id", mission.folder_id)
    moved = parent_id != mission.parent_id or folder_id != mission.folder_id
    if moved and "order" not in values:
        values["order"] = next_order(db, Mission.order, *_order_scope(parent_id, folder_id))

    for key, value in values.items():
        setattr(mission, key, value)
    _commit(db, "update mission")
    db.refresh(mission)
    if "parent_id" in values or "hospital_id" in values:
        # effective hospitals may have shifted under cached counts
        stats_cache.clear()
    counts = svc.sub_mission_counts(db)
    return svc.serialize_mission(mission, counts)


@router.patch("/{mission_id}/toggle-active", response_model=MissionOut)
def toggle_active(mission_id: int, db: Session = Depends(get_db)):
    mission = svc.get_mission(db, mission_id)
    mission.is_active = not mission.is_active
    db.commit()
    db.refresh(mission)
    logger.info(f"[missions] {mission.id} is_active={mission.is_active}")
    return svc.serialize_mission(mission, svc.sub_mission_counts(db))


@router.delete("/{mission_id}", status_code=204)
def delete_mission(mission_id: int, db: Session = Depends(get_db)):
    """Removes the mission, its child missions, their sub-missions and submissions."""
    mission = svc.get_mission(db, mission_id)
    descendants = len(MissionGraph.load(db).subtree(mission_id)) - 1
    subs = db.scalar(
        select(func.count()).select_from(SubMission).where(SubMission.mission_id == mission_id)
    )
    db.delete(mission)
    db.commit()
    stats_cache.clear()
    logger.info(
        f"[missions] deleted {mission_id} with {descendants} child missions and {subs} sub-missions"
    )
    return None

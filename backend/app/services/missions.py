# backend/app/services/missions.py
"""Mission invariants and serialization shared by the admin and user routers."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.constants import VISIBILITY_HOSPITAL, VISIBILITY_PUBLIC
from app.errors import NotFoundError, ValidationError
from app.models.action_type import ActionType
from app.models.hospital import Hospital
from app.models.mission import Mission
from app.models.mission_category import MissionCategory
from app.models.mission_folder import MissionFolder
from app.models.sub_mission import SubMission
from app.services.periods import period_status


def get_mission(db: Session, mission_id: int) -> Mission:
    mission = db.get(Mission, mission_id)
    if not mission:
        raise NotFoundError("Mission not found")
    return mission


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive timestamps; they are stored as UTC
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def check_window(start: Optional[datetime], end: Optional[datetime], field: str = "endDate") -> None:
    if start is not None and end is not None and _as_utc(end) < _as_utc(start):
        raise ValidationError("End date must be on or after the start date", field=field)


def apply_visibility(values: dict, current: Optional[Mission] = None) -> None:
    """hospital visibility needs a hospital; public visibility drops it."""
    visibility = values.get("visibility", current.visibility if current else VISIBILITY_PUBLIC)
    hospital_id = values["hospital_id"] if "hospital_id" in values else (
        current.hospital_id if current else None
    )
    if visibility == VISIBILITY_HOSPITAL and hospital_id is None:
        raise ValidationError("Hospital-only missions must select a hospital", field="hospitalId")
    if visibility == VISIBILITY_PUBLIC and hospital_id is not None:
        values["hospital_id"] = None


def check_references(db: Session, values: dict) -> None:
    """Referenced hospital / category / folder must exist."""
    checks = (
        ("hospital_id", Hospital, "hospitalId", "Unknown hospital"),
        ("category_id", MissionCategory, "categoryId", "Unknown category"),
        ("folder_id", MissionFolder, "folderId", "Unknown folder"),
    )
    for key, model, field, message in checks:
        ref = values.get(key)
        if ref is not None and db.get(model, ref) is None:
            raise ValidationError(f"{message}: {ref}", field=field)


def check_action_type(db: Session, action_type_id: Optional[int]) -> None:
    if action_type_id is not None and db.get(ActionType, action_type_id) is None:
        raise ValidationError(f"Unknown action type: {action_type_id}", field="actionTypeId")


def check_parent(db: Session, mission_id: Optional[int], parent_id: Optional[int]) -> None:
    """Parent must exist and must not be the mission itself or one of its descendants."""
    if parent_id is None:
        return
    parent = db.get(Mission, parent_id)
    if parent is None:
        raise ValidationError(f"Unknown parent mission: {parent_id}", field="parentId")
    if mission_id is None:
        return
    # walk up from the new parent; meeting ourselves means a cycle
    current, seen = parent, set()
    while current is not None and current.id not in seen:
        if current.id == mission_id:
            raise ValidationError("A mission can not be nested under itself", field="parentId")
        seen.add(current.id)
        current = current.parent


def sub_mission_counts(db: Session) -> Dict[int, int]:
    rows = db.execute(
        select(SubMission.mission_id, func.count()).group_by(SubMission.mission_id)
    ).all()
    return {mid: n for mid, n in rows}


def serialize_mission(m: Mission, sub_counts: Optional[Dict[int, int]] = None) -> dict:
    return {
        "id": m.id,
        "title": m.title,
        "description": m.description or "",
        "category_id": m.category_id,
        "visibility": m.visibility,
        "hospital_id": m.hospital_id,
        "parent_id": m.parent_id,
        "folder_id": m.folder_id,
        "order": m.order,
        "is_active": m.is_active,
        "start_date": m.start_date,
        "end_date": m.end_date,
        "event_date": m.event_date,
        "event_end_time": m.event_end_time,
        "capacity": m.capacity,
        "is_first_come": m.is_first_come,
        "notice_items": m.notice_items or [],
        "header_image_url": m.header_image_url,
        "gift_image_url": m.gift_image_url,
        "gift_description": m.gift_description,
        "venue_image_url": m.venue_image_url,
        "period_status": period_status(m.start_date, m.end_date),
        "sub_mission_count": (sub_counts or {}).get(m.id, 0),
        "created_at": m.created_at,
        "updated_at": m.updated_at,
    }


def mission_tree(missions: List[Mission], sub_counts: Dict[int, int], roots: List[Mission]) -> List[dict]:
    """Nest `missions` under their parents starting from `roots`."""
    children: Dict[int, List[Mission]] = {}
    for m in missions:
        if m.parent_id is not None:
            children.setdefault(m.parent_id, []).append(m)

    def build(m: Mission, seen: frozenset) -> dict:
        out = serialize_mission(m, sub_counts)
        kids = sorted(children.get(m.id, []), key=lambda c: (c.order, c.id))
        out["child_missions"] = [build(c, seen | {m.id}) for c in kids if c.id not in seen]
        return out

    return [build(r, frozenset()) for r in sorted(roots, key=lambda r: (r.order, r.id))]

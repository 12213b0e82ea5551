# backend/app/services/ordering.py
"""
Explicit `order` maintenance for folders, missions, sub-missions and
categories. Clients send the full desired order; every batch is validated
before the first write and committed as one unit.
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence, Union

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.constants import UNCATEGORIZED_FOLDER
from app.errors import ConflictError, ValidationError
from app.models.mission import Mission
from app.models.mission_category import MissionCategory
from app.models.mission_folder import MissionFolder
from app.models.sub_mission import SubMission
from app.schemas.mission import MissionOrderItem

logger = logging.getLogger(__name__)


def normalize_folder_id(value: Union[int, str, None]) -> Optional[int]:
    """Map the drag-and-drop folder reference to a folder id; "0" means none."""
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if value in ("", UNCATEGORIZED_FOLDER):
            return None
        try:
            value = int(value)
        except ValueError:
            raise ValidationError(f"Invalid folderId: {value!r}", field="folderId")
    if value == 0:
        return None
    if value < 0:
        raise ValidationError(f"Invalid folderId: {value}", field="folderId")
    return value


def next_order(db: Session, column, *criteria) -> int:
    """max(order) + 1 within the scope given by `criteria`; 0 for an empty scope."""
    current = db.scalar(select(func.max(column)).where(*criteria))
    return 0 if current is None else current + 1


def _check_unique(ids: Sequence[int], field: str) -> None:
    if len(set(ids)) != len(ids):
        raise ValidationError(f"{field} contains duplicates", field=field)


def _apply_sequence(rows_by_id: dict, ids: Sequence[int]) -> int:
    """Position in `ids` becomes the order; untouched rows are not written."""
    changed = 0
    for index, row_id in enumerate(ids):
        row = rows_by_id[row_id]
        if row.order != index:
            row.order = index
            changed += 1
    return changed


def _reorder_full_set(db: Session, model, ids: List[int], field: str, *scope) -> int:
    _check_unique(ids, field)
    rows = db.scalars(select(model).where(*scope)).all()
    rows_by_id = {r.id: r for r in rows}

    unknown = sorted(set(ids) - rows_by_id.keys())
    missing = sorted(rows_by_id.keys() - set(ids))
    if unknown or missing:
        # the client is working from an outdated list
        raise ConflictError(
            f"Stale {field} batch (unknown: {unknown}, missing: {missing}); reload and retry"
        )

    changed = _apply_sequence(rows_by_id, ids)
    if changed:
        db.commit()
    return changed


def reorder_folders(db: Session, folder_ids: List[int]) -> int:
    changed = _reorder_full_set(db, MissionFolder, folder_ids, "folderIds")
    logger.info(f"[ordering] folders reordered ({changed} changed)")
    return changed


def reorder_categories(db: Session, category_ids: List[int]) -> int:
    changed = _reorder_full_set(db, MissionCategory, category_ids, "categoryIds")
    logger.info(f"[ordering] categories reordered ({changed} changed)")
    return changed


def reorder_sub_missions(db: Session, mission_id: int, sub_mission_ids: List[int]) -> int:
    changed = _reorder_full_set(
        db, SubMission, sub_mission_ids, "subMissionIds", SubMission.mission_id == mission_id
    )
    logger.info(f"[ordering] mission {mission_id}: sub-missions reordered ({changed} changed)")
    return changed


def reorder_missions(db: Session, items: Iterable[MissionOrderItem]) -> tuple[int, int]:
    """
    Apply {id, order, folderId} to top-level missions.
    Returns (updated, skipped); skipped items already had that order and folder.
    """
    items = list(items)
    _check_unique([it.id for it in items], "missionOrders")
    if not items:
        return 0, 0

    targets = [(it.id, it.order, normalize_folder_id(it.folder_id)) for it in items]

    missions = db.scalars(select(Mission).where(Mission.id.in_([t[0] for t in targets]))).all()
    by_id = {m.id: m for m in missions}
    unknown = sorted({t[0] for t in targets} - by_id.keys())
    if unknown:
        raise ConflictError(f"Stale missionOrders batch: missions {unknown} no longer exist")

    children = sorted(m.id for m in missions if m.parent_id is not None)
    if children:
        raise ValidationError(
            f"Child missions can not be reordered independently: {children}", field="missionOrders"
        )

    folder_ids = {t[2] for t in targets if t[2] is not None}
    if folder_ids:
        found = set(db.scalars(select(MissionFolder.id).where(MissionFolder.id.in_(folder_ids))).all())
        gone = sorted(folder_ids - found)
        if gone:
            raise ConflictError(f"Stale missionOrders batch: folders {gone} no longer exist")

    updated = skipped = 0
    for mission_id, order, folder_id in targets:
        m = by_id[mission_id]
        if m.order == order and m.folder_id == folder_id:
            skipped += 1
            continue
        m.order = order
        m.folder_id = folder_id
        updated += 1

    if updated:
        db.commit()
    logger.info(f"[ordering] missions reordered ({updated} updated, {skipped} unchanged)")
    return updated, skipped

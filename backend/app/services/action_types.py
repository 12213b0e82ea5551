# backend/app/services/action_types.py
"""Action type registry. Seeded system rows are read-only."""
from __future__ import annotations

import logging
from typing import List

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.errors import AuthorizationError, NotFoundError
from app.models.action_type import ActionType
from app.models.sub_mission import SubMission
from app.services.ordering import next_order

logger = logging.getLogger(__name__)

SYSTEM_ACTION_TYPES = ("apply", "submit", "attend", "review")


def list_action_types(db: Session, active_only: bool = False) -> List[ActionType]:
    q = select(ActionType).order_by(ActionType.order, ActionType.id)
    if active_only:
        q = q.where(ActionType.is_active.is_(True))
    return list(db.scalars(q).all())


def _get_mutable(db: Session, action_type_id: int) -> ActionType:
    row = db.get(ActionType, action_type_id)
    if row is None:
        raise NotFoundError("Action type not found")
    if row.is_system:
        logger.warning(f"[action-types] refused to modify system type {row.id} ({row.name})")
        raise AuthorizationError("Cannot modify system type")
    return row


def create_action_type(db: Session, values: dict) -> ActionType:
    if values.get("order") is None:
        values["order"] = next_order(db, ActionType.order)
    row = ActionType(**values, is_system=False)
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info(f"[action-types] created {row.id} ({row.name})")
    return row


def update_action_type(db: Session, action_type_id: int, values: dict) -> ActionType:
    row = _get_mutable(db, action_type_id)
    for key, value in values.items():
        setattr(row, key, value)
    db.commit()
    db.refresh(row)
    return row


def delete_action_type(db: Session, action_type_id: int) -> None:
    row = _get_mutable(db, action_type_id)
    db.execute(
        update(SubMission)
        .where(SubMission.action_type_id == action_type_id)
        .values(action_type_id=None)
    )
    db.delete(row)
    db.commit()
    logger.info(f"[action-types] deleted {action_type_id}")


def seed_system_action_types(db: Session) -> int:
    """Insert the missing system rows; returns how many were added."""
    existing = set(db.scalars(select(ActionType.name).where(ActionType.is_system.is_(True))).all())
    added = 0
    for index, name in enumerate(SYSTEM_ACTION_TYPES):
        if name in existing:
            continue
        db.add(ActionType(name=name, order=index, is_system=True, is_active=True))
        added += 1
    if added:
        db.commit()
    return added

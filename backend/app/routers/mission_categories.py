# backend/app/routers/mission_categories.py
import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.auth import require_content_admin
from app.db import get_db
from app.errors import NotFoundError, ValidationError
from app.models.mission import Mission
from app.models.mission_category import MissionCategory
from app.schemas.category import CategoryCreate, CategoryOut, CategoryReorder, CategoryUpdate
from app.services.ordering import next_order, reorder_categories

router = APIRouter(
    prefix="/api/admin/mission-categories",
    tags=["mission-categories"],
    dependencies=[Depends(require_content_admin)],
)
logger = logging.getLogger(__name__)


def _get_category(db: Session, category_id: int) -> MissionCategory:
    row = db.get(MissionCategory, category_id)
    if not row:
        raise NotFoundError("Category not found")
    return row


def _ordered(db: Session) -> List[MissionCategory]:
    return list(
        db.scalars(select(MissionCategory).order_by(MissionCategory.order, MissionCategory.id)).all()
    )


@router.get("", response_model=List[CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return _ordered(db)


@router.post("", response_model=CategoryOut, status_code=201)
def create_category(payload: CategoryCreate, db: Session = Depends(get_db)):
    name = payload.name.strip()
    if not name:
        raise ValidationError("Name required", field="name")
    row = MissionCategory(
        name=name,
        description=payload.description,
        emoji=payload.emoji,
        is_active=payload.is_active,
        order=next_order(db, MissionCategory.order),
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info(f"[categories] created {row.id} '{row.name}'")
    return row


@router.patch("/reorder", response_model=List[CategoryOut])
def reorder(payload: CategoryReorder, db: Session = Depends(get_db)):
    reorder_categories(db, payload.category_ids)
    return _ordered(db)


@router.put("/{category_id}", response_model=CategoryOut)
def update_category(category_id: int, payload: CategoryUpdate, db: Session = Depends(get_db)):
    row = _get_category(db, category_id)
    values = payload.model_dump(exclude_unset=True)
    if values.get("name") is not None:
        values["name"] = values["name"].strip()
        if not values["name"]:
            raise ValidationError("Name required", field="name")
    else:
        values.pop("name", None)
    if values.get("is_active") is None:
        values.pop("is_active", None)
    for key, value in values.items():
        setattr(row, key, value)
    db.commit()
    db.refresh(row)
    return row


@router.delete("/{category_id}", status_code=204)
def delete_category(category_id: int, db: Session = Depends(get_db)):
    row = _get_category(db, category_id)
    used = db.scalar(
        select(func.count()).select_from(Mission).where(Mission.category_id == category_id)
    )
    if used:
        raise ValidationError(f"Category is used by {used} missions", field="categoryId")
    db.delete(row)
    db.commit()
    logger.info(f"[categories] deleted {category_id}")
    return None

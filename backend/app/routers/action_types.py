# backend/app/routers/action_types.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth import CurrentUser, get_current_user, require_content_admin
from app.db import get_db
from app.errors import ValidationError
from app.schemas.action_type import ActionTypeCreate, ActionTypeOut, ActionTypeUpdate
from app.services import action_types as svc

router = APIRouter(prefix="/api/action-types", tags=["action-types"])


@router.get("", response_model=List[ActionTypeOut])
def list_action_types(
    _: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)
):
    return svc.list_action_types(db)


@router.get("/active", response_model=List[ActionTypeOut])
def list_active_action_types(
    _: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)
):
    """What the sub-mission editor offers."""
    return svc.list_action_types(db, active_only=True)


@router.post("", response_model=ActionTypeOut, status_code=201)
def create_action_type(
    payload: ActionTypeCreate,
    _: CurrentUser = Depends(require_content_admin),
    db: Session = Depends(get_db),
):
    values = payload.model_dump()
    values["name"] = values["name"].strip()
    if not values["name"]:
        raise ValidationError("Name required", field="name")
    return svc.create_action_type(db, values)


@router.patch("/{action_type_id}", response_model=ActionTypeOut)
def update_action_type(
    action_type_id: int,
    payload: ActionTypeUpdate,
    _: CurrentUser = Depends(require_content_admin),
    db: Session = Depends(get_db),
):
    values = payload.model_dump(exclude_unset=True)
    for key in ("name", "order", "is_active"):
        if key in values and values[key] is None:
            values.pop(key)
    if "name" in values:
        values["name"] = values["name"].strip()
        if not values["name"]:
            raise ValidationError("Name required", field="name")
    return svc.update_action_type(db, action_type_id, values)


@router.delete("/{action_type_id}", status_code=204)
def delete_action_type(
    action_type_id: int,
    _: CurrentUser = Depends(require_content_admin),
    db: Session = Depends(get_db),
):
    """System types answer 403; sub-missions using the type are detached."""
    svc.delete_action_type(db, action_type_id)
    return None

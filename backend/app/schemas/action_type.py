# backend/app/schemas/action_type.py
from datetime import datetime
from typing import Optional

from pydantic import Field

from app.schemas.common import CamelModel


class ActionTypeCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=64)
    icon_url: Optional[str] = None
    order: Optional[int] = None
    is_active: bool = True


class ActionTypeUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=64)
    icon_url: Optional[str] = None
    order: Optional[int] = None
    is_active: Optional[bool] = None


class ActionTypeOut(CamelModel):
    id: int
    name: str
    icon_url: Optional[str] = None
    order: int
    is_system: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime

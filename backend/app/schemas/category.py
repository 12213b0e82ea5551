# backend/app/schemas/category.py
from typing import List, Optional

from pydantic import Field

from app.schemas.common import CamelModel


class CategoryCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=128)
    description: Optional[str] = None
    emoji: Optional[str] = Field(None, max_length=16)
    is_active: bool = True


class CategoryUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=128)
    description: Optional[str] = None
    emoji: Optional[str] = Field(None, max_length=16)
    is_active: Optional[bool] = None


class CategoryOut(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    emoji: Optional[str] = None
    order: int
    is_active: bool


class CategoryReorder(CamelModel):
    category_ids: List[int]

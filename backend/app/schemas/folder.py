# backend/app/schemas/folder.py
from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from app.constants import DEFAULT_FOLDER_COLOR
from app.schemas.common import CamelModel

_HEX = r"^#[0-9a-fA-F]{6}$"


class FolderCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=128)
    color: str = Field(DEFAULT_FOLDER_COLOR, pattern=_HEX)

    @field_validator("name")
    @classmethod
    def _strip(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v


class FolderUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=128)
    color: Optional[str] = Field(None, pattern=_HEX)
    is_collapsed: Optional[bool] = None


class FolderOut(CamelModel):
    id: int
    name: str
    color: str
    order: int
    is_collapsed: bool
    mission_count: int = 0
    created_at: datetime
    updated_at: datetime


class FolderReorder(CamelModel):
    folder_ids: List[int]

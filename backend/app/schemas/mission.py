# backend/app/schemas/mission.py
from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional, Union

from pydantic import Field, field_validator

from app.schemas.common import CamelModel
from app.schemas.sub_mission import SubMissionOut

Visibility = Literal["public", "hospital", "dev"]
# drag-and-drop clients send "0" (or 0) for "uncategorized"
FolderRef = Optional[Union[int, str]]

_DATE_FIELDS = ("start_date", "end_date", "event_date", "event_end_time")


class NoticeItem(CamelModel):
    title: str = Field(..., min_length=1)
    content: str = ""


class _MissionFields(CamelModel):
    @field_validator(*_DATE_FIELDS, mode="before", check_fields=False)
    @classmethod
    def _blank_date_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class MissionCreate(_MissionFields):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    category_id: Optional[int] = None
    visibility: Visibility = "public"
    hospital_id: Optional[int] = None
    parent_id: Optional[int] = None
    folder_id: FolderRef = None
    is_active: bool = True

    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    event_date: Optional[datetime] = None
    event_end_time: Optional[datetime] = None
    capacity: Optional[int] = Field(None, ge=1)
    is_first_come: bool = False
    notice_items: List[NoticeItem] = []

    header_image_url: Optional[str] = None
    gift_image_url: Optional[str] = None
    gift_description: Optional[str] = None
    venue_image_url: Optional[str] = None


class MissionUpdate(_MissionFields):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    category_id: Optional[int] = None
    visibility: Optional[Visibility] = None
    hospital_id: Optional[int] = None
    parent_id: Optional[int] = None
    folder_id: FolderRef = None
    order: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None

    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    event_date: Optional[datetime] = None
    event_end_time: Optional[datetime] = None
    capacity: Optional[int] = Field(None, ge=1)
    is_first_come: Optional[bool] = None
    notice_items: Optional[List[NoticeItem]] = None

    header_image_url: Optional[str] = None
    gift_image_url: Optional[str] = None
    gift_description: Optional[str] = None
    venue_image_url: Optional[str] = None


class MissionOut(CamelModel):
    id: int
    title: str
    description: str
    category_id: Optional[int] = None
    visibility: str
    hospital_id: Optional[int] = None
    parent_id: Optional[int] = None
    folder_id: Optional[int] = None
    order: int
    is_active: bool

    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    event_date: Optional[datetime] = None
    event_end_time: Optional[datetime] = None
    capacity: Optional[int] = None
    is_first_come: bool
    notice_items: List[NoticeItem] = []

    header_image_url: Optional[str] = None
    gift_image_url: Optional[str] = None
    gift_description: Optional[str] = None
    venue_image_url: Optional[str] = None

    period_status: str
    sub_mission_count: int = 0
    created_at: datetime
    updated_at: datetime


class MissionTreeOut(MissionOut):
    child_missions: List[MissionTreeOut] = []


class MissionDetailOut(MissionTreeOut):
    sub_missions: List[SubMissionOut] = []


class MissionOrderItem(CamelModel):
    id: int
    order: int = Field(..., ge=0)
    folder_id: FolderRef = None


class MissionReorder(CamelModel):
    mission_orders: List[MissionOrderItem]


class MissionOrderOut(CamelModel):
    id: int
    order: int
    folder_id: Optional[int] = None


class MissionReorderResult(CamelModel):
    updated: int
    skipped: int
    missions: List[MissionOrderOut]


class MissionStats(CamelModel):
    total: int
    active: int
    public: int
    hospital: int

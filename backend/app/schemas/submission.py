# backend/app/schemas/submission.py
from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import Field

from app.schemas.common import CamelModel


# One record per filled slot; `index` addresses the sub-mission's submissionTypes.
class _Slot(CamelModel):
    index: int = Field(..., ge=0)


class FileSlot(_Slot):
    type: Literal["file"]
    url: str = Field(..., min_length=1)
    file_name: Optional[str] = None


class ImageSlot(_Slot):
    type: Literal["image"]
    url: str = Field(..., min_length=1)


class LinkSlot(_Slot):
    type: Literal["link"]
    url: str = Field(..., pattern=r"^https?://")


class TextSlot(_Slot):
    type: Literal["text"]
    content: str = Field(..., min_length=1)


class ReviewSlot(_Slot):
    type: Literal["review"]
    content: str = Field(..., min_length=1)
    rating: Optional[int] = Field(None, ge=1, le=5)


class StudioSlot(_Slot):
    type: Literal["studio_submit"]
    project_id: int
    url: Optional[str] = None


class AttendanceSlot(_Slot):
    type: Literal["attendance"]
    # checked on submit, never stored or echoed back
    password: Optional[str] = Field(None, exclude=True)
    qr_token: Optional[str] = None


SubmissionSlot = Annotated[
    Union[FileSlot, ImageSlot, LinkSlot, TextSlot, ReviewSlot, StudioSlot, AttendanceSlot],
    Field(discriminator="type"),
]


class SubmissionIn(CamelModel):
    slots: List[SubmissionSlot] = Field(..., min_length=1)


class SubmissionOut(CamelModel):
    id: int
    user_id: int
    sub_mission_id: int
    slots: List[SubmissionSlot]
    status: str
    is_locked: bool
    reviewer_note: Optional[str] = None
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    submitted_at: datetime
    updated_at: datetime


class ReviewSubmissionOut(SubmissionOut):
    sub_mission_title: str
    mission_id: int
    mission_title: str
    hospital_id: Optional[int] = None


class ReviewDecision(CamelModel):
    reviewer_note: Optional[str] = None

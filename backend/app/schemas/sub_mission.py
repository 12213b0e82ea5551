# backend/app/schemas/sub_mission.py
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field, field_validator

from app.schemas.common import CamelModel

SubmissionType = Literal["file", "image", "link", "text", "review", "studio_submit", "attendance"]


class SubmissionLabel(CamelModel):
    """Custom label for the submission type at position `index`."""

    index: int = Field(..., ge=0)
    label: str = Field(..., min_length=1, max_length=100)


class _SubMissionFields(CamelModel):
    @field_validator("start_date", "end_date", mode="before", check_fields=False)
    @classmethod
    def _blank_date_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("submission_types", check_fields=False)
    @classmethod
    def _unique_types(cls, v):
        if v is not None and len(set(v)) != len(v):
            raise ValueError("submissionTypes must not repeat")
        return v


class SubMissionCreate(_SubMissionFields):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    action_type_id: Optional[int] = None
    submission_types: List[SubmissionType] = Field(default_factory=lambda: ["file"], min_length=1)
    submission_labels: List[SubmissionLabel] = []
    require_review: bool = False
    sequential_level: int = Field(0, ge=0)
    attendance_type: Optional[Literal["password", "qrcode"]] = None
    attendance_password: Optional[str] = None
    studio_dpi: Literal[150, 300] = 300
    studio_file_format: Literal["webp", "jpeg", "pdf"] = "pdf"
    party_template_project_id: Optional[int] = None
    party_max_pages: Optional[int] = Field(None, ge=1)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: bool = True


class SubMissionUpdate(_SubMissionFields):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    action_type_id: Optional[int] = None
    submission_types: Optional[List[SubmissionType]] = Field(None, min_length=1)
    submission_labels: Optional[List[SubmissionLabel]] = None
    require_review: Optional[bool] = None
    sequential_level: Optional[int] = Field(None, ge=0)
    attendance_type: Optional[Literal["password", "qrcode"]] = None
    attendance_password: Optional[str] = None
    studio_dpi: Optional[Literal[150, 300]] = None
    studio_file_format: Optional[Literal["webp", "jpeg", "pdf"]] = None
    party_template_project_id: Optional[int] = None
    party_max_pages: Optional[int] = Field(None, ge=1)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: Optional[bool] = None


class SubMissionOut(CamelModel):
    id: int
    mission_id: int
    title: str
    description: Optional[str] = None
    action_type_id: Optional[int] = None
    submission_types: List[str]
    submission_labels: List[SubmissionLabel] = []
    require_review: bool
    sequential_level: int
    attendance_type: Optional[str] = None
    studio_dpi: int
    studio_file_format: str
    party_template_project_id: Optional[int] = None
    party_max_pages: Optional[int] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    order: int
    is_active: bool
    created_at: datetime
    updated_at: datetime


class SubMissionReorder(CamelModel):
    sub_mission_ids: List[int]

# backend/app/schemas/user_mission.py
from datetime import datetime
from typing import List, Optional

from app.schemas.common import CamelModel
from app.schemas.mission import NoticeItem
from app.schemas.sub_mission import SubmissionLabel
from app.schemas.submission import SubmissionOut


class UserMissionOut(CamelModel):
    id: int
    title: str
    description: str
    category_id: Optional[int] = None
    visibility: str
    header_image_url: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    period_status: str
    total_sub_missions: int
    completed_sub_missions: int
    progress_percent: int


class UserSubMissionOut(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    submission_types: List[str]
    submission_labels: List[SubmissionLabel] = []
    sequential_level: int
    attendance_type: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    period_status: str
    unlocked: bool
    submission: Optional[SubmissionOut] = None


class UserMissionDetail(UserMissionOut):
    event_date: Optional[datetime] = None
    event_end_time: Optional[datetime] = None
    capacity: Optional[int] = None
    is_first_come: bool = False
    notice_items: List[NoticeItem] = []
    gift_image_url: Optional[str] = None
    gift_description: Optional[str] = None
    venue_image_url: Optional[str] = None
    sub_missions: List[UserSubMissionOut] = []


class MissionProgressOut(CamelModel):
    id: int
    user_id: int
    mission_id: int
    mission_title: str
    header_image_url: Optional[str] = None
    status: str
    started_at: datetime
    completed_at: Optional[datetime] = None
    total_sub_missions: int
    completed_sub_missions: int
    progress_percent: int
    created_at: datetime
    updated_at: datetime

# backend/app/schemas/review.py
from __future__ import annotations

from typing import List, Optional

from app.schemas.common import CamelModel, ReviewCounts


class MissionStatsNode(CamelModel):
    id: int
    title: str
    visibility: str
    hospital_id: Optional[int] = None
    folder_id: Optional[int] = None
    order: int
    is_active: bool
    period_status: str
    sub_mission_count: int
    stats: ReviewCounts
    child_missions: List[MissionStatsNode] = []


class SubMissionStatsOut(CamelModel):
    id: int
    title: str
    order: int
    is_active: bool
    sequential_level: int
    require_review: bool
    period_status: str
    stats: ReviewCounts

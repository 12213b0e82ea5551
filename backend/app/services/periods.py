# backend/app/services/periods.py
"""Three-way status (upcoming / open / closed) of an optional date window."""
from __future__ import annotations

import os
from datetime import date, datetime, timezone
from typing import Optional, Union
from zoneinfo import ZoneInfo

from app.constants import PERIOD_CLOSED, PERIOD_OPEN, PERIOD_UPCOMING

APP_TZ = os.getenv("APP_TZ", "Asia/Seoul")

DateLike = Union[date, datetime, None]


def _local_day(value: DateLike, tz: ZoneInfo) -> Optional[date]:
    if value is None:
        return None
    if not isinstance(value, datetime):
        return value
    if value.tzinfo is None:
        # stored timestamps are UTC
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(tz).date()


def period_status(
    start: DateLike,
    end: DateLike,
    now: Optional[datetime] = None,
    tz_name: Optional[str] = None,
) -> str:
    """
    Compare calendar days in the app timezone, both bounds inclusive.
    A missing bound never restricts.
    """
    tz = ZoneInfo(tz_name or APP_TZ)
    today = _local_day(now or datetime.now(timezone.utc), tz)

    start_day = _local_day(start, tz)
    if start_day is not None and today < start_day:
        return PERIOD_UPCOMING

    end_day = _local_day(end, tz)
    if end_day is not None and today > end_day:
        return PERIOD_CLOSED

    return PERIOD_OPEN


def is_open(start: DateLike, end: DateLike, now: Optional[datetime] = None) -> bool:
    return period_status(start, end, now) == PERIOD_OPEN

"""Tests for period status (upcoming / open / closed) in the app timezone."""

from datetime import date, datetime, timezone

import pytest

from app.services.periods import is_open, period_status

JAN_START = date(2025, 1, 1)
JAN_END = date(2025, 1, 31)


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


class TestWindowLiterals:

    @pytest.mark.parametrize(
        "now, expected",
        [
            (utc(2024, 12, 1, 3), "upcoming"),
            (utc(2025, 1, 15, 3), "open"),
            (utc(2025, 2, 1, 3), "closed"),
        ],
    )
    def test_january_window(self, now, expected):
        assert period_status(JAN_START, JAN_END, now, tz_name="Asia/Seoul") == expected

    def test_bounds_are_inclusive(self):
        # 2025-01-31 23:00 in Seoul
        assert period_status(JAN_START, JAN_END, utc(2025, 1, 31, 14), tz_name="Asia/Seoul") == "open"
        # 2025-01-01 00:30 in Seoul
        assert period_status(JAN_START, JAN_END, utc(2024, 12, 31, 15, 30), tz_name="Asia/Seoul") == "open"

    def test_missing_bounds_never_restrict(self):
        now = utc(2030, 6, 1)
        assert period_status(None, None, now) == "open"
        assert period_status(None, JAN_END, now) == "closed"
        assert period_status(JAN_START, None, now) == "open"
        assert is_open(None, None, now)


class TestTimezone:

    def test_calendar_day_follows_app_timezone(self):
        # 15:00 UTC on Jan 31 is already Feb 1 in Seoul
        end = utc(2025, 1, 31, 15)
        now = utc(2025, 2, 1, 1)
        assert period_status(None, end, now, tz_name="Asia/Seoul") == "open"
        assert period_status(None, end, now, tz_name="UTC") == "closed"

    def test_naive_datetimes_are_utc(self):
        naive_end = datetime(2025, 1, 31, 15)
        assert period_status(None, naive_end, utc(2025, 2, 1, 1), tz_name="Asia/Seoul") == "open"

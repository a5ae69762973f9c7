"""Tests for the time window resolver."""

from __future__ import annotations

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from lifelog.core.exceptions import InvalidTimezoneError, ValidationError
from lifelog.services.time_window import (
    TimeWindow,
    day_window,
    local_date,
    month_window,
    parse_day,
    parse_month,
    resolve_timezone,
    rolling_window,
    today_window,
    week_window,
)
from lifelog.utils.clock import to_ms

HOUR_MS = 3_600_000


def utc_ms(*args: int) -> int:
    """Epoch ms of a UTC wall-clock time."""
    return to_ms(datetime(*args, tzinfo=timezone.utc))


# =============================================================================
# Parsing
# =============================================================================


class TestParseDay:
    """Tests for YYYY-MM-DD parsing."""

    def test_valid_day(self):
        assert parse_day("2025-03-09") == date(2025, 3, 9)

    def test_leap_day(self):
        assert parse_day("2024-02-29") == date(2024, 2, 29)

    @pytest.mark.parametrize("value", ["2025-02-31", "2025-04-31", "2023-02-29"])
    def test_nonexistent_day_rejected(self, value):
        with pytest.raises(ValidationError) as exc_info:
            parse_day(value)
        assert exc_info.value.field == "date"
        assert "date" in exc_info.value.message

    @pytest.mark.parametrize(
        "value", ["2025-3-9", "20250309", "2025-13-01", "2025-03-09T00:00", "2025-03-09\n", "tomorrow"]
    )
    def test_bad_format_rejected(self, value):
        with pytest.raises(ValidationError, match="date"):
            parse_day(value)

    def test_missing_rejected(self):
        with pytest.raises(ValidationError, match="required"):
            parse_day(None)


class TestParseMonth:
    """Tests for YYYY-MM parsing."""

    def test_valid_month(self):
        assert parse_month("2025-12") == date(2025, 12, 1)

    @pytest.mark.parametrize("value", ["2025-13", "2025-1", "2025-12-01", "0000-01", ""])
    def test_invalid_month_rejected(self, value):
        with pytest.raises(ValidationError) as exc_info:
            parse_month(value)
        assert exc_info.value.field == "month"


class TestResolveTimezone:
    """Tests for IANA timezone lookup."""

    def test_known_zone(self):
        assert resolve_timezone("Asia/Tokyo") == ZoneInfo("Asia/Tokyo")

    @pytest.mark.parametrize(
        "tz", ["Invalid/Timezone", "../etc/passwd", "", "   ", "America", "Etc", "Europe"]
    )
    def test_unknown_zone_rejected(self, tz):
        with pytest.raises(InvalidTimezoneError) as exc_info:
            resolve_timezone(tz)
        assert "timezone" in exc_info.value.message.lower()
        assert exc_info.value.status_code == 400


# =============================================================================
# Day windows
# =============================================================================


class TestDayWindow:
    """Tests for local day resolution."""

    def test_utc_day(self):
        window = day_window("2025-01-01", "UTC")
        assert window.start_ms == 1735689600000
        assert window.end_ms == 1735689600000 + 24 * HOUR_MS - 1
        assert window.end_inclusive is True

    def test_positive_offset_day(self):
        window = day_window("2025-01-15", "Asia/Tokyo")
        assert window.start_ms == utc_ms(2025, 1, 14, 15)
        assert window.end_ms == utc_ms(2025, 1, 15, 15) - 1

    def test_spring_forward_day_is_23_hours(self):
        window = day_window("2025-03-09", "America/New_York")
        assert window.start_ms == utc_ms(2025, 3, 9, 5)
        assert window.end_ms == utc_ms(2025, 3, 10, 4) - 1
        assert window.span_ms == 23 * HOUR_MS

    def test_fall_back_day_is_25_hours(self):
        window = day_window("2025-11-02", "America/New_York")
        assert window.start_ms == utc_ms(2025, 11, 2, 4)
        assert window.end_ms == utc_ms(2025, 11, 3, 5) - 1
        assert window.span_ms == 25 * HOUR_MS

    def test_consecutive_days_do_not_overlap(self):
        first = day_window("2025-03-08", "America/New_York")
        second = day_window("2025-03-09", "America/New_York")
        assert second.start_ms == first.end_ms + 1

    def test_date_validated_before_timezone(self):
        with pytest.raises(ValidationError, match="date"):
            day_window("2025-02-31", "Invalid/Timezone")

    def test_invalid_timezone(self):
        with pytest.raises(InvalidTimezoneError, match="timezone"):
            day_window("2025-01-01", "Invalid/Timezone")

    def test_last_representable_day_fails_cleanly(self):
        with pytest.raises(InvalidTimezoneError, match="timezone"):
            day_window("9999-12-31", "UTC")

    def test_contains_boundaries(self):
        window = day_window("2025-01-01", "UTC")
        assert window.contains(window.start_ms)
        assert window.contains(window.end_ms)
        assert not window.contains(window.start_ms - 1)
        assert not window.contains(window.end_ms + 1)


# =============================================================================
# Month, week, today, rolling
# =============================================================================


class TestMonthWindow:
    """Tests for local month resolution."""

    def test_december_rolls_into_next_year(self):
        window = month_window("2025-12", "Asia/Tokyo")
        assert window.start_ms == utc_ms(2025, 11, 30, 15)
        assert window.end_ms == utc_ms(2025, 12, 31, 15)
        assert window.end_inclusive is False

    def test_half_open(self):
        window = month_window("2025-02", "UTC")
        assert window.contains(utc_ms(2025, 2, 28, 23, 59, 59))
        assert not window.contains(utc_ms(2025, 3, 1))


class TestRelativeWindows:
    """Tests for windows anchored on the current instant."""

    def test_today_follows_local_calendar(self):
        # 01:00 on the 15th in Tokyo, still the 14th in UTC
        now = utc_ms(2025, 1, 14, 16)
        window = today_window("Asia/Tokyo", now)
        assert window == TimeWindow(utc_ms(2025, 1, 14, 15), utc_ms(2025, 1, 15, 15))

    def test_today_accepts_zone(self):
        now = utc_ms(2025, 1, 14, 16)
        assert today_window(ZoneInfo("Asia/Tokyo"), now) == today_window("Asia/Tokyo", now)

    def test_week_starts_on_monday(self):
        # Wednesday 2025-01-15
        now = utc_ms(2025, 1, 15, 12)
        window = week_window("UTC", now)
        assert window.start_ms == utc_ms(2025, 1, 13)
        assert window.end_ms == utc_ms(2025, 1, 20)

    def test_week_on_monday_itself(self):
        now = utc_ms(2025, 1, 13)
        window = week_window("UTC", now)
        assert window.start_ms == now

    def test_rolling_window_covers_today(self):
        now = utc_ms(2025, 6, 30, 12)
        window = rolling_window("UTC", 90, now)
        assert window.start_ms == utc_ms(2025, 4, 1)
        assert window.end_ms == utc_ms(2025, 7, 1) - 1
        assert window.end_inclusive is True

    def test_rolling_window_invalid_timezone(self):
        with pytest.raises(InvalidTimezoneError):
            rolling_window("Mars/Olympus", 90)


def test_local_date_uses_zone():
    ts = utc_ms(2025, 12, 31, 16)
    assert local_date(ts, ZoneInfo("Asia/Tokyo")) == date(2026, 1, 1)
    assert local_date(ts, ZoneInfo("UTC")) == date(2025, 12, 31)

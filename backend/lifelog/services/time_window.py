"""Conversion of calendar dates in an IANA timezone to UTC millisecond ranges.

Every date-scoped query goes through this module so that listing, search
and stats agree on where a local day, week or month starts.

Day windows use an inclusive end (``timestamp <= end_ms``, one millisecond
before the next local midnight). Week, month and "today" windows are
half-open (``timestamp < end_ms``). The span of a local day is never
assumed to be 24 hours: each boundary is an independent civil midnight
converted to UTC, so DST transition days come out as 23 or 25 hours.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from lifelog.core.exceptions import InvalidTimezoneError, ValidationError
from lifelog.utils.clock import now_ms, to_ms

DAY_PATTERN = re.compile(r"^\d{4}-(?:0[1-9]|1[0-2])-(?:0[1-9]|[12]\d|3[01])$")
MONTH_PATTERN = re.compile(r"^\d{4}-(?:0[1-9]|1[0-2])$")


@dataclass(frozen=True)
class TimeWindow:
    """A UTC range in epoch milliseconds."""

    start_ms: int
    end_ms: int
    end_inclusive: bool = False

    def contains(self, ts: int) -> bool:
        if ts < self.start_ms:
            return False
        return ts <= self.end_ms if self.end_inclusive else ts < self.end_ms

    @property
    def span_ms(self) -> int:
        """Length of the window in milliseconds."""
        return self.end_ms - self.start_ms + (1 if self.end_inclusive else 0)


def resolve_timezone(tz: str | None) -> ZoneInfo:
    """Load an IANA timezone, raising InvalidTimezoneError when it can't be resolved."""
    if not tz or not tz.strip():
        raise InvalidTimezoneError()
    try:
        return ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        # OSError covers names that resolve to a tzdata directory (e.g. "America")
        raise InvalidTimezoneError(f"Invalid timezone: {tz}") from e


def parse_day(value: str | None, field: str = "date") -> date:
    """Parse a strict ``YYYY-MM-DD`` string that names a real calendar day."""
    if not value:
        raise ValidationError(f"{field} parameter is required", field=field)
    if not DAY_PATTERN.fullmatch(value):
        raise ValidationError(f"Invalid {field} format, expected YYYY-MM-DD", field=field)
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        # Syntax is fine but the day doesn't exist (e.g. 2025-02-31)
        raise ValidationError(f"Invalid {field}: {value} is not a calendar day", field=field) from e


def parse_month(value: str | None, field: str = "month") -> date:
    """Parse a strict ``YYYY-MM`` string into the first day of that month."""
    if not value:
        raise ValidationError(f"{field} parameter is required", field=field)
    if not MONTH_PATTERN.fullmatch(value):
        raise ValidationError(f"Invalid {field} format, expected YYYY-MM", field=field)
    year, month = (int(part) for part in value.split("-"))
    if year < 1:
        raise ValidationError(f"Invalid {field}: {value}", field=field)
    return date(year, month, 1)


def local_midnight_ms(day: date, zone: ZoneInfo) -> int:
    """UTC epoch milliseconds of civil midnight starting ``day`` in ``zone``."""
    try:
        local = datetime(day.year, day.month, day.day, tzinfo=zone)
        return to_ms(local.astimezone(timezone.utc))
    except (OverflowError, ValueError) as e:
        raise InvalidTimezoneError(f"Cannot resolve {day.isoformat()} in timezone {zone.key}") from e


def _next_day(day: date) -> date:
    try:
        return day + timedelta(days=1)
    except OverflowError as e:
        raise InvalidTimezoneError(f"Cannot resolve the day after {day.isoformat()} in this timezone") from e


def _next_month(first: date) -> date:
    if first.month == 12:
        if first.year == date.max.year:
            raise InvalidTimezoneError(f"Cannot resolve the month after {first:%Y-%m} in this timezone")
        return date(first.year + 1, 1, 1)
    return date(first.year, first.month + 1, 1)


def local_today(zone: ZoneInfo, now: int | None = None) -> date:
    """The calendar day in ``zone`` at the instant ``now`` (epoch ms)."""
    return local_date(now_ms() if now is None else now, zone)


def local_date(ts: int, zone: ZoneInfo) -> date:
    """The calendar day in ``zone`` containing the instant ``ts`` (epoch ms)."""
    instant = datetime(1970, 1, 1, tzinfo=timezone.utc) + timedelta(milliseconds=ts)
    return instant.astimezone(zone).date()


def day_range(day: date, zone: ZoneInfo) -> TimeWindow:
    """Inclusive window covering one local day."""
    start = local_midnight_ms(day, zone)
    end = local_midnight_ms(_next_day(day), zone) - 1
    return TimeWindow(start, end, end_inclusive=True)


def day_window(value: str | None, tz: str | None, field: str = "date") -> TimeWindow:
    """Resolve a ``YYYY-MM-DD`` string in an IANA timezone.

    Validation runs in order: date syntax, date existence, timezone.
    """
    day = parse_day(value, field=field)
    zone = resolve_timezone(tz)
    return day_range(day, zone)


def month_window(value: str | None, tz: str | None) -> TimeWindow:
    """Resolve a ``YYYY-MM`` string to a half-open window in an IANA timezone."""
    first = parse_month(value)
    zone = resolve_timezone(tz)
    start = local_midnight_ms(first, zone)
    end = local_midnight_ms(_next_month(first), zone)
    return TimeWindow(start, end)


def today_window(tz: str | ZoneInfo, now: int | None = None) -> TimeWindow:
    """Half-open window for the local day containing ``now``."""
    zone = tz if isinstance(tz, ZoneInfo) else resolve_timezone(tz)
    today = local_today(zone, now)
    return TimeWindow(local_midnight_ms(today, zone), local_midnight_ms(_next_day(today), zone))


def week_window(tz: str | ZoneInfo, now: int | None = None) -> TimeWindow:
    """Half-open window for the ISO week (Monday start) containing ``now``."""
    zone = tz if isinstance(tz, ZoneInfo) else resolve_timezone(tz)
    today = local_today(zone, now)
    try:
        monday = today - timedelta(days=today.weekday())
        next_monday = monday + timedelta(days=7)
    except OverflowError as e:
        raise InvalidTimezoneError(f"Cannot resolve the week of {today.isoformat()} in this timezone") from e
    return TimeWindow(local_midnight_ms(monday, zone), local_midnight_ms(next_monday, zone))


def rolling_window(tz: str | ZoneInfo, days: int = 90, now: int | None = None) -> TimeWindow:
    """Inclusive window from local midnight ``days`` days ago to the end of today."""
    zone = tz if isinstance(tz, ZoneInfo) else resolve_timezone(tz)
    today = local_today(zone, now)
    try:
        first = today - timedelta(days=days)
    except OverflowError as e:
        raise InvalidTimezoneError(f"Cannot resolve {days} days before {today.isoformat()} in this timezone") from e
    start = local_midnight_ms(first, zone)
    end = local_midnight_ms(_next_day(today), zone) - 1
    return TimeWindow(start, end, end_inclusive=True)

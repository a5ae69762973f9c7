"""Stats service for sidebar counts, bookmarks, top tags and month calendars."""

from __future__ import annotations

from collections import Counter
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from lifelog.core.config import settings
from lifelog.core.exceptions import ValidationError
from lifelog.db.models import LogEntry, LogType
from lifelog.schemas.stats import MonthDay, StatsResponse, TopTag
from lifelog.services.tag import TagService
from lifelog.services.time_window import (
    TimeWindow,
    local_date,
    month_window,
    resolve_timezone,
    today_window,
    week_window,
)


def extract_url(metadata: Any) -> str | None:
    """Pull a string ``url`` out of entry metadata, tolerating any shape."""
    if not isinstance(metadata, dict):
        return None
    url = metadata.get("url")
    if isinstance(url, str) and url:
        return url
    return None


class StatsService:
    """Service for statistics derived from log entries.

    Every window comes from the time window resolver, so "today" here is the
    same range the day listing uses for the same timezone and instant.
    """

    def __init__(self, db: AsyncSession):
        """Initialize the stats service.

        Args:
            db: The database session.
        """
        self.db = db

    async def get_stats(
        self,
        tz: str | None,
        month: str | None = None,
        now: int | None = None,
    ) -> StatsResponse:
        """Get statistics for one timezone.

        Args:
            tz: IANA timezone name.
            month: Optional ``YYYY-MM``; adds per-day counts for that month.
            now: Reference instant in epoch ms, defaults to the current time.

        Returns:
            StatsResponse with counts, recent URLs, top tags and month days.
        """
        if not tz:
            raise ValidationError("tz parameter is required", field="tz")
        zone = resolve_timezone(tz)

        # Resolve every window before touching the database
        today = today_window(zone, now)
        week = week_window(zone, now)
        month_range = month_window(month, tz) if month else None

        top_n = settings.stats_top_n
        top_tags = await TagService(self.db).top_tags(limit=top_n)

        month_days = None
        if month_range is not None:
            month_days = await self.get_month_days(month_range, tz)

        return StatsResponse(
            today_count=await self.count_in_window(today),
            week_count=await self.count_in_window(week),
            recent_urls=await self.get_recent_urls(limit=top_n),
            top_tags=[TopTag(id=t.id, name=t.name, count=t.count) for t in top_tags],
            month_days=month_days,
        )

    async def count_in_window(self, window: TimeWindow) -> int:
        upper = (
            LogEntry.timestamp <= window.end_ms
            if window.end_inclusive
            else LogEntry.timestamp < window.end_ms
        )
        result = await self.db.execute(
            select(func.count())
            .select_from(LogEntry)
            .where(LogEntry.timestamp >= window.start_ms, upper)
        )
        return result.scalar() or 0

    async def get_recent_urls(self, limit: int = 10) -> list[str]:
        """Get URLs of the newest bookmark entries.

        Only the newest ``limit`` bookmarks are considered; those without a
        usable ``url`` are skipped rather than replaced by older ones.
        """
        result = await self.db.execute(
            select(LogEntry.meta)
            .where(LogEntry.type == LogType.BOOKMARK.value)
            .order_by(LogEntry.timestamp.desc(), LogEntry.id.desc())
            .limit(limit)
        )
        urls = [extract_url(meta) for meta in result.scalars().all()]
        return [url for url in urls if url is not None]

    async def get_month_days(self, window: TimeWindow, tz: str) -> list[MonthDay]:
        """Count entries per local day inside a month window.

        Days without entries are left out.
        """
        zone = resolve_timezone(tz)
        result = await self.db.execute(
            select(LogEntry.timestamp).where(
                LogEntry.timestamp >= window.start_ms,
                LogEntry.timestamp < window.end_ms,
            )
        )
        counts = Counter(local_date(ts, zone).isoformat() for ts in result.scalars().all())
        return [MonthDay(date=day, count=counts[day]) for day in sorted(counts)]

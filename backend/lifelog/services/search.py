"""Bounded substring search over log content."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lifelog.core.config import settings
from lifelog.core.exceptions import ValidationError
from lifelog.core.logging import get_logger
from lifelog.db.models import LogEntry
from lifelog.services.log import parse_log_type
from lifelog.services.time_window import (
    day_window,
    resolve_timezone,
    rolling_window,
)

logger = get_logger(__name__)

MIN_QUERY_LENGTH = 2
LIKE_ESCAPE = "\\"


def escape_like(value: str) -> str:
    """Escape LIKE metacharacters so the value matches literally."""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


class SearchService:
    """Search entries by content within a time window.

    Without an explicit date the window is the last ``search_window_days``
    days, which bounds the scan. Results are capped and not paginated.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def search(
        self,
        q: str | None,
        tz: str | None,
        type: str | None = None,
        date: str | None = None,
        now: int | None = None,
    ) -> list[LogEntry]:
        """Find entries whose content contains ``q``.

        Args:
            q: Substring to look for (at least two characters once stripped).
            tz: IANA timezone of the caller.
            type: Optional LogType filter.
            date: Optional ``YYYY-MM-DD`` day to restrict to.
            now: Reference instant in epoch ms for the default window.

        Returns:
            Matching entries, newest first.
        """
        if q is None or len(q.strip()) < MIN_QUERY_LENGTH:
            raise ValidationError(
                f"q parameter must be at least {MIN_QUERY_LENGTH} characters", field="q"
            )
        if not tz:
            raise ValidationError("tz parameter is required", field="tz")
        log_type = parse_log_type(type) if type else None

        if date:
            window = day_window(date, tz)
        else:
            window = rolling_window(resolve_timezone(tz), settings.search_window_days, now)

        stmt = select(LogEntry).where(
            LogEntry.content.like(f"%{escape_like(q)}%", escape=LIKE_ESCAPE),
            LogEntry.timestamp >= window.start_ms,
            LogEntry.timestamp <= window.end_ms,
        )
        if log_type is not None:
            stmt = stmt.where(LogEntry.type == log_type.value)
        stmt = stmt.order_by(LogEntry.timestamp.desc(), LogEntry.id.desc()).limit(
            settings.search_max_results
        )

        result = await self.db.execute(stmt)
        items = list(result.scalars().all())

        logger.debug("search_completed", query_length=len(q), results=len(items), dated=bool(date))

        return items

"""Keyset pagination over log entries ordered by ``(timestamp DESC, id DESC)``."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import Select, and_, or_
from sqlalchemy.ext.asyncio import AsyncSession

from lifelog.core.config import settings
from lifelog.db.models import LogEntry
from lifelog.services.cursor import Cursor


@dataclass
class Page:
    """One page of log entries."""

    items: list[LogEntry] = field(default_factory=list)
    next_cursor: Cursor | None = None
    has_more: bool = False


def clamp_limit(raw: Any) -> int:
    """Normalize a limit parameter.

    Absent, empty, non-numeric and non-finite values fall back to the default
    page size; numbers are truncated and clamped to ``[1, max_page_size]``.
    """
    default = settings.default_page_size
    if raw is None or isinstance(raw, bool):
        return default
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return default
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(value):
        return default
    return max(1, min(settings.max_page_size, int(value)))


def after_cursor(cursor: Cursor):
    """Predicate selecting rows strictly after ``cursor`` in descending order."""
    return or_(
        LogEntry.timestamp < cursor.timestamp,
        and_(LogEntry.timestamp == cursor.timestamp, LogEntry.id < cursor.id),
    )


async def paginate(
    db: AsyncSession,
    stmt: Select,
    limit: int,
    cursor: Cursor | None = None,
) -> Page:
    """Run a LogEntry select as one page.

    Fetches one extra row to learn whether another page exists; that row is
    never returned.
    """
    if cursor is not None:
        stmt = stmt.where(after_cursor(cursor))
    stmt = stmt.order_by(LogEntry.timestamp.desc(), LogEntry.id.desc()).limit(limit + 1)

    result = await db.execute(stmt)
    rows = list(result.scalars().all())

    has_more = len(rows) > limit
    items = rows[:limit]
    next_cursor = None
    if has_more and items:
        last = items[-1]
        next_cursor = Cursor(timestamp=last.timestamp, id=last.id)

    return Page(items=items, next_cursor=next_cursor, has_more=has_more)

"""Timeline (archive) API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from lifelog.db import get_db
from lifelog.schemas.log import LogPage
from lifelog.services.cursor import Cursor
from lifelog.services.log import LogService, parse_types
from lifelog.services.pagination import clamp_limit

router = APIRouter(prefix="/timeline", tags=["timeline"])


@router.get("", response_model=LogPage)
async def list_timeline(
    type: str | None = Query(None, description="Single type filter"),
    types: list[str] | None = Query(None, description="Comma-separated or repeated types"),
    limit: str | None = Query(None, description="Page size, clamped to 1-100"),
    cursor: str | None = Query(None, description="nextCursor from the previous page"),
    db: AsyncSession = Depends(get_db),
) -> LogPage:
    """List entries across all days, optionally filtered by type."""
    type_filter = parse_types(type, types)
    page_limit = clamp_limit(limit)
    after = Cursor.parse_optional(cursor)

    page = await LogService(db).list_by_types(type_filter, page_limit, after)
    return LogPage.from_page(page)

"""Log API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from lifelog.core.exceptions import ValidationError
from lifelog.db import get_db
from lifelog.schemas.common import DeleteResponse
from lifelog.schemas.log import LogCreate, LogDetailResponse, LogPage, LogUpdate
from lifelog.services.cursor import Cursor
from lifelog.services.log import LogService
from lifelog.services.pagination import clamp_limit
from lifelog.services.time_window import day_range, parse_day, resolve_timezone

router = APIRouter(prefix="/logs", tags=["logs"])


@router.get("", response_model=LogPage)
async def list_logs(
    date: str | None = Query(None, description="Local day as YYYY-MM-DD"),
    tz: str | None = Query(None, description="IANA timezone name"),
    limit: str | None = Query(None, description="Page size, clamped to 1-100"),
    cursor: str | None = Query(None, description="nextCursor from the previous page"),
    db: AsyncSession = Depends(get_db),
) -> LogPage:
    """List the entries of one local day, newest first."""
    day = parse_day(date)
    if not tz:
        raise ValidationError("tz parameter is required", field="tz")
    page_limit = clamp_limit(limit)
    after = Cursor.parse_optional(cursor)
    window = day_range(day, resolve_timezone(tz))

    page = await LogService(db).list_by_date_window(window, page_limit, after)
    return LogPage.from_page(page)


@router.get("/{log_id}", response_model=LogDetailResponse)
async def get_log(
    log_id: str,
    db: AsyncSession = Depends(get_db),
) -> LogDetailResponse:
    """Get a single entry with its tag ids."""
    entry, tag_ids = await LogService(db).get(log_id)
    return LogDetailResponse.from_entry(entry, tag_ids=tag_ids)


@router.post("", response_model=LogDetailResponse, status_code=201)
async def create_log(
    data: LogCreate,
    db: AsyncSession = Depends(get_db),
) -> LogDetailResponse:
    """Create an entry.

    Malformed ids in tagIds are ignored; well-formed ids are attached.
    """
    entry, tag_ids = await LogService(db).create(
        type=data.type,
        content=data.content,
        timestamp=data.timestamp,
        metadata=data.metadata,
        tag_ids=data.tag_ids,
    )
    await db.commit()
    return LogDetailResponse.from_entry(entry, tag_ids=tag_ids)


@router.put("/{log_id}", response_model=LogDetailResponse)
async def update_log(
    log_id: str,
    data: LogUpdate,
    db: AsyncSession = Depends(get_db),
) -> LogDetailResponse:
    """Update the fields present in the body.

    A tagIds field, even an empty list, replaces all of the entry's tags.
    """
    entry, tag_ids = await LogService(db).update(log_id, data.model_dump(exclude_unset=True))
    await db.commit()
    return LogDetailResponse.from_entry(entry, tag_ids=tag_ids)


@router.delete("/{log_id}", response_model=DeleteResponse)
async def delete_log(
    log_id: str,
    db: AsyncSession = Depends(get_db),
) -> DeleteResponse:
    """Delete an entry and its tag associations."""
    await LogService(db).delete(log_id)
    await db.commit()
    return DeleteResponse()

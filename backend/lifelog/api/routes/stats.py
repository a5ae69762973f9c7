"""Stats API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from lifelog.db import get_db
from lifelog.schemas.stats import StatsResponse
from lifelog.services.stats import StatsService

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("", response_model=StatsResponse)
async def get_stats(
    tz: str | None = Query(None, description="IANA timezone name"),
    month: str | None = Query(None, description="Optional month as YYYY-MM"),
    db: AsyncSession = Depends(get_db),
) -> StatsResponse:
    """Get sidebar statistics.

    Returns today's and this week's counts, recent bookmark URLs and top
    tags. monthDays is only included when a month is requested.
    """
    return await StatsService(db).get_stats(tz=tz, month=month)

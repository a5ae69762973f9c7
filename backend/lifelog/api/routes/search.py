"""Search API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from lifelog.db import get_db
from lifelog.schemas.log import LogResponse
from lifelog.schemas.search import SearchResponse
from lifelog.services.search import SearchService

router = APIRouter(prefix="/search", tags=["search"])


@router.get("", response_model=SearchResponse)
async def search_logs(
    q: str | None = Query(None, description="Substring to search for (2+ characters)"),
    tz: str | None = Query(None, description="IANA timezone name"),
    type: str | None = Query(None, description="Optional type filter"),
    date: str | None = Query(None, description="Optional local day as YYYY-MM-DD"),
    db: AsyncSession = Depends(get_db),
) -> SearchResponse:
    """Search entry content.

    Without a date the last 90 days are searched. At most 50 results are
    returned and there is no further page.
    """
    items = await SearchService(db).search(q=q, tz=tz, type=type, date=date)
    return SearchResponse(items=[LogResponse.from_entry(entry) for entry in items])

"""Tag API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from lifelog.core.logging import get_logger
from lifelog.db import get_db
from lifelog.schemas.common import DeleteResponse
from lifelog.schemas.log import LogPage
from lifelog.schemas.tag import TagCreate, TagResponse
from lifelog.services.cursor import Cursor
from lifelog.services.log import LogService
from lifelog.services.pagination import clamp_limit
from lifelog.services.tag import TagService

logger = get_logger(__name__)

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("", response_model=list[TagResponse])
async def list_tags(
    db: AsyncSession = Depends(get_db),
) -> list[TagResponse]:
    """List all tags."""
    tags = await TagService(db).list_tags()
    return [TagResponse.model_validate(tag) for tag in tags]


@router.post("", response_model=TagResponse, status_code=201)
async def create_tag(
    data: TagCreate,
    db: AsyncSession = Depends(get_db),
) -> TagResponse:
    """Create a tag. Names are unique and case-sensitive."""
    tag = await TagService(db).create(data.name, color=data.color)
    await db.commit()
    return TagResponse.model_validate(tag)


@router.delete("/{tag_id}", response_model=DeleteResponse)
async def delete_tag(
    tag_id: str,
    db: AsyncSession = Depends(get_db),
) -> DeleteResponse:
    """Delete a tag. Entries keep existing and only lose the association."""
    await TagService(db).delete(tag_id)
    await db.commit()
    return DeleteResponse()


@router.get("/{tag_id}/logs", response_model=LogPage)
async def list_tag_logs(
    tag_id: str,
    limit: str | None = Query(None, description="Page size, clamped to 1-100"),
    cursor: str | None = Query(None, description="nextCursor from the previous page"),
    db: AsyncSession = Depends(get_db),
) -> LogPage:
    """List entries carrying a tag, newest first."""
    page_limit = clamp_limit(limit)
    after = Cursor.parse_optional(cursor)

    page = await LogService(db).list_by_tag(tag_id, page_limit, after)
    return LogPage.from_page(page)

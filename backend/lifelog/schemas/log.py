"""Pydantic schemas for log entry API."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import Field

from lifelog.schemas.common import CamelModel

if TYPE_CHECKING:
    from lifelog.db.models import LogEntry
    from lifelog.services.pagination import Page


class LogCreate(CamelModel):
    """Request body for creating a log entry.

    type and content are checked by the service so that a missing value is
    reported the same way as an empty one.
    """

    type: str | None = None
    content: str | None = None
    timestamp: int | None = Field(default=None, description="Event time in epoch ms")
    metadata: dict[str, Any] | None = None
    tag_ids: list[Any] | None = Field(
        default=None, description="Tag ids to attach; malformed ids are ignored"
    )


class LogUpdate(CamelModel):
    """Request body for a partial log update. Only sent fields change."""

    type: str | None = None
    content: str | None = None
    timestamp: int | None = None
    metadata: dict[str, Any] | None = None
    tag_ids: list[Any] | None = Field(
        default=None, description="Replaces the whole tag set when present"
    )


class LogResponse(CamelModel):
    """A log entry."""

    id: str
    type: str
    content: str
    timestamp: int
    metadata: dict[str, Any] | None = None
    created_at: int
    updated_at: int

    @classmethod
    def from_entry(cls, entry: LogEntry, **extra: Any) -> LogResponse:
        """Build a response from a LogEntry row."""
        return cls(
            id=entry.id,
            type=entry.type,
            content=entry.content,
            timestamp=entry.timestamp,
            metadata=entry.meta,
            created_at=entry.created_at,
            updated_at=entry.updated_at,
            **extra,
        )


class LogDetailResponse(LogResponse):
    """A log entry with the ids of its tags."""

    tag_ids: list[str] = Field(default_factory=list)


class LogPage(CamelModel):
    """One page of log entries."""

    items: list[LogResponse]
    next_cursor: str | None = None
    has_more: bool = False

    @classmethod
    def from_page(cls, page: Page) -> LogPage:
        return cls(
            items=[LogResponse.from_entry(entry) for entry in page.items],
            next_cursor=page.next_cursor.encode() if page.next_cursor else None,
            has_more=page.has_more,
        )

"""Log service for creating, browsing and editing life-log entries."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from lifelog.core.exceptions import NotFoundError, ValidationError
from lifelog.core.logging import get_logger
from lifelog.db.models import LogEntry, LogTag, LogType, Tag
from lifelog.services.cursor import Cursor
from lifelog.services.pagination import Page, paginate
from lifelog.services.time_window import TimeWindow
from lifelog.utils.clock import MAX_EPOCH_MS, now_ms
from lifelog.utils.ids import is_valid_id

logger = get_logger(__name__)

# Fields a caller may change through update()
UPDATABLE_FIELDS = frozenset({"type", "content", "timestamp", "metadata", "tag_ids"})


def require_id(value: str, entity: str = "log") -> str:
    """Reject identifiers that are not well-formed ULIDs."""
    if not is_valid_id(value):
        raise ValidationError(f"Invalid {entity} id", field="id")
    return value


def parse_log_type(value: Any, field: str = "type") -> LogType:
    """Convert a raw value into a LogType."""
    if not isinstance(value, str) or not value:
        raise ValidationError(f"Invalid or missing {field}", field=field)
    try:
        return LogType(value)
    except ValueError as e:
        allowed = ", ".join(LogType.values())
        raise ValidationError(f"Invalid {field}: {value} (expected one of {allowed})", field=field) from e


def parse_types(type_param: str | None = None, types_param: Iterable[str] | str | None = None) -> list[LogType]:
    """Parse the type filter of a timeline request.

    ``types`` may be a comma-separated string or repeated values and wins
    over the single ``type``. An empty result means no type filter.
    """
    if isinstance(types_param, str):
        types_param = [types_param]

    candidates: list[str] = []
    if types_param:
        for raw in types_param:
            candidates.extend(v.strip() for v in raw.split(",") if v.strip())
    elif type_param:
        candidates = [type_param]

    parsed: list[LogType] = []
    for value in candidates:
        log_type = parse_log_type(value)
        if log_type not in parsed:
            parsed.append(log_type)
    return parsed


def clean_content(value: Any) -> str:
    """Trim content and reject empty or whitespace-only values."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("content is required", field="content")
    return value.strip()


def clean_timestamp(value: Any) -> int:
    """Validate a user-supplied event timestamp in epoch milliseconds."""
    if isinstance(value, bool) or not isinstance(value, int) or not 0 < value <= MAX_EPOCH_MS:
        raise ValidationError(
            "timestamp must be a positive 64-bit integer (epoch ms)", field="timestamp"
        )
    return value


def clean_metadata(value: Any) -> dict[str, Any] | None:
    if value is None:
        return None
    if not isinstance(value, dict):
        raise ValidationError("metadata must be an object", field="metadata")
    return value


def filter_tag_ids(tag_ids: Iterable[Any] | None) -> list[str]:
    """Keep well-formed tag ids, dropping malformed ones and duplicates.

    Malformed ids are ignored rather than rejected.
    """
    if not tag_ids:
        return []
    return list(dict.fromkeys(t for t in tag_ids if is_valid_id(t)))


class LogService:
    """Service for log entries and their tag associations.

    Methods flush but never commit; the request-scoped session commits once
    the whole operation succeeded so entries and associations land together.
    """

    def __init__(self, db: AsyncSession):
        """Initialize the log service.

        Args:
            db: The database session.
        """
        self.db = db

    # =========================================================================
    # Listing
    # =========================================================================

    async def list_by_date_window(
        self,
        window: TimeWindow,
        limit: int,
        cursor: Cursor | None = None,
    ) -> Page:
        """List entries whose timestamp falls inside a resolved time window."""
        upper = (
            LogEntry.timestamp <= window.end_ms
            if window.end_inclusive
            else LogEntry.timestamp < window.end_ms
        )
        stmt = select(LogEntry).where(LogEntry.timestamp >= window.start_ms, upper)
        return await paginate(self.db, stmt, limit, cursor)

    async def list_by_types(
        self,
        types: list[LogType],
        limit: int,
        cursor: Cursor | None = None,
    ) -> Page:
        """List entries of the given types; an empty list means all types."""
        stmt = select(LogEntry)
        if types:
            stmt = stmt.where(LogEntry.type.in_([t.value for t in types]))
        return await paginate(self.db, stmt, limit, cursor)

    async def list_by_tag(
        self,
        tag_id: str,
        limit: int,
        cursor: Cursor | None = None,
    ) -> Page:
        """List entries carrying one tag.

        Raises:
            NotFoundError: If the tag does not exist.
        """
        require_id(tag_id, "tag")
        if await self.db.get(Tag, tag_id) is None:
            raise NotFoundError("Tag", tag_id)

        stmt = (
            select(LogEntry)
            .join(LogTag, LogTag.log_id == LogEntry.id)
            .where(LogTag.tag_id == tag_id)
        )
        return await paginate(self.db, stmt, limit, cursor)

    # =========================================================================
    # Single entry
    # =========================================================================

    async def get(self, log_id: str) -> tuple[LogEntry, list[str]]:
        """Get an entry with the ids of its tags.

        Raises:
            NotFoundError: If the entry does not exist.
        """
        entry = await self._get_entry(log_id)
        return entry, await self.get_tag_ids(entry.id)

    async def get_tag_ids(self, log_id: str) -> list[str]:
        result = await self.db.execute(
            select(LogTag.tag_id).where(LogTag.log_id == log_id).order_by(LogTag.tag_id)
        )
        return list(result.scalars().all())

    async def create(
        self,
        type: Any,
        content: Any,
        timestamp: Any = None,
        metadata: Any = None,
        tag_ids: Iterable[Any] | None = None,
    ) -> tuple[LogEntry, list[str]]:
        """Create an entry and attach any well-formed tag ids.

        Args:
            type: One of the LogType values.
            content: Entry text; stored trimmed.
            timestamp: Event time in epoch ms, defaults to now.
            metadata: Optional opaque key/value object.
            tag_ids: Tag ids to attach; malformed ids are dropped silently.

        Returns:
            The new entry and the attached tag ids.
        """
        log_type = parse_log_type(type)
        text = clean_content(content)
        event_ts = now_ms() if timestamp is None else clean_timestamp(timestamp)
        meta = clean_metadata(metadata)
        valid_tag_ids = filter_tag_ids(tag_ids)

        now = now_ms()
        entry = LogEntry(
            type=log_type.value,
            content=text,
            timestamp=event_ts,
            meta=meta,
            created_at=now,
            updated_at=now,
        )
        self.db.add(entry)
        await self.db.flush()

        await self._attach_tags(entry.id, valid_tag_ids)

        logger.info(
            "log_created",
            log_id=entry.id,
            type=log_type.value,
            tag_count=len(valid_tag_ids),
        )

        return entry, valid_tag_ids

    async def update(self, log_id: str, changes: Mapping[str, Any]) -> tuple[LogEntry, list[str]]:
        """Apply a partial update.

        Only keys present in ``changes`` are touched. A present ``tag_ids``
        (even empty) replaces the whole association set.

        Raises:
            NotFoundError: If the entry does not exist.
            ValidationError: If a supplied field is invalid.
        """
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            field = sorted(unknown)[0]
            raise ValidationError(f"{field} cannot be updated", field=field)

        entry = await self._get_entry(log_id)

        # Validate everything before the first write
        values: dict[str, Any] = {}
        if "type" in changes:
            values["type"] = parse_log_type(changes["type"]).value
        if "content" in changes:
            values["content"] = clean_content(changes["content"])
        if "timestamp" in changes:
            values["timestamp"] = clean_timestamp(changes["timestamp"])
        if "metadata" in changes:
            values["meta"] = clean_metadata(changes["metadata"])
        replace_tags = "tag_ids" in changes
        new_tag_ids = filter_tag_ids(changes.get("tag_ids")) if replace_tags else []

        for key, value in values.items():
            setattr(entry, key, value)
        entry.updated_at = max(now_ms(), entry.updated_at + 1)
        await self.db.flush()

        if replace_tags:
            await self.db.execute(delete(LogTag).where(LogTag.log_id == entry.id))
            await self._attach_tags(entry.id, new_tag_ids)

        logger.info(
            "log_updated",
            log_id=entry.id,
            fields=sorted(changes),
        )

        return entry, await self.get_tag_ids(entry.id)

    async def delete(self, log_id: str) -> None:
        """Delete an entry and its tag associations; the tags themselves stay.

        Raises:
            NotFoundError: If the entry does not exist.
        """
        entry = await self._get_entry(log_id)

        await self.db.execute(delete(LogTag).where(LogTag.log_id == entry.id))
        await self.db.execute(delete(LogEntry).where(LogEntry.id == entry.id))
        await self.db.flush()

        logger.info("log_deleted", log_id=entry.id)

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _get_entry(self, log_id: str) -> LogEntry:
        require_id(log_id, "log")
        entry = await self.db.get(LogEntry, log_id)
        if entry is None:
            raise NotFoundError("Log", log_id)
        return entry

    async def _attach_tags(self, log_id: str, tag_ids: list[str]) -> None:
        if not tag_ids:
            return
        await self.db.execute(
            insert(LogTag),
            [{"log_id": log_id, "tag_id": tag_id} for tag_id in tag_ids],
        )

"""Tag service for managing tags and their association counts."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from lifelog.core.exceptions import ConflictError, NotFoundError, ValidationError
from lifelog.core.logging import get_logger
from lifelog.db.models import LogTag, Tag
from lifelog.services.log import require_id

logger = get_logger(__name__)

# Maximum length of a tag name (matches the column size)
MAX_TAG_NAME_LENGTH = 100


@dataclass
class TagUsage:
    """A tag together with the number of entries carrying it."""

    id: str
    name: str
    count: int


class TagService:
    """Service for tag CRUD.

    Tag names are unique and compared exactly (case-sensitive) after trimming.
    """

    def __init__(self, db: AsyncSession):
        """Initialize the tag service.

        Args:
            db: The database session.
        """
        self.db = db

    async def list_tags(self) -> list[Tag]:
        """Get all tags ordered by name."""
        result = await self.db.execute(select(Tag).order_by(Tag.name))
        return list(result.scalars().all())

    async def create(self, name: object, color: str | None = None) -> Tag:
        """Create a tag.

        Args:
            name: The tag name; surrounding whitespace is stripped.
            color: Optional display color.

        Returns:
            The new Tag.

        Raises:
            ValidationError: If the name is missing or empty.
            ConflictError: If a tag with the same name exists.
        """
        normalized_name = self._normalize_name(name)

        # Pre-check so a duplicate never reaches the unique index
        result = await self.db.execute(select(Tag.id).where(Tag.name == normalized_name))
        if result.scalar_one_or_none() is not None:
            raise ConflictError("Tag with this name already exists")

        tag = Tag(name=normalized_name, color=color)
        self.db.add(tag)
        await self.db.flush()

        logger.info("tag_created", tag_id=tag.id, name=normalized_name)

        return tag

    async def delete(self, tag_id: str) -> None:
        """Delete a tag, detaching it from every entry.

        Raises:
            NotFoundError: If the tag does not exist.
        """
        require_id(tag_id, "tag")
        tag = await self.db.get(Tag, tag_id)
        if tag is None:
            raise NotFoundError("Tag", tag_id)

        result = await self.db.execute(delete(LogTag).where(LogTag.tag_id == tag_id))
        await self.db.execute(delete(Tag).where(Tag.id == tag_id))
        await self.db.flush()

        logger.info("tag_deleted", tag_id=tag_id, detached=result.rowcount)

    async def top_tags(self, limit: int = 10) -> list[TagUsage]:
        """Get tags ranked by how many entries carry them.

        Unused tags are included with a zero count once used ones run out.
        """
        usage = func.count(LogTag.log_id)
        result = await self.db.execute(
            select(Tag.id, Tag.name, usage.label("count"))
            .outerjoin(LogTag, LogTag.tag_id == Tag.id)
            .group_by(Tag.id, Tag.name)
            .order_by(usage.desc(), Tag.name)
            .limit(limit)
        )
        return [TagUsage(id=row.id, name=row.name, count=row.count) for row in result.all()]

    def _normalize_name(self, name: object) -> str:
        """Strip a tag name and validate it.

        Args:
            name: The raw tag name.

        Returns:
            The trimmed name.
        """
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("name is required", field="name")
        normalized = name.strip()
        if len(normalized) > MAX_TAG_NAME_LENGTH:
            raise ValidationError(
                f"name must be at most {MAX_TAG_NAME_LENGTH} characters", field="name"
            )
        return normalized

"""Tag model for entry categorization."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lifelog.db.base import Base
from lifelog.utils.clock import now_ms
from lifelog.utils.ids import new_id

if TYPE_CHECKING:
    from lifelog.db.models.log_tag import LogTag


class Tag(Base):
    """A user-defined label that can be attached to many log entries."""

    __tablename__ = "tags"

    # Primary key
    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=new_id)

    # Tag data (unique, case-sensitive)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    color: Mapped[str | None] = mapped_column(String(32), nullable=True)

    # Timestamps (epoch ms)
    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False, default=now_ms)

    # Relationships
    log_tags: Mapped[list[LogTag]] = relationship(
        "LogTag", back_populates="tag", cascade="all, delete-orphan", passive_deletes=True
    )

    __table_args__ = (UniqueConstraint("name", name="tags_name_unique"),)

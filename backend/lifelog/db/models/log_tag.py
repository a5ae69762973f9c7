"""LogTag model for entry-tag associations."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lifelog.db.base import Base

if TYPE_CHECKING:
    from lifelog.db.models.log_entry import LogEntry
    from lifelog.db.models.tag import Tag


class LogTag(Base):
    """Association between log entries and tags."""

    __tablename__ = "log_tags"

    # Composite primary key via foreign keys
    log_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("logs.id", ondelete="CASCADE"), primary_key=True
    )
    tag_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True
    )

    # Relationships
    log: Mapped[LogEntry] = relationship("LogEntry", back_populates="log_tags")
    tag: Mapped[Tag] = relationship("Tag", back_populates="log_tags")

    # Indexes
    __table_args__ = (
        Index("idx_log_tags_log_id", "log_id"),
        Index("idx_log_tags_tag_id", "tag_id"),
    )

"""LogEntry model for timestamped life-log entries."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, BigInteger, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lifelog.db.base import Base
from lifelog.utils.clock import now_ms
from lifelog.utils.ids import new_id

if TYPE_CHECKING:
    from lifelog.db.models.log_tag import LogTag


class LogEntry(Base):
    """A single entry in the life log."""

    __tablename__ = "logs"

    # Primary key
    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=new_id)

    # Entry data. type holds a LogType value; the closed set is enforced in
    # LogService so that rows stay readable if the enum grows.
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)  # epoch ms

    # Opaque key/value bag; "metadata" is reserved on declarative classes
    meta: Mapped[dict[str, Any] | None] = mapped_column("metadata", JSON, nullable=True)

    # Timestamps (epoch ms)
    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False, default=now_ms)
    updated_at: Mapped[int] = mapped_column(BigInteger, nullable=False, default=now_ms)

    # Relationships
    log_tags: Mapped[list[LogTag]] = relationship(
        "LogTag", back_populates="log", cascade="all, delete-orphan", passive_deletes=True
    )

    # Indexes
    __table_args__ = (
        Index("idx_logs_timestamp", "timestamp"),
        Index("idx_logs_type", "type"),
        Index("idx_logs_created_at", "created_at"),
        Index("idx_logs_timestamp_id", "timestamp", "id"),
    )

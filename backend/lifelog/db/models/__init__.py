"""Database models for Lifelog."""

from lifelog.db.models.enums import LogType
from lifelog.db.models.log_entry import LogEntry
from lifelog.db.models.log_tag import LogTag
from lifelog.db.models.tag import Tag

__all__ = [
    # Models
    "LogEntry",
    "LogTag",
    "Tag",
    # Enums
    "LogType",
]

"""Enum types for database models."""

from __future__ import annotations

import enum


class LogType(str, enum.Enum):
    """Kind of life-log entry."""

    ACTIVITY = "activity"
    WAKE_UP = "wake_up"
    MEAL = "meal"
    LOCATION = "location"
    THOUGHT = "thought"
    READING = "reading"
    MEDIA = "media"
    BOOKMARK = "bookmark"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]

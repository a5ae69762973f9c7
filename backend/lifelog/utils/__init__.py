"""Utility functions for Lifelog."""

from lifelog.utils.clock import now_ms
from lifelog.utils.ids import ID_PATTERN, is_valid_id, new_id

__all__ = [
    "ID_PATTERN",
    "is_valid_id",
    "new_id",
    "now_ms",
]

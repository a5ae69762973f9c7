"""Opaque cursor for paging through ``(timestamp DESC, id DESC)`` sequences.

On the wire a cursor is ``"{timestampMs}_{id}"``. Inside the service it is
always a ``Cursor`` pair; the string form only exists at the API boundary.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from lifelog.core.exceptions import InvalidCursorError
from lifelog.utils.clock import MAX_EPOCH_MS
from lifelog.utils.ids import is_valid_id

SEPARATOR = "_"

_DIGITS = re.compile(r"^[0-9]+$")

# Digits in MAX_EPOCH_MS; longer strings are rejected before int() parsing
MAX_TIMESTAMP_DIGITS = len(str(MAX_EPOCH_MS))


@dataclass(frozen=True)
class Cursor:
    """Sort key of the last item on a page."""

    timestamp: int
    id: str

    def encode(self) -> str:
        return f"{self.timestamp}{SEPARATOR}{self.id}"

    @classmethod
    def decode(cls, raw: str) -> Cursor:
        """Parse a wire cursor.

        The timestamp is everything before the first separator and the id is
        everything after it, so ids containing the separator still split
        cleanly.

        Raises:
            InvalidCursorError: If either half is malformed.
        """
        if not isinstance(raw, str) or SEPARATOR not in raw:
            raise InvalidCursorError()

        ts_part, entry_id = raw.split(SEPARATOR, 1)
        if len(ts_part) > MAX_TIMESTAMP_DIGITS or not _DIGITS.fullmatch(ts_part):
            raise InvalidCursorError()
        timestamp = int(ts_part)
        if timestamp <= 0 or timestamp > MAX_EPOCH_MS:
            raise InvalidCursorError()
        if not is_valid_id(entry_id):
            raise InvalidCursorError()

        return cls(timestamp=timestamp, id=entry_id)

    @classmethod
    def parse_optional(cls, raw: str | None) -> Cursor | None:
        """Decode a cursor query parameter, treating absent/empty as no cursor."""
        if raw is None or raw == "":
            return None
        return cls.decode(raw)

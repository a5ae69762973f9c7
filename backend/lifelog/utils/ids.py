"""Sortable identifier generation and validation.

Entities are keyed by ULIDs: 26 characters of Crockford base32 whose
lexical order follows creation time, so ``ORDER BY id`` also works as a
tie-break on equal timestamps.
"""

from __future__ import annotations

import re
from typing import Any

from ulid import ULID

# Crockford base32, upper case, without I, L, O and U
ID_PATTERN = re.compile(r"^[0-9A-HJKMNP-TV-Z]{26}$")


def new_id() -> str:
    """Generate a new ULID string."""
    return str(ULID())


def is_valid_id(value: Any) -> bool:
    """Check whether a value is a well-formed ULID string."""
    return isinstance(value, str) and ID_PATTERN.fullmatch(value) is not None

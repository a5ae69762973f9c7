"""Epoch-millisecond clock helpers."""

from __future__ import annotations

import time
from datetime import datetime, timezone

# Largest value a signed 64-bit BigInteger column can hold
MAX_EPOCH_MS = 2**63 - 1


def now_ms() -> int:
    """Current UTC instant as epoch milliseconds."""
    return time.time_ns() // 1_000_000


def to_ms(value: datetime) -> int:
    """Convert an aware datetime to epoch milliseconds."""
    # Integer arithmetic on the timedelta keeps exact millisecond boundaries
    delta = value - datetime(1970, 1, 1, tzinfo=timezone.utc)
    return (delta.days * 86_400 + delta.seconds) * 1000 + delta.microseconds // 1000

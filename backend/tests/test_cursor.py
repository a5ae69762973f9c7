"""Tests for the pagination cursor codec."""

import pytest

from lifelog.core.exceptions import InvalidCursorError
from lifelog.services.cursor import Cursor

VALID_ID = "01ARZ3NDEKTSV4RRFFQ69G5FAV"


def test_encode():
    assert Cursor(1735689600000, VALID_ID).encode() == f"1735689600000_{VALID_ID}"


def test_decode():
    cursor = Cursor.decode(f"1735689600000_{VALID_ID}")
    assert cursor == Cursor(timestamp=1735689600000, id=VALID_ID)


def test_decode_of_encode_is_identity():
    cursor = Cursor(1, VALID_ID)
    assert Cursor.decode(cursor.encode()) == cursor


def test_decode_splits_on_first_separator_only():
    # The id half keeps everything after the first separator, so it is rejected
    with pytest.raises(InvalidCursorError):
        Cursor.decode(f"1735689600000_{VALID_ID}_extra")


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "garbage",
        "_",
        f"_{VALID_ID}",
        "1735689600000_",
        "1735689600000_not-a-ulid",
        f"abc_{VALID_ID}",
        f"-5_{VALID_ID}",
        f"0_{VALID_ID}",
        f"1.5_{VALID_ID}",
        f" 1735689600000_{VALID_ID}",
        f"1735689600000_{VALID_ID.lower()}",
        f"99999999999999999999999_{VALID_ID}",
        f"{2**63}_{VALID_ID}",
        f"{'9' * 5000}_{VALID_ID}",
    ],
)
def test_decode_rejects_malformed(raw):
    with pytest.raises(InvalidCursorError) as exc_info:
        Cursor.decode(raw)
    assert exc_info.value.field == "cursor"
    assert exc_info.value.status_code == 400


def test_parse_optional():
    assert Cursor.parse_optional(None) is None
    assert Cursor.parse_optional("") is None
    assert Cursor.parse_optional(f"5_{VALID_ID}") == Cursor(5, VALID_ID)


def test_decode_accepts_largest_storable_timestamp():
    cursor = Cursor.decode(f"{2**63 - 1}_{VALID_ID}")
    assert cursor.timestamp == 2**63 - 1

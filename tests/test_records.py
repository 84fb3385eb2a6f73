"""Tests for W-L-P record parsing."""

import pytest

from situational_trends.services.trends.records import (
    SituationalRecord,
    over_wins,
    parse_record,
    under_wins,
)


@pytest.mark.parametrize(
    "record, expected",
    [
        ("15-3-0", (15, 3, 0)),
        ("10-8-2", (10, 8, 2)),
        ("7-4", (7, 4, 0)),
        ("9", (9, 0, 0)),
        (" 4-5-1 ", (4, 5, 1)),
    ],
)
def test_parse_record_counts(record, expected):
    parsed = parse_record(record)
    assert (parsed.wins, parsed.losses, parsed.pushes) == expected
    assert parsed.total == sum(expected)


@pytest.mark.parametrize("record", [None, "", "abc", "10-x-0", "10--0", "-", "1-2-3-4", "3.5-1-0"])
def test_parse_record_garbage_is_empty_sample(record):
    parsed = parse_record(record)
    assert parsed == SituationalRecord(0, 0, 0)
    assert parsed.total == 0


def test_parse_record_is_immutable():
    parsed = parse_record("1-2-3")
    with pytest.raises(AttributeError):
        parsed.wins = 5


def test_ou_record_helpers():
    assert over_wins("10-15-0") == 10
    assert under_wins("10-15-0") == 15
    assert over_wins(None) == 0
    assert under_wins("bad") == 0

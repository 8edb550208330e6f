"""Unit tests for date utilities"""

import pytest
from datetime import date
from roundup_gateway.utils.date_utils import full_day_range, parse_day


def test_full_day_range_from_strings():
    assert full_day_range("2026-01-19", "2026-01-25") == (
        "2026-01-19T00:00:00.000Z",
        "2026-01-25T23:59:59.999Z",
    )


def test_full_day_range_single_day():
    """Test one calendar day covers midnight to the last millisecond"""
    start, end = full_day_range(date(2026, 2, 1), date(2026, 2, 1))
    assert start == "2026-02-01T00:00:00.000Z"
    assert end == "2026-02-01T23:59:59.999Z"


def test_full_day_range_rejects_reversed_range():
    with pytest.raises(ValueError):
        full_day_range("2026-01-25", "2026-01-19")


def test_parse_day_rejects_garbage():
    with pytest.raises(ValueError):
        parse_day("19/01/2026")

from __future__ import annotations

from datetime import date, datetime, time

import pytest

from src.attendance_tracker.attendance_tracker.common.datetime_utils import (
    day_bounds,
    last_n_days,
    parse_timestamp,
    percentage,
)
from src.attendance_tracker.attendance_tracker.core.exceptions import ValidationError


@pytest.mark.parametrize(
    "part, total, expected",
    [(0, 0, 0), (1, 1, 100), (1, 2, 50), (1, 8, 13), (1, 3, 33), (2, 3, 67), (0, 5, 0)],
)
def test_percentage_rounds_half_up(part, total, expected):
    assert percentage(part, total) == expected


def test_day_bounds_cover_whole_day(fixed_now):
    start, end = day_bounds(fixed_now)

    assert start == datetime(2025, 3, 12, 0, 0, 0)
    assert end.time() == time.max
    assert day_bounds(fixed_now.date()) == (start, end)


def test_last_n_days_oldest_first():
    days = last_n_days(date(2025, 3, 12), 7)

    assert days[0] == date(2025, 3, 6)
    assert days[-1] == date(2025, 3, 12)
    assert len(days) == 7


def test_parse_timestamp():
    assert parse_timestamp(None) is None
    assert parse_timestamp("") is None
    assert parse_timestamp("2025-03-12T09:30:00") == datetime(2025, 3, 12, 9, 30)
    assert parse_timestamp("2025-03-12T09:30:00Z").tzinfo is None

    with pytest.raises(ValidationError):
        parse_timestamp("yesterday")

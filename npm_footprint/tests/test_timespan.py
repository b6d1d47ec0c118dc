"""
npm_footprint/tests/test_timespan.py — Download window calculation.
"""

from datetime import date, datetime

import pytest

from npm_footprint.timespan import Timespan, last_month_span, parse_base_time


@pytest.mark.parametrize(
    "now, expected",
    [
        (date(2026, 10, 18), ("2026-09-01", "2026-09-30")),
        (date(2026, 1, 5), ("2025-12-01", "2025-12-31")),
        (date(2024, 3, 1), ("2024-02-01", "2024-02-29")),
        (date(2026, 3, 31), ("2026-02-01", "2026-02-28")),
    ],
)
def test_last_month_span(now, expected):
    span = last_month_span(now)
    assert (span.start, span.end) == expected


def test_last_month_span_accepts_datetime():
    assert last_month_span(datetime(2026, 7, 4, 23, 59)) == Timespan("2026-06-01", "2026-06-30")


def test_last_month_span_default_is_previous_month():
    span = last_month_span()
    assert span.start.endswith("-01")
    assert span.start < span.end


def test_parse_base_time():
    assert parse_base_time("2026-03-15") == Timespan("2026-02-01", "2026-02-28")


@pytest.mark.parametrize("value", ["", "2026-13-01", "yesterday", "15/03/2026"])
def test_parse_base_time_rejects_garbage(value):
    with pytest.raises(ValueError, match="YYYY-MM-DD"):
        parse_base_time(value)


def test_npm_range_and_dict():
    span = Timespan("2026-09-01", "2026-09-30")
    assert span.npm_range == "2026-09-01:2026-09-30"
    assert span.to_dict() == {"start": "2026-09-01", "end": "2026-09-30"}

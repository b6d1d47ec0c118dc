"""
npm_footprint/timespan.py — Observation window for download counts.

The default window is the previous calendar month, first to last day,
expressed as ISO dates for the npm downloads range API.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Optional


@dataclass(frozen=True)
class Timespan:
    """Inclusive date range, ISO formatted (YYYY-MM-DD)."""

    start: str
    end: str

    def to_dict(self) -> dict:
        return {"start": self.start, "end": self.end}

    @property
    def npm_range(self) -> str:
        """Range segment for api.npmjs.org, e.g. ``2026-09-01:2026-09-30``."""
        return f"{self.start}:{self.end}"


def last_month_span(now: Optional[date] = None) -> Timespan:
    """Return the calendar month before *now* (default: today, UTC)."""
    if now is None:
        now = datetime.now(tz=timezone.utc).date()
    elif isinstance(now, datetime):
        now = now.date()
    last_month_end = now.replace(day=1) - timedelta(days=1)
    last_month_start = last_month_end.replace(day=1)
    return Timespan(
        start=last_month_start.isoformat(),
        end=last_month_end.isoformat(),
    )


def parse_base_time(value: str) -> Timespan:
    """Parse a ``YYYY-MM-DD`` base time into the month-before window.

    Raises:
        ValueError: If *value* is not an ISO date.
    """
    try:
        base = date.fromisoformat(value.strip())
    except ValueError:
        raise ValueError(f"invalid base time {value!r}, expected YYYY-MM-DD") from None
    return last_month_span(base)

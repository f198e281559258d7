from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Iterator, Optional


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_hhmm(value: str) -> time:
    """Parse HH:MM (or HH:MM:SS) into time."""
    fmt = "%H:%M:%S" if value.count(":") == 2 else "%H:%M"
    return datetime.strptime(value, fmt).time()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def to_local_naive(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an offset-aware datetime to naive local time; naive values pass through."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def iter_days(start: date, end: date) -> Iterator[date]:
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    first = date(year, month, 1)
    if month == 12:
        nxt = date(year + 1, 1, 1)
    else:
        nxt = date(year, month + 1, 1)
    return first, nxt - timedelta(days=1)


def is_school_day(day: date) -> bool:
    # Monday..Friday
    return day.weekday() < 5


def percent(part: int, total: int) -> int:
    # Half-up rounding, 12.5 -> 13.
    return int(part * 100 / total + 0.5) if total else 0

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional

from .errors import PeriodParseError

END_OF_TIME = date(9999, 12, 31)
DATE_FORMAT = "%Y-%m-%d"
UNDEFINED_TOKEN = "undefined"


def today() -> date:
    return date.today()


def normalise_date(value: Optional[date]) -> Optional[date]:
    """Drop any time-of-day component so comparisons work on whole days."""

    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    return value


def parse_date(value: str) -> date:
    """Read a ``yyyy-MM-dd`` boundary. ``undefined`` stands for the end of time."""

    cleaned = value.strip()
    if cleaned.lower() == UNDEFINED_TOKEN:
        return END_OF_TIME
    try:
        return datetime.strptime(cleaned, DATE_FORMAT).date()
    except ValueError as exc:
        raise PeriodParseError(value) from exc


def format_date(value: date) -> str:
    # Years below 1000 keep their leading zeros.
    return value.isoformat()


def day_after(value: date) -> Optional[date]:
    # None past the calendar limit: nothing can start after the end of time.
    try:
        return value + timedelta(days=1)
    except OverflowError:
        return None


def day_before(value: date) -> Optional[date]:
    try:
        return value - timedelta(days=1)
    except OverflowError:
        return None


def days_between(start: date, end: date) -> int:
    return (end - start).days


def is_one_day_before(earlier: date, later: date) -> bool:
    return days_between(earlier, later) == 1


__all__ = [
    "DATE_FORMAT",
    "END_OF_TIME",
    "UNDEFINED_TOKEN",
    "day_after",
    "day_before",
    "days_between",
    "format_date",
    "is_one_day_before",
    "normalise_date",
    "parse_date",
    "today",
]

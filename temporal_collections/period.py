from __future__ import annotations

from datetime import date
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, field_validator

from .dates import END_OF_TIME, format_date, is_one_day_before, normalise_date, parse_date, today

DateInput = Union[date, str, None]


def _coerce_boundary(value: Any) -> Any:
    if value is None:
        return END_OF_TIME
    if isinstance(value, str):
        return parse_date(value)
    if isinstance(value, date):
        return normalise_date(value)
    return value


class TimePeriod(BaseModel):
    """A closed range of whole days.

    Missing boundaries are read as :data:`END_OF_TIME`, strings must follow
    ``yyyy-MM-dd`` (``undefined`` is accepted as an alias for the end of
    time) and datetimes lose their time of day, both on construction and on
    assignment::

        >>> period = TimePeriod("2000-01-14", "undefined")
        >>> period.end = datetime(2000, 2, 14, 17, 30)
        >>> str(period)
        '2000-01-14 TO 2000-02-14'

    Constructing from a malformed string raises :class:`PeriodParseError`;
    assigning one raises pydantic's ``ValidationError``. Both are
    ``ValueError`` subclasses.
    """

    model_config = {"validate_assignment": True}

    start: date = Field(default=END_OF_TIME, description="First effective day (inclusive)")
    end: date = Field(default=END_OF_TIME, description="Last effective day (inclusive)")

    def __init__(self, start: DateInput = None, end: DateInput = None, **data: Any) -> None:
        super().__init__(start=_coerce_boundary(start), end=_coerce_boundary(end), **data)

    @field_validator("start", "end", mode="before")
    @classmethod
    def _normalise_boundary(cls, value: Any) -> Any:
        return _coerce_boundary(value)

    @classmethod
    def from_today(cls) -> "TimePeriod":
        """A period starting today with no end."""
        return cls(today(), None)

    @property
    def is_open_ended(self) -> bool:
        return self.end == END_OF_TIME

    def is_valid(self) -> bool:
        return self.start <= self.end

    def contains_date(self, value: Optional[date]) -> bool:
        # A missing date asks for the end of time.
        if value is None:
            return self.end == END_OF_TIME
        value = normalise_date(value)
        return self.start <= value <= self.end

    def contains_period(self, other: "TimePeriod") -> bool:
        return self.contains_date(other.start) and self.contains_date(other.end)

    def contains(self, other: Union["TimePeriod", date, None]) -> bool:
        if isinstance(other, TimePeriod):
            return self.contains_period(other)
        return self.contains_date(other)

    __contains__ = contains

    def intersects(self, other: "TimePeriod") -> bool:
        """True when the periods share at least one day, edges included."""
        return (
            self.contains_date(other.start)
            or self.contains_date(other.end)
            or other.contains_date(self.start)
            or other.contains_date(self.end)
        )

    def is_adjacent_to(self, other: "TimePeriod") -> bool:
        return is_one_day_before(self.end, other.start) or is_one_day_before(other.end, self.start)

    def merge(self, other: "TimePeriod") -> "TimePeriod":
        """Envelope of both periods. Any gap between them is swallowed."""
        return TimePeriod(min(self.start, other.start), max(self.end, other.end))

    def clone(self) -> "TimePeriod":
        return self.model_copy()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimePeriod):
            return NotImplemented
        return self.start == other.start and self.end == other.end

    def __hash__(self) -> int:
        return hash((self.start, self.end))

    def __str__(self) -> str:
        return f"{format_date(self.start)} TO {format_date(self.end)}"


def valid_period(start: Optional[date], end: Optional[date]) -> Optional[TimePeriod]:
    """Build ``[start, end]``, or return ``None`` when the range holds no day."""

    if start is None or end is None or start > end:
        return None
    return TimePeriod(start, end)


__all__ = ["DateInput", "TimePeriod", "valid_period"]

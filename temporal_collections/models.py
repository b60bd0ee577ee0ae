from __future__ import annotations

from datetime import date
from typing import Any, Callable, ClassVar, Dict, Hashable, NamedTuple, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError

from .errors import InvalidRecordError, TemporalPropertyError
from .period import TimePeriod

DEFAULT_TIMELINE_KEY = 0


class LogicalKey(NamedTuple):
    """Natural key of a timeline slot: which timeline, and from which day."""

    timeline_key: Hashable
    effective: date


class TemporalData(BaseModel):
    """A record of a timeline: some content plus the period it is effective.

    Concrete record types add their own fields and list the ones that may be
    changed through :meth:`set_property` in ``TEMPORAL_PROPERTIES``. The
    defaults below compare and clone every declared field; records holding
    references that must not be shared can override :meth:`clone_data`.
    """

    model_config = {"validate_assignment": True}

    TEMPORAL_PROPERTIES: ClassVar[Tuple[str, ...]] = ()

    period: TimePeriod = Field(
        default_factory=TimePeriod.from_today,
        description="Days on which the record is effective",
    )
    identity: Any = Field(
        default=None,
        description="Surrogate identifier assigned by the backing store, if persisted",
    )
    timeline_key: Any = Field(
        default=DEFAULT_TIMELINE_KEY,
        description="Selects the timeline of a denormalized collection the record belongs to",
    )

    @property
    def logical_key(self) -> LogicalKey:
        return LogicalKey(self.timeline_key, self.period.start)

    def _content(self) -> Dict[str, Any]:
        return self.model_dump(exclude={"period", "identity"})

    def equals_ignore_period(self, other: Optional["TemporalData"]) -> bool:
        if other is None or type(other) is not type(self):
            return False
        return self._content() == other._content()

    def clone_data(self) -> "TemporalData":
        """Copy of the record without its surrogate identity."""
        clone = self.model_copy(deep=True)
        clone.identity = None
        return clone

    def set_property(self, name: str, value: Any) -> None:
        self._check_property(name)
        try:
            setattr(self, name, value)
        except ValidationError as exc:
            raise TemporalPropertyError(
                f"Invalid value for property '{name}' of {type(self).__name__}"
            ) from exc

    def get_property(self, name: str) -> Any:
        self._check_property(name)
        return getattr(self, name)

    def _check_property(self, name: str) -> None:
        if name not in self.TEMPORAL_PROPERTIES:
            raise TemporalPropertyError(
                f"{type(self).__name__} has no temporal property '{name}'"
            )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TemporalData):
            return NotImplemented
        return self.equals_ignore_period(other) and self.period == other.period

    def __hash__(self) -> int:
        return hash((self.timeline_key, self.period.start))

    def __str__(self) -> str:
        return f"{self.timeline_key}: {self.period}"


class SimpleTemporalData(TemporalData):
    """Wraps a single plain value, for ad-hoc timelines of strings or numbers."""

    TEMPORAL_PROPERTIES: ClassVar[Tuple[str, ...]] = ("data",)

    data: Any = None


TemporalDataFactory = Callable[[], TemporalData]


def start_date_key(record: Optional[TemporalData]) -> date:
    """Ordering key of a timeline: the first effective day of the record."""

    period = getattr(record, "period", None)
    if record is None or period is None:
        raise InvalidRecordError("Can not order a missing record or a record without a period")
    return period.start


def compare_start_dates(first: Optional[TemporalData], second: Optional[TemporalData]) -> int:
    left, right = start_date_key(first), start_date_key(second)
    return (left > right) - (left < right)


__all__ = [
    "DEFAULT_TIMELINE_KEY",
    "LogicalKey",
    "SimpleTemporalData",
    "TemporalData",
    "TemporalDataFactory",
    "compare_start_dates",
    "start_date_key",
]

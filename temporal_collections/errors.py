from __future__ import annotations


class TemporalError(Exception):
    """Base class for every error raised by the temporal collections."""


class PeriodParseError(TemporalError, ValueError):
    """A boundary string could not be read as a ``yyyy-MM-dd`` date."""

    def __init__(self, value: str) -> None:
        super().__init__(f"Unparseable date '{value}', expected yyyy-MM-dd or 'undefined'")
        self.value = value


class InvalidRecordError(TemporalError, ValueError):
    pass


class UnsupportedOperationError(TemporalError):
    pass


class EmptyTimeLineError(TemporalError, LookupError):
    pass


class TemporalPropertyError(TemporalError, AttributeError):
    """A named property change could not be applied to a record."""


__all__ = [
    "EmptyTimeLineError",
    "InvalidRecordError",
    "PeriodParseError",
    "TemporalError",
    "TemporalPropertyError",
    "UnsupportedOperationError",
]

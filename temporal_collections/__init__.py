"""Temporal collections: histories of records over non-overlapping day ranges."""

from .dates import END_OF_TIME
from .denormalized import DenormalizedTimeLine
from .errors import (
    EmptyTimeLineError,
    InvalidRecordError,
    PeriodParseError,
    TemporalError,
    TemporalPropertyError,
    UnsupportedOperationError,
)
from .identity_pool import IdentityPool
from .models import (
    LogicalKey,
    SimpleTemporalData,
    TemporalData,
    TemporalDataFactory,
    compare_start_dates,
    start_date_key,
)
from .period import TimePeriod, valid_period
from .policies import Policy
from .settings import Settings, configure_logging
from .timeline import (
    TimeLine,
    TimeLineFactory,
    get_gaps,
    period_of_existence_timeline,
    perpetual_timeline,
    timeline_factory,
)
from .tracked import TrackedTimeLine

__all__ = [
    "END_OF_TIME",
    "DenormalizedTimeLine",
    "EmptyTimeLineError",
    "IdentityPool",
    "InvalidRecordError",
    "LogicalKey",
    "PeriodParseError",
    "Policy",
    "Settings",
    "SimpleTemporalData",
    "TemporalData",
    "TemporalDataFactory",
    "TemporalError",
    "TemporalPropertyError",
    "TimeLine",
    "TimeLineFactory",
    "TimePeriod",
    "TrackedTimeLine",
    "UnsupportedOperationError",
    "compare_start_dates",
    "configure_logging",
    "get_gaps",
    "period_of_existence_timeline",
    "perpetual_timeline",
    "start_date_key",
    "timeline_factory",
    "valid_period",
]

from __future__ import annotations

import functools
import logging
from datetime import date
from typing import Any, Callable, Iterable, Iterator, List, Optional, Union

from .dates import day_after, day_before, normalise_date
from .errors import EmptyTimeLineError, UnsupportedOperationError
from .identity_pool import IdentityPool
from .models import TemporalData, TemporalDataFactory, start_date_key
from .period import TimePeriod, valid_period
from .policies import ADD_RULES, Policy, clear_period
from .settings import settings

logger = logging.getLogger("temporal.timeline")


class TimeLine:
    """An ordered history of :class:`TemporalData` records.

    Records are kept sorted by start date and never overlap; how overlaps are
    resolved on :meth:`add` depends on the timeline's :class:`Policy`.
    Records are owned by the timeline while they are members: their periods
    are truncated, stretched and split in place, so callers should not share a
    record between two timelines they intend to mutate independently.
    """

    def __init__(
        self,
        entries: Optional[Iterable[TemporalData]] = None,
        *,
        policy: Union[Policy, str] = Policy.PERIOD_OF_EXISTENCE,
    ) -> None:
        self.policy = Policy(policy)
        self._entries: List[TemporalData] = []
        self._pool = IdentityPool()
        if entries is not None:
            self.update(entries)

    @property
    def identity_pool(self) -> IdentityPool:
        return self._pool

    def new_instance(self) -> "TimeLine":
        """An empty timeline following the same policy."""
        return type(self)(policy=self.policy)

    # -- mutation -----------------------------------------------------------

    def add(self, data: Optional[TemporalData]) -> bool:
        """Add ``data`` under the timeline's policy. Returns whether anything changed."""
        return ADD_RULES[self.policy](self, data)

    def update(self, entries: Iterable[TemporalData]) -> bool:
        changed = False
        for data in entries:
            changed = self.add(data) or changed
        return changed

    def insert_entry(self, data: TemporalData) -> bool:
        """Place ``data`` without any reconciliation.

        Refused when another record already starts on the same day. A record
        without identity picks up one released earlier for its logical key.
        """

        start = start_date_key(data)
        if any(entry.period.start == start for entry in self._entries):
            return False
        self._entries.append(data)
        self.resort()
        if data.identity is None:
            data.identity = self._pool.claim(data.logical_key)
        return True

    def discard(self, data: TemporalData) -> Optional[Any]:
        """Remove ``data`` and park its identity for reuse.

        Returns the freed identity, or ``None`` when the record was not a
        member or had never been persisted.
        """

        for index, entry in enumerate(self._entries):
            if entry is data:
                del self._entries[index]
                self._pool.release(data.logical_key, data.identity)
                return data.identity
        return None

    def resort(self) -> None:
        self._entries.sort(key=start_date_key)

    def merge_adjacent(self) -> None:
        """Fold each record into its predecessor when they touch and hold equal content."""

        last: Optional[TemporalData] = None
        for current in list(self._entries):
            if (
                last is not None
                and last.period.is_adjacent_to(current.period)
                and last.equals_ignore_period(current)
            ):
                freed = self.discard(current)
                logger.debug("Merging %s into %s", current, last)
                last.period.end = current.period.end
                if last.identity is None:
                    key = current.logical_key if freed is not None else last.logical_key
                    last.identity = self._pool.claim(key)
            else:
                last = current

    def clear(self, period: Optional[TimePeriod] = None) -> None:
        """Remove the coverage of ``period``, or every record when no period is given.

        Perpetual timelines can only be emptied as a whole.
        """

        if period is None:
            for data in list(self._entries):
                self.discard(data)
            return
        if not self.policy.allows_gaps:
            logger.warning("Refusing to clear %s from a perpetual timeline", period)
            raise UnsupportedOperationError("Perpetual timelines can not be terminated")
        clear_period(self, period)

    def set_property(
        self,
        name: str,
        period: TimePeriod,
        value: Any,
        factory: TemporalDataFactory,
    ) -> None:
        """Make ``name`` equal ``value`` over exactly ``period``.

        Records straddling the boundaries are split so that only the days
        inside ``period`` change, records inside it are changed in place, and
        days nobody covers get a fresh record from ``factory``. When the
        record straddling the start also runs past the end, the fragment
        created for the start already carries the new value and keeps it up
        to that record's original end.
        """

        effective = self.get_as_of(period.start)
        if effective is not None and effective.period.start < period.start:
            fragment = effective.clone_data()
            fragment.period = TimePeriod(period.start, effective.period.end)
            fragment.set_property(name, value)
            self.add(fragment)

        effective = self.get_as_of(period.end)
        if effective is not None and effective.period.end > period.end:
            continuation = effective.clone_data()
            continuation.period = TimePeriod(day_after(period.end), effective.period.end)
            effective.set_property(name, value)
            self.add(continuation)

        for data in self.get_subset(period):
            data.set_property(name, value)

        for gap in self.get_gaps(period):
            data = factory()
            data.set_property(name, value)
            data.period = gap
            self.add(data)

        self.merge_adjacent()

    # -- queries ------------------------------------------------------------

    def get_as_of(self, as_of: Optional[date]) -> Optional[TemporalData]:
        """The record effective on ``as_of``; ``None`` asks for the end of time."""

        as_of = normalise_date(as_of)
        for data in self._entries:
            if data.period.contains_date(as_of):
                return data
        return None

    def get_property(self, name: str, as_of: Optional[date]) -> Any:
        data = self.get_as_of(as_of)
        if data is None:
            return None
        return data.get_property(name)

    def get_effective_subset(self, period: TimePeriod) -> "TimeLine":
        """Records sharing at least one day with ``period``."""
        return self._subset(lambda data: period.intersects(data.period))

    def get_subset(self, period: TimePeriod) -> "TimeLine":
        """Records lying entirely inside ``period``."""
        return self._subset(lambda data: period.contains_period(data.period))

    def _subset(self, predicate: Callable[[TemporalData], bool]) -> "TimeLine":
        # Members are inserted as they are, without reconciliation.
        subset = self.new_instance()
        for data in self._entries:
            if predicate(data):
                subset.insert_entry(data)
        return subset

    def get_latest_effective_date(self) -> date:
        if not self._entries:
            raise EmptyTimeLineError("An empty timeline has no effective date")
        return self._entries[-1].period.start

    def get_gaps(self, bound: TimePeriod) -> List[TimePeriod]:
        return get_gaps(self._entries, bound)

    # -- container protocol -------------------------------------------------

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[TemporalData]:
        # Snapshot: rules discard members while scanning.
        return iter(list(self._entries))

    def __contains__(self, item: object) -> bool:
        return any(entry is item or entry == item for entry in self._entries)

    def __getitem__(self, index):
        return self._entries[index]

    def __repr__(self) -> str:
        return f"TimeLine(policy={self.policy.value}, entries={[str(e) for e in self._entries]})"


def get_gaps(entries: Iterable[TemporalData], bound: TimePeriod) -> List[TimePeriod]:
    """Maximal day ranges inside ``bound`` that no record covers, in order.

    ``entries`` must be sorted by start date.
    """

    gaps: List[TimePeriod] = []
    gap_start: Optional[date] = bound.start
    for data in entries:
        current = data.period
        if current.intersects(bound):
            gap = valid_period(gap_start, day_before(current.start))
            if gap is not None:
                gaps.append(gap)
        elif current.start > bound.end:
            break
        if current.end >= gap_start:
            gap_start = day_after(current.end)
            if gap_start is None:
                return gaps
    gap = valid_period(gap_start, bound.end)
    if gap is not None:
        gaps.append(gap)
    return gaps


TimeLineFactory = Callable[[], TimeLine]


def timeline_factory(policy: Union[Policy, str, None] = None) -> TimeLineFactory:
    """Zero-argument callable producing empty timelines.

    Without an explicit policy the configured ``default_policy`` is used.
    """

    resolved = Policy(policy) if policy is not None else settings.default_policy
    return functools.partial(TimeLine, policy=resolved)


def period_of_existence_timeline() -> TimeLine:
    return TimeLine(policy=Policy.PERIOD_OF_EXISTENCE)


def perpetual_timeline() -> TimeLine:
    return TimeLine(policy=Policy.PERPETUAL)


__all__ = [
    "TimeLine",
    "TimeLineFactory",
    "get_gaps",
    "period_of_existence_timeline",
    "perpetual_timeline",
    "timeline_factory",
]

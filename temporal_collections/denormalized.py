from __future__ import annotations

import itertools
import logging
from datetime import date
from typing import Any, Dict, Hashable, Iterable, Iterator, List, Optional

from .models import TemporalData, TemporalDataFactory
from .period import TimePeriod
from .timeline import TimeLine, TimeLineFactory, timeline_factory

logger = logging.getLogger("temporal.denormalized")


class DenormalizedTimeLine:
    """Many independent timelines in one collection, keyed by ``timeline_key``.

    Each record is routed to the timeline registered under its key, which is
    created from ``factory`` the first time the key shows up. Without a
    factory the configured default policy applies.
    """

    def __init__(
        self,
        factory: Optional[TimeLineFactory] = None,
        entries: Optional[Iterable[TemporalData]] = None,
    ) -> None:
        self._factory: TimeLineFactory = factory or timeline_factory()
        self._timelines: Dict[Hashable, TimeLine] = {}
        if entries is not None:
            self.update(entries)

    def _ensure(self, key: Hashable) -> TimeLine:
        line = self._timelines.get(key)
        if line is None:
            logger.debug("Creating timeline for key %r", key)
            line = self._factory()
            self._timelines[key] = line
        return line

    def add(self, data: Optional[TemporalData]) -> bool:
        if data is None:
            return False
        return self._ensure(data.timeline_key).add(data)

    def update(self, entries: Iterable[TemporalData]) -> bool:
        changed = False
        for data in entries:
            changed = self.add(data) or changed
        return changed

    def timeline(self, key: Hashable) -> Optional[TimeLine]:
        return self._timelines.get(key)

    def keys(self) -> List[Hashable]:
        return list(self._timelines)

    def get_as_of(self, key: Hashable, as_of: Optional[date]) -> Optional[TemporalData]:
        line = self._timelines.get(key)
        if line is None:
            return None
        return line.get_as_of(as_of)

    def get_property(self, key: Hashable, name: str, as_of: Optional[date]) -> Any:
        line = self._timelines.get(key)
        if line is None:
            return None
        return line.get_property(name, as_of)

    def set_property(
        self,
        key: Hashable,
        name: str,
        period: TimePeriod,
        value: Any,
        factory: TemporalDataFactory,
    ) -> None:
        """Like :meth:`TimeLine.set_property` on the timeline for ``key``, created if missing.

        Records built by ``factory`` are not re-keyed; the factory is expected
        to produce records carrying ``key``.
        """
        self._ensure(key).set_property(name, period, value, factory)

    def clear(self, period: Optional[TimePeriod] = None) -> None:
        """Clear ``period`` from every member timeline, or drop them all."""

        if period is None:
            self._timelines.clear()
            return
        for line in self._timelines.values():
            line.clear(period)

    def __len__(self) -> int:
        return sum(len(line) for line in self._timelines.values())

    def __iter__(self) -> Iterator[TemporalData]:
        return itertools.chain.from_iterable(list(self._timelines.values()))

    def __contains__(self, item: object) -> bool:
        key = getattr(item, "timeline_key", None)
        line = self._timelines.get(key)
        return line is not None and item in line

    def __repr__(self) -> str:
        return f"DenormalizedTimeLine(keys={self.keys()!r}, size={len(self)})"


__all__ = ["DenormalizedTimeLine"]

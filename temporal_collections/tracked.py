"""A timeline that loads lazily and reports access, for persistence layers.

:class:`TrackedTimeLine` does not store anything itself. A persistence layer
hands it a ``loader`` returning the stored rows and gets notified through
``on_read`` / ``on_write`` whenever the timeline is queried or modified, so it
can flush changes later. Stored rows are trusted to be consistent and are
placed as they are, without going through the policy rules.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Iterable, Iterator, List, Optional

from .models import TemporalData, TemporalDataFactory
from .period import TimePeriod
from .timeline import TimeLine, TimeLineFactory, timeline_factory

logger = logging.getLogger("temporal.tracked")

Loader = Callable[[], Iterable[TemporalData]]
Callback = Callable[[], None]


class TrackedTimeLine:
    def __init__(
        self,
        loader: Optional[Loader] = None,
        factory: Optional[TimeLineFactory] = None,
        *,
        on_read: Optional[Callback] = None,
        on_write: Optional[Callback] = None,
    ) -> None:
        self._loader = loader
        self._factory: TimeLineFactory = factory or timeline_factory()
        self._on_read = on_read
        self._on_write = on_write
        self._timeline: Optional[TimeLine] = None
        self.dirty = False

    @property
    def is_initialized(self) -> bool:
        return self._timeline is not None

    @property
    def timeline(self) -> TimeLine:
        """The backing timeline, loaded on first access."""

        if self._timeline is None:
            line = self._factory()
            rows = self._loader() if self._loader is not None else ()
            for row in rows:
                line.insert_entry(row)
            logger.debug("Initialised tracked timeline with %d records", len(line))
            self._timeline = line
        return self._timeline

    def mark_clean(self) -> None:
        self.dirty = False

    def _read(self) -> TimeLine:
        line = self.timeline
        if self._on_read is not None:
            self._on_read()
        return line

    def _write(self) -> TimeLine:
        line = self.timeline
        self.dirty = True
        if self._on_write is not None:
            self._on_write()
        return line

    # -- mutation -----------------------------------------------------------

    def add(self, data: Optional[TemporalData]) -> bool:
        return self._write().add(data)

    def update(self, entries: Iterable[TemporalData]) -> bool:
        return self._write().update(entries)

    def discard(self, data: TemporalData) -> Optional[Any]:
        return self._write().discard(data)

    def clear(self, period: Optional[TimePeriod] = None) -> None:
        self._write().clear(period)

    def set_property(
        self,
        name: str,
        period: TimePeriod,
        value: Any,
        factory: TemporalDataFactory,
    ) -> None:
        self._write().set_property(name, period, value, factory)

    # -- queries ------------------------------------------------------------

    def get_as_of(self, as_of: Optional[date]) -> Optional[TemporalData]:
        return self._read().get_as_of(as_of)

    def get_property(self, name: str, as_of: Optional[date]) -> Any:
        return self._read().get_property(name, as_of)

    def get_effective_subset(self, period: TimePeriod) -> TimeLine:
        return self._read().get_effective_subset(period)

    def get_subset(self, period: TimePeriod) -> TimeLine:
        return self._read().get_subset(period)

    def get_latest_effective_date(self) -> date:
        return self._read().get_latest_effective_date()

    def get_gaps(self, bound: TimePeriod) -> List[TimePeriod]:
        return self._read().get_gaps(bound)

    def __len__(self) -> int:
        return len(self._read())

    def __iter__(self) -> Iterator[TemporalData]:
        return iter(self._read())

    def __contains__(self, item: object) -> bool:
        return item in self._read()

    def __repr__(self) -> str:
        state = "loaded" if self.is_initialized else "pending"
        return f"TrackedTimeLine({state}, dirty={self.dirty})"


__all__ = ["Loader", "TrackedTimeLine"]

"""Consistency rules applied when records enter or leave a timeline.

Two policies exist:

* ``PERIOD_OF_EXISTENCE`` allows gaps but never overlap. A new record wins
  over whatever it covers: existing records inside its period are dropped,
  records hanging over one of its edges are truncated, and a record that
  surrounds it is split around it (unless it already says the same thing, in
  which case nothing happens). Adjacent records with equal content are merged
  afterwards.
* ``PERPETUAL`` applies the same rules, then closes every gap by stretching
  the earlier record and lets the last record run to the end of time. Holes
  can not be punched into such a timeline.

The functions operate on a :class:`~temporal_collections.timeline.TimeLine`
through its low-level affordances (``insert_entry``, ``discard``, ``resort``,
``merge_adjacent``); they are selected through :data:`ADD_RULES`.
"""

from __future__ import annotations

import logging
from datetime import date
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, Optional

from .dates import END_OF_TIME, day_after, day_before
from .models import TemporalData
from .period import TimePeriod, valid_period

if TYPE_CHECKING:  # pragma: no cover
    from .timeline import TimeLine

logger = logging.getLogger("temporal.policies")


class Policy(str, Enum):
    PERIOD_OF_EXISTENCE = "period_of_existence"
    PERPETUAL = "perpetual"

    @property
    def allows_gaps(self) -> bool:
        return self is Policy.PERIOD_OF_EXISTENCE


def reconcile(timeline: "TimeLine", new_data: Optional[TemporalData]) -> bool:
    """Insert ``new_data`` under the period of existence rules.

    Returns whether the timeline changed. Existing records are scanned in
    start order; the scan stops at the first record starting more than one
    day after the new period, since nothing beyond it can overlap or touch.
    """

    if new_data is None or new_data in timeline:
        return False
    if not len(timeline):
        return timeline.insert_entry(new_data)

    new_period = new_data.period
    cutoff = day_after(new_period.end)
    changed = False

    for old in timeline:
        old_period = old.period
        if cutoff is not None and cutoff < old_period.start:
            break
        if not new_period.intersects(old_period):
            continue

        if new_period.contains_period(old_period):
            logger.debug("Dropping %s, covered by %s", old, new_period)
            timeline.discard(old)
        elif old_period.contains_period(new_period):
            if old.equals_ignore_period(new_data):
                return False
            _split(timeline, old, new_period)
            changed = True
            break
        elif old_period.contains_date(new_period.start):
            _truncate(timeline, old, end=day_before(new_period.start))
        else:
            _truncate(timeline, old, start=day_after(new_period.end))

    timeline.resort()
    changed = timeline.insert_entry(new_data) or changed
    timeline.merge_adjacent()
    return changed


def _truncate(
    timeline: "TimeLine",
    old: TemporalData,
    *,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> None:
    # A missing boundary means the record was pushed past a calendar limit.
    if start is None and end is None:
        timeline.discard(old)
        return
    if start is not None:
        old.period.start = start
    if end is not None:
        old.period.end = end
    if not old.period.is_valid():
        logger.debug("Dropping %s, truncated to nothing", old)
        timeline.discard(old)


def _split(timeline: "TimeLine", old: TemporalData, new_period: TimePeriod) -> None:
    """Cut ``old`` around ``new_period``.

    ``old`` itself keeps the earliest surviving fragment so that its identity
    stays with the slot it already occupies; the later fragment, if any, is a
    clone without identity.
    """

    left = valid_period(old.period.start, day_before(new_period.start))
    right = valid_period(day_after(new_period.end), old.period.end)
    logger.debug("Splitting %s around %s", old, new_period)

    if left is not None:
        old.period = left
        if right is not None:
            fragment = old.clone_data()
            fragment.period = right
            timeline.insert_entry(fragment)
    elif right is not None:
        old.period = right
        timeline.resort()


def reconcile_perpetual(timeline: "TimeLine", new_data: Optional[TemporalData]) -> bool:
    """Insert ``new_data`` and keep the timeline free of gaps."""

    if new_data is None:
        return False
    if not len(timeline):
        changed = timeline.insert_entry(new_data)
    else:
        changed = reconcile(timeline, new_data)
        if not changed:
            return False
    backfill(timeline)
    return changed


def backfill(timeline: "TimeLine") -> None:
    """Stretch records over the gaps that follow them; the last one never ends."""

    entries = list(timeline)
    if not entries:
        return
    for previous, following in zip(entries, entries[1:]):
        if not previous.period.is_adjacent_to(following.period):
            logger.debug("Stretching %s up to %s", previous, following.period.start)
            previous.period.end = day_before(following.period.start)
    entries[-1].period.end = END_OF_TIME
    timeline.merge_adjacent()


def clear_period(timeline: "TimeLine", period: Optional[TimePeriod]) -> None:
    """Punch ``period`` out of a timeline that tolerates gaps."""

    if period is None:
        return
    for data in timeline:
        current = data.period
        if period.contains_period(current):
            timeline.discard(data)
        elif current.contains_period(period):
            right = valid_period(day_after(period.end), current.end)
            _truncate(timeline, data, end=day_before(period.start))
            if right is not None:
                remainder = data.clone_data()
                remainder.period = right
                timeline.add(remainder)
            # Nothing else can intersect a period held inside a single record.
            break
        elif period.contains_date(current.start):
            _truncate(timeline, data, start=day_after(period.end))
        elif period.contains_date(current.end):
            _truncate(timeline, data, end=day_before(period.start))
    timeline.resort()


ADD_RULES: Dict[Policy, Callable[["TimeLine", Optional[TemporalData]], bool]] = {
    Policy.PERIOD_OF_EXISTENCE: reconcile,
    Policy.PERPETUAL: reconcile_perpetual,
}


__all__ = [
    "ADD_RULES",
    "Policy",
    "backfill",
    "clear_period",
    "reconcile",
    "reconcile_perpetual",
]

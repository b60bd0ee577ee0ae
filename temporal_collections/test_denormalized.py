from __future__ import annotations

from datetime import date

import pytest

from .denormalized import DenormalizedTimeLine
from .errors import UnsupportedOperationError
from .models import SimpleTemporalData
from .period import TimePeriod
from .policies import Policy
from .settings import settings
from .timeline import timeline_factory


def _keyed(key: str, data: str, period: TimePeriod | None = None) -> SimpleTemporalData:
    record = SimpleTemporalData(data=data, timeline_key=key)
    if period is not None:
        record.period = period
    return record


def _create_sample_line() -> DenormalizedTimeLine:
    return DenormalizedTimeLine(
        timeline_factory(Policy.PERIOD_OF_EXISTENCE),
        [_keyed("key1", "data1"), _keyed("key2", "data2"), _keyed("key3", "data3")],
    )


def test_size() -> None:
    empty = DenormalizedTimeLine(timeline_factory(Policy.PERIOD_OF_EXISTENCE))
    assert len(empty) == 0
    assert len(_create_sample_line()) == 3


def test_add_routes_by_timeline_key() -> None:
    line = _create_sample_line()
    extra = _keyed("key1", "data2", TimePeriod(date(1999, 3, 12), date(1999, 12, 31)))
    assert line.add(extra)
    assert len(line) == 4
    assert len(line.timeline("key1")) == 2
    assert extra in line
    assert not line.add(None)


def test_get_as_of() -> None:
    line = _create_sample_line()
    today = date.today()
    first = line.get_as_of("key1", today)
    second = line.get_as_of("key2", today)
    third = line.get_as_of("key3", today)
    assert first is not None and second is not None and third is not None
    assert first != second
    assert second != third
    assert line.get_as_of("missing", today) is None


def test_iteration_covers_every_timeline() -> None:
    line = _create_sample_line()
    records = list(line)
    assert len(records) == len(line)
    assert all(isinstance(record, SimpleTemporalData) for record in records)
    assert {record.timeline_key for record in records} == {"key1", "key2", "key3"}


def test_keys_and_lookup_do_not_create_timelines() -> None:
    line = _create_sample_line()
    assert line.keys() == ["key1", "key2", "key3"]
    assert line.timeline("missing") is None
    assert line.get_property("missing", "data", date.today()) is None
    assert line.keys() == ["key1", "key2", "key3"]


def test_set_property_creates_the_timeline() -> None:
    line = DenormalizedTimeLine(timeline_factory(Policy.PERIOD_OF_EXISTENCE))
    period = TimePeriod(date(2000, 1, 1), date(2000, 6, 30))
    line.set_property("home", "data", period, "Louisville", lambda: SimpleTemporalData(timeline_key="home"))

    assert line.keys() == ["home"]
    assert line.get_property("home", "data", date(2000, 3, 1)) == "Louisville"
    assert line.get_property("home", "data", date(2000, 7, 1)) is None
    assert line.get_as_of("home", date(2000, 1, 1)).period == period


def test_clear_period_applies_to_every_timeline() -> None:
    line = DenormalizedTimeLine(
        timeline_factory(Policy.PERIOD_OF_EXISTENCE),
        [
            _keyed("a", "x", TimePeriod(date(2000, 1, 1), date(2000, 12, 31))),
            _keyed("b", "y", TimePeriod(date(2000, 6, 1))),
        ],
    )
    line.clear(TimePeriod(date(2000, 7, 1)))

    assert line.get_as_of("a", date(2000, 6, 30)).period.end == date(2000, 6, 30)
    assert line.get_as_of("b", date(2000, 6, 30)).period.end == date(2000, 6, 30)
    assert line.get_as_of("a", date(2000, 7, 1)) is None

    line.clear()
    assert len(line) == 0
    assert line.keys() == []


def test_default_factory_follows_settings(monkeypatch) -> None:
    monkeypatch.setattr(settings, "default_policy", Policy.PERPETUAL)
    line = DenormalizedTimeLine()
    line.add(_keyed("a", "x", TimePeriod(date(2000, 1, 1), date(2000, 12, 31))))

    assert line.timeline("a").policy is Policy.PERPETUAL
    assert line.get_as_of("a", None) is not None
    with pytest.raises(UnsupportedOperationError):
        line.clear(TimePeriod(date(2001, 1, 1)))

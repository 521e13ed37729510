from __future__ import annotations

from typing import List

import pytest

from datastore.memory_store import InMemoryReadingStore
from models.errors import QueryError, StorageError
from models.records import StationFeed, StationReading
from services.query import QueryService, parse_bound


class SequenceClock:
    def __init__(self, values: List[int]) -> None:
        self._values = list(values)

    def __call__(self) -> int:
        return self._values.pop(0)


def _populate(store: InMemoryReadingStore, count: int) -> None:
    for value in range(count):
        store.store(StationReading(station_id="s1", temperature=10.0 * (value + 1), humidity=50.0))


def test_range_decimates_loaded_feeds() -> None:
    store = InMemoryReadingStore(clock=SequenceClock([1000, 2000, 2400, 700_000]))
    _populate(store, 4)
    service = QueryService(store, window_ms=5000)

    feeds = service.range("0", 10_000)
    later = service.range(0, 1_000_000)

    assert len(feeds) == 1
    assert feeds[0].temperature == 20.0
    assert feeds[0].tstamp == 0
    assert [(feed.tstamp, feed.temperature) for feed in later] == [(0, 20.0), (700_000, 40.0)]


def test_latest_since_uses_default_ten_minute_window() -> None:
    store = InMemoryReadingStore(clock=SequenceClock([1000, 2000, 3000, 700_000]))
    _populate(store, 4)
    service = QueryService(store)

    feeds = service.latest_since(0)

    assert service.window_ms == 600_000
    assert [(feed.tstamp, feed.temperature) for feed in feeds] == [(0, 20.0), (600_000, 40.0)]


def test_window_override_per_call() -> None:
    store = InMemoryReadingStore(clock=SequenceClock([1000, 2000, 3000]))
    _populate(store, 3)
    service = QueryService(store, window_ms=600_000)

    feeds = service.latest_since(0, window_ms="100")

    assert [feed.temperature for feed in feeds] == [10.0, 20.0, 30.0]
    with pytest.raises(QueryError):
        service.latest_since(0, window_ms=0)


@pytest.mark.parametrize("bound", [0, 1, 1_700_000_000_000])
def test_range_from_equal_to_is_empty(bound: int) -> None:
    store = InMemoryReadingStore(clock=SequenceClock([bound]))
    _populate(store, 1)

    assert QueryService(store).range(bound, bound) == []


def test_range_excludes_both_bounds() -> None:
    store = InMemoryReadingStore(clock=SequenceClock([100, 101, 200]))
    _populate(store, 3)
    service = QueryService(store, window_ms=1)

    feeds = service.range("100", "200")

    assert [feed.tstamp for feed in feeds] == [101]


def test_empty_store_is_not_an_error() -> None:
    service = QueryService(InMemoryReadingStore())

    assert service.range(0, 10**13) == []
    assert service.latest_since(0) == []


@pytest.mark.parametrize("value", [-1, "-1", "abc", "", "1.5", 1.5, True, None, "１２x"])
def test_parse_bound_rejects_invalid_values(value) -> None:
    with pytest.raises(QueryError):
        parse_bound("from", value)


@pytest.mark.parametrize(("value", "expected"), [(0, 0), ("42", 42), (" 7 ", 7)])
def test_parse_bound_accepts_non_negative_integers(value, expected: int) -> None:
    assert parse_bound("from", value) == expected


def test_invalid_bounds_raise_query_error_before_loading() -> None:
    class ExplodingStore(InMemoryReadingStore):
        def load_range(self, from_exclusive: int, to_exclusive: int) -> List[StationFeed]:
            raise AssertionError("store should not be queried")

        def load_since(self, from_exclusive: int) -> List[StationFeed]:
            raise AssertionError("store should not be queried")

    service = QueryService(ExplodingStore())

    with pytest.raises(QueryError):
        service.range(0, "later")
    with pytest.raises(QueryError):
        service.latest_since(-5)


def test_storage_errors_propagate() -> None:
    class BrokenStore(InMemoryReadingStore):
        def load_since(self, from_exclusive: int) -> List[StationFeed]:
            raise StorageError("disk gone")

    with pytest.raises(StorageError, match="disk gone"):
        QueryService(BrokenStore()).latest_since(0)


def test_non_positive_default_window_is_rejected() -> None:
    with pytest.raises(ValueError):
        QueryService(InMemoryReadingStore(), window_ms=0)

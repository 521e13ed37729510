"""Unit tests for the decimation logic."""

from __future__ import annotations

import pytest

from models.records import StationFeed
from services.decimator import Decimator, decimate, nearest_tick


def _feed(feed_id: int, tstamp: int, temperature: float, humidity: float = 50.0, station: str = "s1") -> StationFeed:
    """Helper to build deterministic feeds."""

    return StationFeed(
        id=feed_id,
        station_id=station,
        tstamp=tstamp,
        humidity=humidity,
        temperature=temperature,
    )


@pytest.mark.parametrize(
    ("tstamp", "window", "expected"),
    [
        (0, 5000, 0),
        (2499, 5000, 0),
        (2500, 5000, 5000),
        (7499, 5000, 5000),
        (1_700_000_299_999, 600_000, 1_700_000_400_000),
        (1_700_000_099_999, 600_000, 1_699_999_800_000),
        (3, 3, 3),
        (1, 3, 0),
        (2, 3, 3),
    ],
)
def test_nearest_tick_rounds_half_up(tstamp: int, window: int, expected: int) -> None:
    assert nearest_tick(tstamp, window) == expected


def test_decimate_empty_input_returns_empty_list() -> None:
    assert Decimator().decimate([], 5000) == []


def test_decimate_averages_readings_in_same_bucket() -> None:
    feeds = [
        _feed(1, 0, 10.0, humidity=40.0),
        _feed(2, 1000, 20.0, humidity=50.0),
        _feed(3, 2000, 30.0, humidity=60.0),
    ]

    result = decimate(feeds, 5000)

    assert len(result) == 1
    bucket = result[0]
    assert bucket.temperature == 20
    assert bucket.humidity == 50
    assert bucket.id == 1
    assert bucket.station_id == "s1"
    assert bucket.tstamp == 0


def test_decimate_singleton_buckets_keep_values() -> None:
    feeds = [_feed(i + 1, i * 10_000, 10.5 + i, humidity=40.25 + i) for i in range(5)]

    result = decimate(feeds, 1000)

    assert len(result) == len(feeds)
    assert [feed.temperature for feed in result] == [feed.temperature for feed in feeds]
    assert [feed.humidity for feed in result] == [feed.humidity for feed in feeds]
    assert [feed.tstamp for feed in result] == [feed.tstamp for feed in feeds]


def test_decimate_keeps_stations_apart_in_first_seen_order() -> None:
    feeds = [
        _feed(1, 1000, 10.0, station="north"),
        _feed(2, 1100, 30.0, station="south"),
        _feed(3, 1200, 20.0, station="north"),
        _feed(4, 9000, 5.0, station="south"),
    ]

    result = decimate(feeds, 5000)

    assert [(feed.station_id, feed.tstamp) for feed in result] == [
        ("north", 0),
        ("south", 0),
        ("south", 10000),
    ]
    assert result[0].temperature == 15.0
    assert result[0].id == 1
    assert result[1].temperature == 30.0
    assert result[2].id == 4


def test_decimate_unsorted_input_still_averages_per_bucket() -> None:
    feeds = [
        _feed(3, 12_000, 40.0),
        _feed(1, 1000, 10.0),
        _feed(4, 11_000, 20.0),
        _feed(2, 2000, 30.0),
    ]

    result = decimate(feeds, 5000)

    assert [(feed.tstamp, feed.temperature) for feed in result] == [(10000, 30.0), (0, 20.0)]


def test_decimate_rejects_non_positive_window() -> None:
    with pytest.raises(ValueError):
        decimate([_feed(1, 0, 1.0)], 0)

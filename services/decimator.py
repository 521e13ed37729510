"""Downsampling of station feeds into fixed-width time buckets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

from models.records import StationFeed


def nearest_tick(tstamp: int, window_ms: int) -> int:
    """Round ``tstamp`` to the nearest multiple of ``window_ms``.

    Exact halves round up, so with a 10 s window 5000 maps to 10000 and
    4999 maps to 0. Integer arithmetic keeps large epoch values exact.
    """
    return (2 * tstamp + window_ms) // (2 * window_ms) * window_ms


@dataclass
class _Bucket:
    first: StationFeed
    tick: int
    humidity_total: float = 0.0
    temperature_total: float = 0.0
    count: int = 0

    def add(self, feed: StationFeed) -> None:
        self.humidity_total += feed.humidity
        self.temperature_total += feed.temperature
        self.count += 1

    def to_feed(self) -> StationFeed:
        return StationFeed(
            id=self.first.id,
            station_id=self.first.station_id,
            tstamp=self.tick,
            humidity=self.humidity_total / self.count,
            temperature=self.temperature_total / self.count,
        )


class Decimator:
    """Pure decimation component that can be unit tested in isolation."""

    def decimate(self, feeds: Iterable[StationFeed], window_ms: int) -> List[StationFeed]:
        """Average feeds sharing a station and a rounded tick.

        ``feeds`` must already be in ascending timestamp order: buckets are
        emitted in order of first appearance, so unsorted input yields
        correct averages in a non-chronological order.
        """
        if window_ms <= 0:
            raise ValueError(f"Decimation window must be positive, got {window_ms}.")

        buckets: Dict[Tuple[str, int], _Bucket] = {}
        for feed in feeds:
            tick = nearest_tick(feed.tstamp, window_ms)
            key = (feed.station_id, tick)
            bucket = buckets.get(key)
            if bucket is None:
                bucket = buckets[key] = _Bucket(first=feed, tick=tick)
            bucket.add(feed)

        return [bucket.to_feed() for bucket in buckets.values()]


def decimate(feeds: Iterable[StationFeed], window_ms: int) -> List[StationFeed]:
    return Decimator().decimate(feeds, window_ms)

from __future__ import annotations

from threading import Lock
from typing import List, Optional

from datastore.base import Clock, next_tstamp, now_millis
from models.records import StationFeed, StationReading


class InMemoryReadingStore:
    """Process-local reading store; contents vanish with the instance."""

    def __init__(self, clock: Clock = now_millis) -> None:
        self._clock = clock
        self._feeds: List[StationFeed] = []
        self._last_tstamp: Optional[int] = None
        self._lock = Lock()

    def store(self, reading: StationReading) -> StationFeed:
        with self._lock:
            tstamp = next_tstamp(self._clock, self._last_tstamp)
            feed = StationFeed(
                id=len(self._feeds) + 1,
                station_id=reading.station_id,
                tstamp=tstamp,
                humidity=reading.humidity,
                temperature=reading.temperature,
            )
            self._feeds.append(feed)
            self._last_tstamp = tstamp
        return feed

    def load_range(self, from_exclusive: int, to_exclusive: int) -> List[StationFeed]:
        with self._lock:
            return [feed for feed in self._feeds if from_exclusive < feed.tstamp < to_exclusive]

    def load_since(self, from_exclusive: int) -> List[StationFeed]:
        with self._lock:
            return [feed for feed in self._feeds if feed.tstamp > from_exclusive]

    def close(self) -> None:
        return None

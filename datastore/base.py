from __future__ import annotations

import time
from typing import Callable, List, Protocol

from models.records import StationFeed, StationReading

Clock = Callable[[], int]


def now_millis() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


def next_tstamp(clock: Clock, last_tstamp: int | None) -> int:
    """Stamp for the next write: the clock, but never at or before the last stamp."""
    current = clock()
    if last_tstamp is not None and current <= last_tstamp:
        return last_tstamp + 1
    return current


class ReadingStore(Protocol):
    """Append-only log of station feeds ordered by insertion."""

    def store(self, reading: StationReading) -> StationFeed:
        """Stamp, persist and return ``reading``. Durable once this returns."""
        ...

    def load_range(self, from_exclusive: int, to_exclusive: int) -> List[StationFeed]:
        """Feeds with ``from_exclusive < tstamp < to_exclusive`` in id order."""
        ...

    def load_since(self, from_exclusive: int) -> List[StationFeed]:
        """Feeds with ``tstamp > from_exclusive`` in id order."""
        ...

    def close(self) -> None: ...

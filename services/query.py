"""Time-window queries over the reading store, decimated for charting."""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from datastore.base import ReadingStore
from models.errors import QueryError
from models.records import StationFeed
from services.decimator import Decimator
from settings import DEFAULT_WINDOW_MS

logger = logging.getLogger(__name__)


def parse_bound(name: str, value: Any) -> int:
    """Coerce a query bound to a non-negative int or raise ``QueryError``.

    Ints and strings of decimal digits are accepted; booleans, floats and
    signed or otherwise non-numeric strings are not.
    """
    if isinstance(value, bool):
        raise QueryError(f"{name} must be a non-negative integer, got {value!r}")
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str) and value.strip().isdecimal():
        parsed = int(value.strip())
    else:
        raise QueryError(f"{name} must be a non-negative integer, got {value!r}")
    if parsed < 0:
        raise QueryError(f"{name} must be a non-negative integer, got {value!r}")
    return parsed


class QueryService:
    """Loads raw feeds for a window and collapses them into buckets."""

    def __init__(
        self,
        store: ReadingStore,
        decimator: Optional[Decimator] = None,
        window_ms: int = DEFAULT_WINDOW_MS,
    ) -> None:
        if window_ms <= 0:
            raise ValueError(f"Decimation window must be positive, got {window_ms}.")
        self.store = store
        self.decimator = decimator or Decimator()
        self.window_ms = window_ms

    def range(self, from_ms: Any, to_ms: Any, window_ms: Any = None) -> List[StationFeed]:
        """Decimated feeds with ``from_ms < tstamp < to_ms``."""
        start = parse_bound("from", from_ms)
        end = parse_bound("to", to_ms)
        window = self._window(window_ms)
        raw = self.store.load_range(start, end)
        feeds = self.decimator.decimate(raw, window)
        logger.debug(
            "Loaded range query",
            extra={
                "from_ms": start,
                "to_ms": end,
                "window_ms": window,
                "raw_count": len(raw),
                "feed_count": len(feeds),
            },
        )
        return feeds

    def latest_since(self, from_ms: Any, window_ms: Any = None) -> List[StationFeed]:
        """Decimated feeds newer than ``from_ms``."""
        start = parse_bound("from", from_ms)
        window = self._window(window_ms)
        raw = self.store.load_since(start)
        feeds = self.decimator.decimate(raw, window)
        logger.debug(
            "Loaded since query",
            extra={
                "from_ms": start,
                "window_ms": window,
                "raw_count": len(raw),
                "feed_count": len(feeds),
            },
        )
        return feeds

    def _window(self, window_ms: Any) -> int:
        if window_ms is None:
            return self.window_ms
        window = parse_bound("window", window_ms)
        if window == 0:
            raise QueryError("window must be a positive integer")
        return window

from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from threading import Lock
from typing import Any, List, Optional, Sequence

from datastore.base import Clock, next_tstamp, now_millis
from models.errors import StorageError
from models.records import StationFeed, StationReading

logger = logging.getLogger(__name__)

MEMORY_DATABASE = ":memory:"
SQLITE_MAX_INTEGER = 2**63 - 1

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS station_readings (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        station_id TEXT NOT NULL,
        tstamp INTEGER NOT NULL,
        payload TEXT NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_station_readings_tstamp ON station_readings (tstamp)",
)

_SELECT_COLUMNS = "SELECT id, station_id, tstamp, payload FROM station_readings"


def _row_to_feed(row: Sequence[Any]) -> StationFeed:
    feed_id, station_id, tstamp, payload = row
    reading = json.loads(payload)
    return StationFeed(
        id=feed_id,
        station_id=station_id,
        tstamp=tstamp,
        humidity=reading["humidity"],
        temperature=reading["temperature"],
    )


class SqliteReadingStore:
    """Durable reading store backed by a single SQLite file.

    One connection is shared between threads; every statement runs under
    ``_lock`` and every insert commits in its own transaction, so readers
    never observe a partial row.
    """

    def __init__(self, path: Optional[Path] = None, clock: Clock = now_millis) -> None:
        self.path = path
        self._clock = clock
        self._lock = Lock()
        target = MEMORY_DATABASE if path is None else str(path)
        try:
            if path is not None:
                path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(target, check_same_thread=False)
            with self._conn:
                for statement in _SCHEMA:
                    self._conn.execute(statement)
            row = self._conn.execute("SELECT MAX(tstamp) FROM station_readings").fetchone()
        except (OSError, sqlite3.Error) as exc:
            raise StorageError(f"Unable to open readings database {target!r}: {exc}") from exc
        self._last_tstamp: Optional[int] = row[0] if row else None
        logger.debug("Opened readings database", extra={"path": target})

    def store(self, reading: StationReading) -> StationFeed:
        payload = json.dumps(reading.to_payload())
        with self._lock:
            tstamp = next_tstamp(self._clock, self._last_tstamp)
            try:
                with self._conn:
                    cursor = self._conn.execute(
                        "INSERT INTO station_readings (station_id, tstamp, payload) VALUES (?, ?, ?)",
                        (reading.station_id, tstamp, payload),
                    )
            except sqlite3.Error as exc:
                raise StorageError(f"Failed to persist reading: {exc}") from exc
            self._last_tstamp = tstamp
            feed_id = cursor.lastrowid
        return StationFeed(
            id=feed_id,
            station_id=reading.station_id,
            tstamp=tstamp,
            humidity=reading.humidity,
            temperature=reading.temperature,
        )

    def load_range(self, from_exclusive: int, to_exclusive: int) -> List[StationFeed]:
        # Stored stamps are SQLite INTEGERs, so nothing lies past the maximum.
        if from_exclusive >= SQLITE_MAX_INTEGER:
            return []
        return self._select(
            f"{_SELECT_COLUMNS} WHERE tstamp > ? AND tstamp < ? ORDER BY id ASC",
            (from_exclusive, min(to_exclusive, SQLITE_MAX_INTEGER)),
        )

    def load_since(self, from_exclusive: int) -> List[StationFeed]:
        if from_exclusive >= SQLITE_MAX_INTEGER:
            return []
        return self._select(
            f"{_SELECT_COLUMNS} WHERE tstamp > ? ORDER BY id ASC",
            (from_exclusive,),
        )

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def _select(self, query: str, params: Sequence[int]) -> List[StationFeed]:
        with self._lock:
            try:
                rows = self._conn.execute(query, params).fetchall()
            except sqlite3.Error as exc:
                raise StorageError(f"Failed to load readings: {exc}") from exc
        return [_row_to_feed(row) for row in rows]

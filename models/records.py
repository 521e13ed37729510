"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(slots=True)
class StationReading:
    """A single reading as submitted by a station, before the server stamps it."""

    station_id: str
    temperature: float
    humidity: float

    def to_payload(self) -> Dict[str, Any]:
        """Wire form of the reading, persisted verbatim next to each row."""
        return {
            "stationId": self.station_id,
            "temperature": self.temperature,
            "humidity": self.humidity,
        }


@dataclass(frozen=True, slots=True)
class StationFeed:
    """A persisted reading with its store-assigned id and server timestamp.

    ``tstamp`` is epoch milliseconds. Feeds are never mutated once written.
    """

    id: int
    station_id: str
    tstamp: int
    humidity: float
    temperature: float

"""Validation and persistence of incoming station readings."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from datastore.base import ReadingStore
from models.errors import ValidationError
from models.records import StationFeed, StationReading
from settings import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReadingBounds:
    """Optional physical limits; ``None`` leaves that side open."""

    temperature_min: Optional[float] = None
    temperature_max: Optional[float] = None
    humidity_min: Optional[float] = None
    humidity_max: Optional[float] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "ReadingBounds":
        return cls(
            temperature_min=settings.temperature_min,
            temperature_max=settings.temperature_max,
            humidity_min=settings.humidity_min,
            humidity_max=settings.humidity_max,
        )


class IngestionService:
    """Validates readings and appends them to the store."""

    def __init__(self, store: ReadingStore, bounds: Optional[ReadingBounds] = None) -> None:
        self.store = store
        self.bounds = bounds or ReadingBounds()

    def submit(self, reading: Union[StationReading, Mapping[str, Any]]) -> StationFeed:
        """Validate ``reading`` and persist it, returning the stored feed.

        Accepts either a ``StationReading`` or the decoded JSON body of a
        station submission (``stationId``, ``temperature``, ``humidity``).
        """
        try:
            validated = self._validate(reading)
        except ValidationError as exc:
            logger.warning("Rejected station reading: %s", exc, extra={"reason": str(exc)})
            raise

        feed = self.store.store(validated)
        logger.info(
            "Accepted station reading",
            extra={"station_id": feed.station_id, "feed_id": feed.id, "tstamp": feed.tstamp},
        )
        return feed

    def _validate(self, reading: Union[StationReading, Mapping[str, Any]]) -> StationReading:
        if isinstance(reading, StationReading):
            raw_station = reading.station_id
            raw_temperature = reading.temperature
            raw_humidity = reading.humidity
        elif isinstance(reading, Mapping):
            raw_station = reading.get("stationId")
            raw_temperature = reading.get("temperature")
            raw_humidity = reading.get("humidity")
        else:
            raise ValidationError("reading must be a JSON object")

        if not isinstance(raw_station, str) or not raw_station.strip():
            raise ValidationError("missing stationId")

        temperature = self._number("temperature", raw_temperature)
        humidity = self._number("humidity", raw_humidity)
        self._check_bounds("temperature", temperature, self.bounds.temperature_min, self.bounds.temperature_max)
        self._check_bounds("humidity", humidity, self.bounds.humidity_min, self.bounds.humidity_max)

        return StationReading(station_id=raw_station.strip(), temperature=temperature, humidity=humidity)

    @staticmethod
    def _number(field: str, value: Any) -> float:
        if value is None:
            raise ValidationError(f"missing {field}")
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValidationError(f"invalid numeric value for {field}")
        try:
            finite = math.isfinite(value)
        except OverflowError:
            raise ValidationError(f"{field} is out of range") from None
        if not finite:
            raise ValidationError(f"{field} must be finite")
        return value

    @staticmethod
    def _check_bounds(
        field: str, value: float, minimum: Optional[float], maximum: Optional[float]
    ) -> None:
        if minimum is not None and value < minimum:
            raise ValidationError(f"{field} {value} is below minimum {minimum}")
        if maximum is not None and value > maximum:
            raise ValidationError(f"{field} {value} is above maximum {maximum}")

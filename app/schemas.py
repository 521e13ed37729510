"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from models.records import StationFeed


class StationReadingIn(BaseModel):
    """Documented shape of a station submission body.

    Only published in the OpenAPI schema; the route reads the raw body for
    signature checks and ``IngestionService`` does the validation.
    """

    model_config = ConfigDict(populate_by_name=True)

    station_id: str = Field(..., alias="stationId")
    temperature: float
    humidity: float


class FeedOut(BaseModel):
    """A persisted or decimated reading as returned to chart clients."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    station_id: str = Field(..., alias="stationId")
    tstamp: int = Field(..., ge=0, description="Server timestamp in epoch milliseconds.")
    humidity: float
    temperature: float

    @classmethod
    def from_feed(cls, feed: StationFeed) -> "FeedOut":
        return cls(
            id=feed.id,
            station_id=feed.station_id,
            tstamp=feed.tstamp,
            humidity=feed.humidity,
            temperature=feed.temperature,
        )


class FeedsResponse(BaseModel):
    feeds: List[FeedOut] = Field(default_factory=list)


class EpochResponse(BaseModel):
    epoch: int = Field(..., description="Server wall clock in epoch milliseconds.")

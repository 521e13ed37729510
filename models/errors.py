"""Error types raised by the ingestion and query pipeline."""

from __future__ import annotations


class StationDataError(Exception):
    """Base class for failures surfaced to callers of the services."""


class ValidationError(StationDataError):
    """A submitted reading is malformed or outside configured bounds."""


class QueryError(StationDataError):
    """Query bounds are not non-negative integer epoch milliseconds."""


class StorageError(StationDataError):
    """The readings store failed to read or write."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from datastore.base import ReadingStore
from datastore.memory_store import InMemoryReadingStore
from datastore.sqlite_store import SqliteReadingStore
from settings import Settings, get_settings

logger = logging.getLogger(__name__)


def build_store(settings: Optional[Settings] = None) -> ReadingStore:
    """Construct the reading store selected by configuration.

    Callers own the returned instance and are responsible for closing it.
    """
    settings = settings or get_settings()
    if settings.store_backend == "memory":
        logger.info("Using in-memory reading store", extra={"backend": "memory"})
        return InMemoryReadingStore()

    path = Path(settings.db_path) if settings.db_path else None
    logger.info(
        "Using SQLite reading store",
        extra={"backend": "sqlite", "path": str(path) if path else ":memory:"},
    )
    return SqliteReadingStore(path=path)

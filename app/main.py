from __future__ import annotations
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import router
from datastore.base import ReadingStore
from datastore.factory import build_store
from logging_config import configure_logging
from services.ingestion import IngestionService, ReadingBounds
from services.query import QueryService
from settings import Settings, get_settings

logger = logging.getLogger(__name__)


def create_app(
    store: Optional[ReadingStore] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """Build the API around one reading store.

    When ``store`` is omitted it is built from configuration at startup and
    closed on shutdown; an injected store stays owned by the caller.
    """
    configure_logging()
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        owned = store is None
        active = build_store(settings) if owned else store
        app.state.settings = settings
        app.state.store = active
        app.state.ingestion = IngestionService(active, ReadingBounds.from_settings(settings))
        app.state.query = QueryService(active, window_ms=settings.decimation_window_ms)
        if settings.auth_disabled:
            logger.warning("Station HMAC authentication is disabled")
        elif not settings.hmac_key:
            logger.warning("STATION_HMAC_KEY is empty; every submission will be rejected")
        logger.info("Station readings API up")
        try:
            yield
        finally:
            if owned:
                active.close()

    app = FastAPI(
        title="Station Readings",
        description="Signed environmental station ingestion with decimated time-range queries.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app


app = create_app()


def run() -> None:
    """Serve the API with uvicorn on the configured host and port."""
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)

"""HTTP route definitions for the service."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.concurrency import run_in_threadpool

from app.schemas import EpochResponse, FeedOut, FeedsResponse, StationReadingIn
from datastore.base import now_millis
from models.errors import QueryError, StorageError, ValidationError
from services.ingestion import IngestionService
from services.query import QueryService
from services.signing import signature_matches
from settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter()


def get_settings_dependency(request: Request) -> Settings:
    return request.app.state.settings


def get_ingestion(request: Request) -> IngestionService:
    return request.app.state.ingestion


def get_query(request: Request) -> QueryService:
    return request.app.state.query


async def read_signed_body(
    request: Request,
    settings: Settings = Depends(get_settings_dependency),
) -> bytes:
    """Return the raw request body once it passes the size and signature checks."""
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > settings.max_body_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Request body exceeds {settings.max_body_bytes} bytes.",
        )
    body = await request.body()
    if len(body) > settings.max_body_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Request body exceeds {settings.max_body_bytes} bytes.",
        )

    if settings.auth_disabled:
        return body
    if not signature_matches(settings.hmac_key, body, request.headers.get("authorization")):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing Authorization header",
        )
    return body


def _feeds_response(feeds) -> FeedsResponse:
    return FeedsResponse(feeds=[FeedOut.from_feed(feed) for feed in feeds])


@router.post(
    "/station-data",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Submit one signed station reading.",
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": StationReadingIn.model_json_schema()}},
        }
    },
)
async def submit_station_data(
    body: bytes = Depends(read_signed_body),
    ingestion: IngestionService = Depends(get_ingestion),
) -> Response:
    try:
        payload = json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Request body is not valid JSON.",
        ) from exc

    try:
        await run_in_threadpool(ingestion.submit, payload)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except StorageError as exc:
        logger.exception("Failed to store station reading")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error while processing station data",
        ) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/data/from/{from_ms}",
    response_model=FeedsResponse,
    summary="Decimated feeds newer than a timestamp.",
)
def feeds_since(
    from_ms: str,
    query: QueryService = Depends(get_query),
) -> FeedsResponse:
    try:
        feeds = query.latest_since(from_ms)
    except QueryError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except StorageError as exc:
        logger.exception("Failed to load station feeds")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error while loading data",
        ) from exc
    return _feeds_response(feeds)


@router.get(
    "/data/range/{from_ms}/{to_ms}",
    response_model=FeedsResponse,
    summary="Decimated feeds strictly between two timestamps.",
)
def feeds_in_range(
    from_ms: str,
    to_ms: str,
    query: QueryService = Depends(get_query),
) -> FeedsResponse:
    try:
        feeds = query.range(from_ms, to_ms)
    except QueryError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except StorageError as exc:
        logger.exception("Failed to load station feeds")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error while loading data",
        ) from exc
    return _feeds_response(feeds)


@router.get(
    "/epoch",
    response_model=EpochResponse,
    summary="Server wall clock for stations without a real-time clock.",
)
async def epoch() -> EpochResponse:
    return EpochResponse(epoch=now_millis())


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /health for service status."}

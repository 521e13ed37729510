from __future__ import annotations

import json
from typing import Any, Dict, List

import httpx
import typer

from cli.config import CLIConfig
from services.signing import sign_body


class ApiClient:
    """Minimal HTTP client for the station readings service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def submit_reading(self, station_id: str, temperature: float, humidity: float) -> None:
        if not self._config.hmac_key:
            raise typer.BadParameter("An HMAC key is required to submit readings (--key or STATION_HMAC_KEY).")
        body = json.dumps(
            {"stationId": station_id, "temperature": temperature, "humidity": humidity}
        ).encode("utf-8")
        try:
            response = self._client.post(
                "/station-data",
                content=body,
                headers={
                    "Authorization": sign_body(self._config.hmac_key, body),
                    "Content-Type": "application/json",
                },
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)

    def feeds_since(self, from_ms: int) -> List[Dict[str, Any]]:
        return self._get_feeds(f"/data/from/{from_ms}")

    def feeds_in_range(self, from_ms: int, to_ms: int) -> List[Dict[str, Any]]:
        return self._get_feeds(f"/data/range/{from_ms}/{to_ms}")

    def epoch(self) -> int:
        try:
            response = self._client.get("/epoch")
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        return int(response.json()["epoch"])

    def _get_feeds(self, path: str) -> List[Dict[str, Any]]:
        try:
            response = self._client.get(path)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        feeds = response.json().get("feeds")
        if not isinstance(feeds, list):
            raise typer.BadParameter("Unexpected response payload when loading feeds.")
        return feeds

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = data.get("detail")
        except Exception:  # noqa: BLE001 - best effort parsing
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

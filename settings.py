from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple


_STORE_BACKEND_ENV = "READINGS_STORE_BACKEND"
_DB_PATH_ENV = "READINGS_DB_PATH"
_WINDOW_ENV = "DECIMATION_WINDOW_MS"
_HMAC_KEY_ENV = "STATION_HMAC_KEY"
_AUTH_DISABLED_ENV = "AUTH_DISABLED"
_MAX_BODY_ENV = "MAX_BODY_BYTES"
_CORS_ORIGINS_ENV = "CORS_ORIGINS"
_TEMPERATURE_MIN_ENV = "TEMPERATURE_MIN"
_TEMPERATURE_MAX_ENV = "TEMPERATURE_MAX"
_HUMIDITY_MIN_ENV = "HUMIDITY_MIN"
_HUMIDITY_MAX_ENV = "HUMIDITY_MAX"
_LOG_LEVEL_ENV = "LOG_LEVEL"
_HOST_ENV = "SERVER_HOST"
_PORT_ENV = "SERVER_PORT"

STORE_BACKENDS = ("sqlite", "memory")
DEFAULT_WINDOW_MS = 10 * 60 * 1000


@dataclass(frozen=True)
class Settings:
    store_backend: str
    db_path: Optional[str]
    decimation_window_ms: int
    hmac_key: str
    auth_disabled: bool
    max_body_bytes: int
    cors_origins: Tuple[str, ...]
    temperature_min: Optional[float]
    temperature_max: Optional[float]
    humidity_min: Optional[float]
    humidity_max: Optional[float]
    log_level: str
    host: str
    port: int


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_positive_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_optional_float(name: str) -> Optional[float]:
    value = os.getenv(name)
    if value is None:
        return None
    candidate = value.strip()
    if not candidate:
        return None
    try:
        return float(candidate)
    except ValueError:
        return None


def _read_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip().lower()
    if not candidate:
        return default
    return candidate in {"1", "true", "yes", "on"}


def _read_store_backend(default: str) -> str:
    candidate = _read_str_env(_STORE_BACKEND_ENV, default).lower()
    return candidate if candidate in STORE_BACKENDS else default


def _read_origins(default: Tuple[str, ...]) -> Tuple[str, ...]:
    value = os.getenv(_CORS_ORIGINS_ENV)
    if value is None:
        return default
    origins = tuple(part.strip() for part in value.split(",") if part.strip())
    return origins or default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        store_backend=_read_store_backend("sqlite"),
        db_path=_read_optional_env(_DB_PATH_ENV, "./tmp/station_readings.sqlite3"),
        decimation_window_ms=_read_positive_int(_WINDOW_ENV, DEFAULT_WINDOW_MS),
        hmac_key=os.getenv(_HMAC_KEY_ENV, ""),
        auth_disabled=_read_flag(_AUTH_DISABLED_ENV, False),
        max_body_bytes=_read_positive_int(_MAX_BODY_ENV, 10 * 1024),
        cors_origins=_read_origins(("*",)),
        temperature_min=_read_optional_float(_TEMPERATURE_MIN_ENV),
        temperature_max=_read_optional_float(_TEMPERATURE_MAX_ENV),
        humidity_min=_read_optional_float(_HUMIDITY_MIN_ENV),
        humidity_max=_read_optional_float(_HUMIDITY_MAX_ENV),
        log_level=_read_log_level("INFO"),
        host=_read_str_env(_HOST_ENV, "0.0.0.0"),
        port=_read_positive_int(_PORT_ENV, 5000),
    )

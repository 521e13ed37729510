from __future__ import annotations

from typing import Iterator

import pytest

from datastore.factory import build_store
from datastore.memory_store import InMemoryReadingStore
from datastore.sqlite_store import SqliteReadingStore
from settings import DEFAULT_WINDOW_MS, get_settings


@pytest.fixture(autouse=True)
def _fresh_settings() -> Iterator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_environment_overrides_apply(monkeypatch, tmp_path) -> None:
    db_path = tmp_path / "readings.sqlite3"

    monkeypatch.setenv("READINGS_STORE_BACKEND", "SQLite")
    monkeypatch.setenv("READINGS_DB_PATH", str(db_path))
    monkeypatch.setenv("DECIMATION_WINDOW_MS", "60000")
    monkeypatch.setenv("STATION_HMAC_KEY", "shared")
    monkeypatch.setenv("AUTH_DISABLED", "yes")
    monkeypatch.setenv("MAX_BODY_BYTES", "2048")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.example, http://b.example")
    monkeypatch.setenv("TEMPERATURE_MIN", "-40")
    monkeypatch.setenv("HUMIDITY_MAX", "100")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = get_settings()
    store = build_store(settings)

    try:
        assert settings.store_backend == "sqlite"
        assert settings.decimation_window_ms == 60000
        assert settings.hmac_key == "shared"
        assert settings.auth_disabled is True
        assert settings.max_body_bytes == 2048
        assert settings.cors_origins == ("http://a.example", "http://b.example")
        assert settings.temperature_min == -40.0
        assert settings.temperature_max is None
        assert settings.humidity_max == 100.0
        assert settings.log_level == "DEBUG"
        assert isinstance(store, SqliteReadingStore)
        assert store.path == db_path
        assert db_path.exists()
    finally:
        store.close()


def test_invalid_values_fall_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("READINGS_STORE_BACKEND", "postgres")
    monkeypatch.setenv("DECIMATION_WINDOW_MS", "-10")
    monkeypatch.setenv("MAX_BODY_BYTES", "lots")
    monkeypatch.setenv("TEMPERATURE_MAX", "hot")
    monkeypatch.setenv("CORS_ORIGINS", " , ")

    settings = get_settings()

    assert settings.store_backend == "sqlite"
    assert settings.decimation_window_ms == DEFAULT_WINDOW_MS
    assert settings.max_body_bytes == 10 * 1024
    assert settings.temperature_max is None
    assert settings.cors_origins == ("*",)


def test_memory_backend_selection(monkeypatch) -> None:
    monkeypatch.setenv("READINGS_STORE_BACKEND", "memory")

    store = build_store(get_settings())

    assert isinstance(store, InMemoryReadingStore)

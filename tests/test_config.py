"""Tests for environment-driven store settings."""

from __future__ import annotations

import pytest

from jsonapi_datastore import Store, SyncResult
from jsonapi_datastore.config import Settings, get_settings


def test_defaults(settings: Settings) -> None:
    assert settings.strict is False
    assert settings.top_level is False


def test_reads_prefixed_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JSONAPI_DATASTORE_STRICT", "true")
    monkeypatch.setenv("JSONAPI_DATASTORE_TOP_LEVEL", "1")
    settings = Settings(_env_file=None)
    assert settings.strict is True
    assert settings.top_level is True


def test_get_settings_is_cached() -> None:
    assert get_settings() is get_settings()


def test_store_falls_back_to_cached_settings(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("JSONAPI_DATASTORE_TOP_LEVEL", "true")
    store = Store()
    assert store.settings is get_settings()
    assert isinstance(store.sync({"data": None}), SyncResult)


def test_call_argument_overrides_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JSONAPI_DATASTORE_STRICT", "true")
    store = Store()
    assert store.sync({"data": {"id": "1"}}, strict=False) is None

from __future__ import annotations

from collections.abc import Iterator

import pytest

from jsonapi_datastore.config import Settings, get_settings
from jsonapi_datastore.services.store import Store


@pytest.fixture(autouse=True)
def _clear_settings_cache(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep environment-derived settings from leaking between tests."""
    for name in ("JSONAPI_DATASTORE_STRICT", "JSONAPI_DATASTORE_TOP_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def store(settings: Settings) -> Store:
    return Store(settings=settings)

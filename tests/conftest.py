from __future__ import annotations

import pytest

from ephemeral_storage.common.config import Settings, get_settings
from ephemeral_storage.infra.storage import EphemeralStorage, EphemeralStorageClient


@pytest.fixture(autouse=True)
def reset_settings_cache():
    get_settings.cache_clear()  # type: ignore[attr-defined]
    yield
    get_settings.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture()
def settings() -> Settings:
    return Settings(STORAGE_CHUNK_SIZE_BYTES=4, ENABLE_METRICS=True)


@pytest.fixture()
def storage() -> EphemeralStorage:
    return EphemeralStorage()


@pytest.fixture()
def client(storage, settings) -> EphemeralStorageClient:
    return EphemeralStorageClient(storage=storage, settings=settings)

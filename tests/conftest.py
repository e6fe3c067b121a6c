"""Shared fixtures: in-memory settings, progress slots and the HTTP client."""

from collections.abc import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from fakeredis import aioredis
from fastapi.testclient import TestClient

from motoquote.core.cache import Cache, reset_cache
from motoquote.core.cache_stub import MemoryCache
from motoquote.core.config import clear_settings_cache


@pytest.fixture(autouse=True)
def memory_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Run every test against fresh settings with in-process storage."""
    monkeypatch.setenv("STORAGE_BACKEND", "memory")
    monkeypatch.setenv("API_ENV", "development")
    clear_settings_cache()
    reset_cache()
    yield
    clear_settings_cache()
    reset_cache()


@pytest.fixture
def memory_cache() -> MemoryCache:
    return MemoryCache()


@pytest_asyncio.fixture
async def redis_cache() -> AsyncGenerator[Cache, None]:
    """Cache backed by fakeredis."""
    client = aioredis.FakeRedis()
    cache = Cache(client)
    yield cache
    await client.aclose()


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    from motoquote.main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture
def api_prefix() -> str:
    return "/api/v1"

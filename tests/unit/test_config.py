"""Tests for settings and storage backend selection."""

import pytest
from pydantic import ValidationError

from motoquote.core.cache import Cache, get_cache, reset_cache
from motoquote.core.cache_stub import MemoryCache
from motoquote.core.config import Settings, clear_settings_cache, get_settings


class TestSettings:
    def test_defaults(self) -> None:
        settings = Settings()

        assert settings.progress_key == "motoquote-progress"
        assert settings.progress_ttl_seconds is None
        assert settings.currency_symbol == "K"
        assert settings.quote_validity_days == 30

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PROGRESS_KEY", "custom-progress")
        monkeypatch.setenv("API_ENV", "production")
        clear_settings_cache()

        settings = get_settings()

        assert settings.progress_key == "custom-progress"
        assert settings.is_production
        assert not settings.is_development

    def test_settings_are_cached(self) -> None:
        assert get_settings() is get_settings()

    def test_settings_are_immutable(self) -> None:
        with pytest.raises(ValidationError):
            get_settings().progress_key = "other"  # type: ignore[misc]

    @pytest.mark.parametrize(
        "overrides",
        [
            {"api_env": "qa"},
            {"storage_backend": "sqlite"},
            {"api_cors_origins": ["localhost:5173"]},
            {"progress_ttl_seconds": 5},
        ],
    )
    def test_invalid_values_fail_fast(self, overrides: dict[str, object]) -> None:
        with pytest.raises(ValidationError):
            Settings(**overrides)


class TestBackendSelection:
    def test_memory_backend(self) -> None:
        assert isinstance(get_cache(), MemoryCache)
        assert get_cache() is get_cache()

    def test_redis_backend(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STORAGE_BACKEND", "redis")
        clear_settings_cache()
        reset_cache()

        cache = get_cache()

        assert isinstance(cache, Cache)
        assert not cache.is_connected


class TestRedisCache:
    @pytest.mark.asyncio
    async def test_get_set_delete(self, redis_cache: Cache) -> None:
        assert await redis_cache.get("k") is None

        assert await redis_cache.set("k", "value")
        assert await redis_cache.get("k") == "value"
        assert await redis_cache.exists("k")

        assert await redis_cache.delete("k")
        assert not await redis_cache.exists("k")

    @pytest.mark.asyncio
    async def test_health_check(self, redis_cache: Cache) -> None:
        assert await redis_cache.health_check()

    @pytest.mark.asyncio
    async def test_unconnected_cache(self) -> None:
        cache = Cache()

        assert not await cache.health_check()
        with pytest.raises(RuntimeError):
            await cache.get("k")


class TestMemoryCache:
    @pytest.mark.asyncio
    async def test_get_set_delete(self, memory_cache: MemoryCache) -> None:
        assert await memory_cache.set("k", "value")
        assert await memory_cache.get("k") == "value"
        assert await memory_cache.delete("k")
        assert await memory_cache.get("k") is None
        assert not await memory_cache.delete("k")

    @pytest.mark.asyncio
    async def test_expired_entries_are_dropped(self, memory_cache: MemoryCache) -> None:
        from datetime import datetime, timedelta

        from motoquote.core.cache_stub import CacheEntry

        memory_cache._store.entries["old"] = CacheEntry(
            value="stale", expires_at=datetime.now() - timedelta(seconds=1)
        )

        assert await memory_cache.get("old") is None

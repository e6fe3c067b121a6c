# MotoQuote - Motor Insurance Quote Wizard
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Redis key-value slot for wizard progress."""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import redis.asyncio as redis
from attrs import field, frozen
from beartype import beartype
from redis.exceptions import RedisError

from .config import get_settings

__all__ = [
    "Cache",
    "CacheBackend",
    "get_cache",
    "init_cache",
    "close_cache",
    "reset_cache",
    "RedisType",
]

if TYPE_CHECKING:
    from redis.asyncio import Redis as RedisType
else:
    RedisType = redis.Redis


@runtime_checkable
class CacheBackend(Protocol):
    """Text key-value slot used to persist wizard progress."""

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str, ttl: int | None = None) -> bool: ...

    async def delete(self, key: str) -> bool: ...

    async def health_check(self) -> bool: ...


@frozen
class CacheConfig:
    """Immutable cache configuration."""

    url: str = field()
    default_ttl: int | None = field(default=None)
    max_connections: int = field(default=10)
    decode_responses: bool = field(default=True)


class Cache:
    """Redis cache manager with async support.

    The constructor optionally accepts an already-created
    ``redis.asyncio.Redis`` instance, in which case :py:meth:`connect` is a
    no-op. Tests pass a ``fakeredis`` client this way.
    """

    def __init__(self, redis_client: RedisType | None = None) -> None:
        self._redis: RedisType | None = redis_client
        self._config = self._get_config()

    @beartype
    def _get_config(self) -> CacheConfig:
        """Get cache configuration from settings."""
        settings = get_settings()
        return CacheConfig(
            url=settings.redis_url,
            default_ttl=settings.progress_ttl_seconds,
        )

    @beartype
    async def connect(self) -> None:
        """Create Redis connection pool."""
        if self._redis is not None:
            return

        self._redis = redis.from_url(
            self._config.url,
            max_connections=self._config.max_connections,
            decode_responses=self._config.decode_responses,
        )

    @beartype
    async def disconnect(self) -> None:
        """Close Redis connection."""
        if self._redis is None:
            return

        await self._redis.aclose()
        self._redis = None

    @beartype
    async def get(self, key: str) -> str | None:
        """Get the raw text stored under ``key``."""
        if self._redis is None:
            raise RuntimeError("Cache not connected")

        value = await self._redis.get(key)
        if value is None:
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8", errors="replace")
        return str(value)

    @beartype
    async def set(self, key: str, value: str, ttl: int | None = None) -> bool:
        """Store ``value`` under ``key``, expiring after ``ttl`` seconds if given."""
        if self._redis is None:
            raise RuntimeError("Cache not connected")

        if ttl is None:
            ttl = self._config.default_ttl

        if ttl is None:
            result = await self._redis.set(key, value)
        else:
            result = await self._redis.setex(key, timedelta(seconds=ttl), value)
        return bool(result)

    @beartype
    async def delete(self, key: str) -> bool:
        """Delete key from cache."""
        if self._redis is None:
            raise RuntimeError("Cache not connected")

        result = await self._redis.delete(key)
        return bool(result > 0)

    @beartype
    async def exists(self, key: str) -> bool:
        """Check if key exists in cache."""
        if self._redis is None:
            raise RuntimeError("Cache not connected")

        result = await self._redis.exists(key)
        return bool(result > 0)

    @property
    def is_connected(self) -> bool:
        """Check if cache is connected."""
        return self._redis is not None

    @beartype
    async def health_check(self) -> bool:
        """Perform cache health check."""
        if not self.is_connected or self._redis is None:
            return False
        try:
            await self._redis.ping()
        except (RedisError, OSError):
            return False
        return True


# Global cache instance
_cache: CacheBackend | None = None


@beartype
def get_cache() -> CacheBackend:
    """Get the process-wide cache for the configured storage backend."""
    global _cache
    if _cache is None:
        if get_settings().storage_backend == "memory":
            from .cache_stub import MemoryCache

            _cache = MemoryCache()
        else:
            _cache = Cache()
    return _cache


@beartype
async def init_cache() -> CacheBackend:
    """Connect the process-wide cache."""
    cache = get_cache()
    if isinstance(cache, Cache):
        await cache.connect()
    return cache


@beartype
async def close_cache() -> None:
    """Disconnect the process-wide cache."""
    if isinstance(_cache, Cache):
        await _cache.disconnect()


@beartype
def reset_cache() -> None:
    """Drop the process-wide cache (for testing)."""
    global _cache
    _cache = None

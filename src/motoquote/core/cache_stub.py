"""In-process cache used when no Redis server is configured."""

from datetime import datetime, timedelta

from beartype import beartype
from pydantic import BaseModel, ConfigDict, Field


@beartype
class CacheEntry(BaseModel):
    """Cache entry with value and expiry."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_assignment=True,
        validate_default=True,
    )

    value: str = Field(..., description="Cached text")
    expires_at: datetime | None = Field(default=None, description="Expiry time")


@beartype
class CacheStore(BaseModel):
    """Internal cache storage."""

    model_config = ConfigDict(
        frozen=False,  # Mutable for cache operations
        extra="forbid",
        validate_assignment=True,
        validate_default=True,
    )

    entries: dict[str, CacheEntry] = Field(
        default_factory=dict, description="Cache entries"
    )


class MemoryCache:
    """Dictionary-backed stand-in for :class:`motoquote.core.cache.Cache`."""

    def __init__(self) -> None:
        self._store = CacheStore()

    @beartype
    async def get(self, key: str) -> str | None:
        """Get value from cache."""
        entry = self._store.entries.get(key)
        if entry is None:
            return None
        if entry.expires_at is not None and entry.expires_at <= datetime.now():
            del self._store.entries[key]
            return None
        return entry.value

    @beartype
    async def set(self, key: str, value: str, ttl: int | None = None) -> bool:
        """Set value in cache."""
        expires_at = datetime.now() + timedelta(seconds=ttl) if ttl else None
        self._store.entries[key] = CacheEntry(value=value, expires_at=expires_at)
        return True

    @beartype
    async def delete(self, key: str) -> bool:
        """Delete key from cache."""
        return self._store.entries.pop(key, None) is not None

    @beartype
    async def health_check(self) -> bool:
        return True

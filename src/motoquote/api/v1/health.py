"""Health check endpoint."""

from datetime import datetime, timezone
from typing import Annotated

from beartype import beartype
from fastapi import APIRouter, Depends
from pydantic import Field

from ... import __version__
from ...core.cache import CacheBackend
from ...core.config import Settings, get_settings
from ...core.logging_utils import get_logger
from ...models.base import BaseModelConfig
from ..dependencies import get_cache

logger = get_logger(__name__)

router = APIRouter()


@beartype
class HealthResponse(BaseModelConfig):
    """Overall service health."""

    status: str = Field(..., pattern=r"^(healthy|degraded)$")
    storage: str = Field(..., pattern=r"^(healthy|unhealthy)$")
    storage_backend: str
    environment: str
    version: str
    timestamp: datetime


@router.get("/health", response_model=HealthResponse)
@beartype
async def health_check(
    cache: Annotated[CacheBackend, Depends(get_cache)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> HealthResponse:
    """Report whether the progress store is reachable."""
    storage_ok = await cache.health_check()
    if not storage_ok:
        logger.warning("Progress storage (%s) failed its health check", settings.storage_backend)
    return HealthResponse(
        status="healthy" if storage_ok else "degraded",
        storage="healthy" if storage_ok else "unhealthy",
        storage_backend=settings.storage_backend,
        environment=settings.api_env,
        version=__version__,
        timestamp=datetime.now(timezone.utc),
    )

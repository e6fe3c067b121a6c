"""Wizard state container with write-through persistence.

``QuoteStore`` owns one :class:`QuoteState`. Every operation replaces the
state with a new immutable instance and then writes the whole state, as
JSON, to a key-value slot. ``load()`` restores it; a missing or unreadable
snapshot leaves the store at the initial state.
"""

from typing import TypeVar

from beartype import beartype
from pydantic import BaseModel, ValidationError
from redis.exceptions import RedisError

from ..core.cache import CacheBackend
from ..core.config import get_settings
from ..core.logging_utils import get_logger
from ..models.quote import (
    TOTAL_STEPS,
    CoverageDetails,
    CoverageInfo,
    PersonalDetails,
    PersonalInfo,
    PricingBreakdown,
    QuoteState,
    VehicleDetails,
    VehicleInfo,
    initial_quote_state,
)

logger = get_logger(__name__)

RecordT = TypeVar("RecordT", PersonalInfo, VehicleInfo, CoverageInfo)

# Errors a slot may raise that must not reach the caller.
_SLOT_ERRORS = (RedisError, RuntimeError, OSError)


def _merge(current: RecordT, partial: BaseModel) -> RecordT:
    """Shallow-merge ``partial`` into ``current``.

    A partial record contributes only the fields that were explicitly set;
    a complete step record contributes all of its fields.
    """
    if isinstance(partial, type(current)):
        names = partial.model_fields_set
    else:
        names = set(type(partial).model_fields)
    updates = {name: getattr(partial, name) for name in names}
    return current.model_copy(update=updates)


class QuoteStore:
    """Holds the wizard's accumulated data and mirrors it into a cache slot."""

    def __init__(
        self,
        cache: CacheBackend,
        key: str | None = None,
        ttl: int | None = None,
    ) -> None:
        """Initialize store.

        Args:
            cache: Slot used for persistence
            key: Slot key; defaults to the configured progress key
            ttl: Optional expiry for the persisted snapshot, in seconds
        """
        settings = get_settings()
        self._cache = cache
        self._key = key or settings.progress_key
        self._ttl = ttl if ttl is not None else settings.progress_ttl_seconds
        self._state = initial_quote_state()

    @property
    def key(self) -> str:
        return self._key

    @property
    def state(self) -> QuoteState:
        """Current state."""
        return self._state

    @beartype
    async def load(self) -> QuoteState:
        """Restore the persisted snapshot, if there is a usable one."""
        try:
            raw = await self._cache.get(self._key)
        except _SLOT_ERRORS as e:
            logger.warning("Could not read saved progress from %s: %s", self._key, e)
            return self._state

        if raw is None:
            return self._state

        try:
            self._state = QuoteState.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(
                "Discarding unreadable saved progress under %s: %s",
                self._key,
                e.errors(include_url=False)[:1],
            )
            self._state = initial_quote_state()
        return self._state

    @beartype
    async def set_step(self, step: int) -> QuoteState:
        """Move to ``step``, clamped into 1..4."""
        clamped = min(max(step, 1), TOTAL_STEPS)
        if clamped != step:
            logger.warning("Step %d out of range, using %d", step, clamped)
        return await self._commit(self._state.model_copy(update={"current_step": clamped}))

    @beartype
    async def merge_personal_info(
        self, partial: PersonalInfo | PersonalDetails
    ) -> QuoteState:
        merged = _merge(self._state.personal_info, partial)
        return await self._commit(self._state.model_copy(update={"personal_info": merged}))

    @beartype
    async def merge_vehicle_info(
        self, partial: VehicleInfo | VehicleDetails
    ) -> QuoteState:
        merged = _merge(self._state.vehicle_info, partial)
        return await self._commit(self._state.model_copy(update={"vehicle_info": merged}))

    @beartype
    async def merge_coverage_info(
        self, partial: CoverageInfo | CoverageDetails
    ) -> QuoteState:
        merged = _merge(self._state.coverage_info, partial)
        return await self._commit(self._state.model_copy(update={"coverage_info": merged}))

    @beartype
    async def set_pricing(self, pricing: PricingBreakdown | None) -> QuoteState:
        return await self._commit(self._state.model_copy(update={"pricing": pricing}))

    @beartype
    async def reset(self) -> QuoteState:
        """Back to step 1 with empty records."""
        return await self._commit(initial_quote_state())

    @beartype
    async def load_snapshot(self, state: QuoteState) -> QuoteState:
        """Replace the whole state verbatim."""
        return await self._commit(state)

    async def _commit(self, state: QuoteState) -> QuoteState:
        self._state = state
        await self._persist()
        return state

    async def _persist(self) -> None:
        try:
            await self._cache.set(self._key, self._state.model_dump_json(), self._ttl)
        except _SLOT_ERRORS as e:
            logger.warning("Could not save progress to %s: %s", self._key, e)

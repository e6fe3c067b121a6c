"""Multi-step quote wizard flow."""

from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from beartype import beartype
from pydantic import Field

from ..core.logging_utils import get_logger
from ..core.result_types import Err, Ok, Result
from ..models.base import BaseModelConfig
from ..models.quote import TOTAL_STEPS, PricingBreakdown, QuoteState
from .pricing import compute_pricing
from .quote_store import QuoteStore
from .validation import (
    FieldError,
    validate_coverage_info,
    validate_personal_info,
    validate_vehicle_info,
)

logger = get_logger(__name__)

PERSONAL_DETAILS_STEP = 1
VEHICLE_DETAILS_STEP = 2
COVERAGE_STEP = 3
SUMMARY_STEP = TOTAL_STEPS


@beartype
class WizardStep(BaseModelConfig):
    """Individual wizard step configuration."""

    number: int = Field(..., ge=1, le=TOTAL_STEPS)
    step_id: str
    title: str
    description: str
    fields: list[str]


WIZARD_STEPS: tuple[WizardStep, ...] = (
    WizardStep(
        number=PERSONAL_DETAILS_STEP,
        step_id="personal",
        title="Personal Information",
        description="Tell us about yourself",
        fields=["full_name", "nrc_passport", "phone_number", "email"],
    ),
    WizardStep(
        number=VEHICLE_DETAILS_STEP,
        step_id="vehicle",
        title="Vehicle Details",
        description="Tell us about your vehicle to calculate your quote",
        fields=["make", "model", "year", "registration_number", "engine_type"],
    ),
    WizardStep(
        number=COVERAGE_STEP,
        step_id="coverage",
        title="Coverage Options",
        description="Choose your coverage type, duration and add-ons",
        fields=["type", "duration", "add_ons"],
    ),
    WizardStep(
        number=SUMMARY_STEP,
        step_id="summary",
        title="Your Quote Summary",
        description="Review your insurance quote and coverage details",
        fields=[],
    ),
)


class QuoteWizardService:
    """Sequence the four wizard steps over a :class:`QuoteStore`.

    Personal details -> vehicle details -> coverage -> summary, strictly in
    that order. Moving forward requires the current step's data to validate;
    moving back never does. Pricing is kept in step with the vehicle and
    coverage records: present exactly when both are complete.
    """

    def __init__(self, store: QuoteStore, *, current_year: int | None = None) -> None:
        """Initialize wizard service.

        Args:
            store: State container the wizard reads and mutates
            current_year: Fixed pricing year (defaults to the current date)
        """
        self._store = store
        self._current_year = current_year
        self._handlers: dict[
            int,
            tuple[
                Callable[[Mapping[str, Any]], Any],
                Callable[[Any], Awaitable[QuoteState]],
            ],
        ] = {
            PERSONAL_DETAILS_STEP: (validate_personal_info, store.merge_personal_info),
            VEHICLE_DETAILS_STEP: (validate_vehicle_info, store.merge_vehicle_info),
            COVERAGE_STEP: (validate_coverage_info, store.merge_coverage_info),
        }

    @property
    def state(self) -> QuoteState:
        return self._store.state

    @property
    def steps(self) -> tuple[WizardStep, ...]:
        return WIZARD_STEPS

    @property
    def current_step(self) -> WizardStep:
        return WIZARD_STEPS[self.state.current_step - 1]

    @property
    def progress_percentage(self) -> int:
        return int(self.state.current_step / TOTAL_STEPS * 100)

    @beartype
    async def load(self) -> QuoteState:
        """Restore saved progress and make sure pricing matches it."""
        state = await self._store.load()
        if state.pricing != self._expected_pricing(state):
            await self.refresh_pricing()
        return self.state

    @beartype
    async def update_step(
        self, step_data: Mapping[str, Any]
    ) -> Result[QuoteState, list[FieldError]]:
        """Validate and save the current step's data without moving on.

        On validation failure the state is left untouched.
        """
        step = self.state.current_step
        handler = self._handlers.get(step)
        if handler is None:
            return Ok(self.state)

        validate, merge = handler
        result = validate(step_data)
        if isinstance(result, Err):
            logger.info(
                "Step %d rejected: %s",
                step,
                sorted({error.field for error in result.err_value}),
            )
            return result

        await merge(result.ok_value)
        if step in (VEHICLE_DETAILS_STEP, COVERAGE_STEP):
            await self.refresh_pricing()
        return Ok(self.state)

    @beartype
    async def next_step(
        self, step_data: Mapping[str, Any] | None = None
    ) -> Result[QuoteState, list[FieldError]]:
        """Submit the current step and advance.

        A no-op on the summary step.
        """
        step = self.state.current_step
        if step >= SUMMARY_STEP:
            return Ok(self.state)

        result = await self.update_step(step_data or {})
        if isinstance(result, Err):
            return result

        await self._store.set_step(step + 1)
        if step + 1 == SUMMARY_STEP:
            await self.refresh_pricing()
        logger.debug("Advanced from step %d to %d", step, step + 1)
        return Ok(self.state)

    @beartype
    async def previous_step(self) -> QuoteState:
        """Go back one step; no-op on the first step."""
        step = self.state.current_step
        if step > PERSONAL_DETAILS_STEP:
            await self._store.set_step(step - 1)
        return self.state

    @beartype
    async def restart(self) -> QuoteState:
        """Discard everything and return to the first step."""
        logger.info("Restarting quote stored under %s", self._store.key)
        return await self._store.reset()

    @beartype
    async def refresh_pricing(self) -> PricingBreakdown | None:
        """Recompute pricing, or clear it when vehicle or coverage is incomplete."""
        pricing = self._expected_pricing(self.state)
        await self._store.set_pricing(pricing)
        return pricing

    def _expected_pricing(self, state: QuoteState) -> PricingBreakdown | None:
        if not (state.vehicle_info.is_complete and state.coverage_info.is_complete):
            return None
        return compute_pricing(
            state.vehicle_info,
            state.coverage_info,
            current_year=self._current_year,
        )

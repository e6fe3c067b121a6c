"""Quote API schemas."""

from uuid import UUID

from beartype import beartype
from pydantic import Field

from ..models.base import BaseModelConfig
from ..models.quote import TOTAL_STEPS, CoverageInfo, PricingBreakdown, QuoteState, VehicleInfo
from ..services.quote_wizard import WizardStep


@beartype
class WizardSessionResponse(BaseModelConfig):
    """Response schema for wizard session state."""

    session_id: UUID
    current_step: WizardStep
    total_steps: int = Field(default=TOTAL_STEPS)
    completion_percentage: int = Field(..., ge=0, le=100)
    is_complete: bool = Field(
        ..., description="On the summary step with pricing available"
    )
    state: QuoteState


@beartype
class StepValidationErrorResponse(BaseModelConfig):
    """Body of a 422 returned when step data is rejected."""

    message: str
    errors: dict[str, list[str]] = Field(
        ..., description="Messages keyed by field name"
    )


@beartype
class PricingRequest(BaseModelConfig):
    """Partial vehicle and coverage details to price."""

    vehicle_info: VehicleInfo = Field(default_factory=VehicleInfo)
    coverage_info: CoverageInfo = Field(default_factory=CoverageInfo)


@beartype
class PricingResponse(BaseModelConfig):
    pricing: PricingBreakdown
    monthly_total_display: str
    total_amount_display: str

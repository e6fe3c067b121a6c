"""Quote wizard, pricing and quote record endpoints."""

from typing import Annotated, Any
from urllib.parse import quote as url_quote
from uuid import UUID, uuid4

from beartype import beartype
from fastapi import APIRouter, Body, Depends, HTTPException, Response, status

from ...core.cache import CacheBackend
from ...core.config import Settings, get_settings
from ...core.logging_utils import get_logger
from ...models.quote import TOTAL_STEPS, Quote
from ...schemas.quote import (
    PricingRequest,
    PricingResponse,
    StepValidationErrorResponse,
    WizardSessionResponse,
)
from ...services.document_export import (
    INCOMPLETE_QUOTE_MESSAGE,
    EmailDraft,
    build_quote_document,
    compose_email_draft,
)
from ...services.pricing import compute_pricing, format_money
from ...services.quote_records import QuoteRecordStore, SavedQuote
from ...services.quote_store import QuoteStore
from ...services.quote_wizard import WIZARD_STEPS, QuoteWizardService, WizardStep
from ...services.validation import FieldError, group_field_errors
from ..dependencies import get_cache, get_quote_records, get_wizard_service, session_key

logger = get_logger(__name__)

router = APIRouter(prefix="/quotes", tags=["quotes"])

_VALIDATION_RESPONSES: dict[int | str, dict[str, Any]] = {
    status.HTTP_422_UNPROCESSABLE_ENTITY: {"model": StepValidationErrorResponse}
}


def _session_response(session_id: UUID, wizard: QuoteWizardService) -> WizardSessionResponse:
    state = wizard.state
    return WizardSessionResponse(
        session_id=session_id,
        current_step=wizard.current_step,
        total_steps=TOTAL_STEPS,
        completion_percentage=wizard.progress_percentage,
        is_complete=state.current_step == TOTAL_STEPS and state.pricing is not None,
        state=state,
    )


def _validation_error(errors: list[FieldError]) -> HTTPException:
    body = StepValidationErrorResponse(
        message="Please correct the highlighted fields.",
        errors=group_field_errors(errors),
    )
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=body.model_dump()
    )


@router.post("/wizard/start", response_model=WizardSessionResponse)
@beartype
async def start_wizard_session(
    cache: Annotated[CacheBackend, Depends(get_cache)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> WizardSessionResponse:
    """Start a new quote wizard session."""
    session_id = uuid4()
    wizard = QuoteWizardService(QuoteStore(cache, key=session_key(settings, session_id)))
    await wizard.restart()
    logger.info("Started wizard session %s", session_id)
    return _session_response(session_id, wizard)


@router.get("/wizard/steps", response_model=list[WizardStep])
@beartype
async def list_wizard_steps() -> list[WizardStep]:
    """Ordered wizard step configuration."""
    return list(WIZARD_STEPS)


@router.get("/wizard/{session_id}", response_model=WizardSessionResponse)
@beartype
async def get_wizard_session(
    session_id: UUID,
    wizard: Annotated[QuoteWizardService, Depends(get_wizard_service)],
) -> WizardSessionResponse:
    """Get wizard session state."""
    return _session_response(session_id, wizard)


@router.put(
    "/wizard/{session_id}/step",
    response_model=WizardSessionResponse,
    responses=_VALIDATION_RESPONSES,
)
@beartype
async def update_wizard_step(
    session_id: UUID,
    step_data: Annotated[dict[str, Any], Body()],
    wizard: Annotated[QuoteWizardService, Depends(get_wizard_service)],
) -> WizardSessionResponse:
    """Save the current step's data without moving on."""
    result = await wizard.update_step(step_data)
    if result.is_err():
        raise _validation_error(result.err_value)
    return _session_response(session_id, wizard)


@router.post(
    "/wizard/{session_id}/next",
    response_model=WizardSessionResponse,
    responses=_VALIDATION_RESPONSES,
)
@beartype
async def next_wizard_step(
    session_id: UUID,
    step_data: Annotated[dict[str, Any], Body()],
    wizard: Annotated[QuoteWizardService, Depends(get_wizard_service)],
) -> WizardSessionResponse:
    """Submit the current step and move to the next one."""
    result = await wizard.next_step(step_data)
    if result.is_err():
        raise _validation_error(result.err_value)
    return _session_response(session_id, wizard)


@router.post("/wizard/{session_id}/previous", response_model=WizardSessionResponse)
@beartype
async def previous_wizard_step(
    session_id: UUID,
    wizard: Annotated[QuoteWizardService, Depends(get_wizard_service)],
) -> WizardSessionResponse:
    """Move to previous step in wizard."""
    await wizard.previous_step()
    return _session_response(session_id, wizard)


@router.post("/wizard/{session_id}/restart", response_model=WizardSessionResponse)
@beartype
async def restart_wizard_session(
    session_id: UUID,
    wizard: Annotated[QuoteWizardService, Depends(get_wizard_service)],
) -> WizardSessionResponse:
    """Discard the session's data and return to the first step."""
    await wizard.restart()
    return _session_response(session_id, wizard)


@router.get("/wizard/{session_id}/document")
@beartype
async def download_quote_document(
    session_id: UUID,
    wizard: Annotated[QuoteWizardService, Depends(get_wizard_service)],
) -> Response:
    """Download the quotation PDF for a priced session."""
    result = build_quote_document(wizard.state)
    if result.is_err():
        code = (
            status.HTTP_409_CONFLICT
            if result.err_value == INCOMPLETE_QUOTE_MESSAGE
            else status.HTTP_500_INTERNAL_SERVER_ERROR
        )
        raise HTTPException(status_code=code, detail=result.err_value)

    document = result.ok_value
    return Response(
        content=document.content,
        media_type=document.media_type,
        headers={
            "Content-Disposition": (
                f'attachment; filename="{document.filename}"; '
                f"filename*=UTF-8''{url_quote(document.filename)}"
            )
        },
    )


@router.get("/wizard/{session_id}/email-draft", response_model=EmailDraft)
@beartype
async def get_email_draft(
    session_id: UUID,
    wizard: Annotated[QuoteWizardService, Depends(get_wizard_service)],
) -> EmailDraft:
    """Prepare an email carrying the quote summary."""
    result = compose_email_draft(wizard.state)
    if result.is_err():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=result.err_value)
    return result.ok_value


@router.post("/pricing", response_model=PricingResponse)
@beartype
async def calculate_pricing(
    request: PricingRequest,
    settings: Annotated[Settings, Depends(get_settings)],
) -> PricingResponse:
    """Price partial vehicle and coverage details without a session."""
    pricing = compute_pricing(request.vehicle_info, request.coverage_info)
    return PricingResponse(
        pricing=pricing,
        monthly_total_display=format_money(pricing.monthly_total, settings.currency_symbol),
        total_amount_display=format_money(pricing.total_amount, settings.currency_symbol),
    )


@router.post("", response_model=SavedQuote, status_code=status.HTTP_201_CREATED)
@beartype
async def save_quote(
    quote: Quote,
    records: Annotated[QuoteRecordStore, Depends(get_quote_records)],
) -> SavedQuote:
    """Keep a finalized quote and return its record id."""
    return await records.save_quote(quote)


@router.get("/{quote_id}", response_model=Quote)
@beartype
async def get_quote(
    quote_id: str,
    records: Annotated[QuoteRecordStore, Depends(get_quote_records)],
) -> Quote:
    """Fetch a saved quote by id."""
    quote = await records.get_quote(quote_id)
    if quote is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Quote not found")
    return quote

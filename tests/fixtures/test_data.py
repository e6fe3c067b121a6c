"""Step payloads and state factories shared by the test suite."""

from datetime import date
from typing import Any

from motoquote.models.quote import (
    CoverageInfo,
    PersonalInfo,
    QuoteState,
    VehicleInfo,
)
from motoquote.services.pricing import compute_pricing

CURRENT_YEAR = 2025

PERSONAL_STEP: dict[str, Any] = {
    "full_name": "Jane Banda",
    "nrc_passport": "123456/78/1",
    "phone_number": "+260977123456",
    "email": "jane.banda@gmail.com",
}

VEHICLE_STEP: dict[str, Any] = {
    "make": "bmw",
    "model": "X5",
    "year": str(CURRENT_YEAR),
    "registration_number": "ABC 1234",
    "engine_type": "diesel",
}

COVERAGE_STEP: dict[str, Any] = {
    "type": "comprehensive",
    "duration": "6",
    "add_ons": {
        "roadside_assistance": False,
        "theft_cover": False,
        "windscreen_cover": False,
    },
}


def priced_state(
    *,
    current_step: int = 4,
    personal: dict[str, Any] | None = None,
    vehicle: dict[str, Any] | None = None,
    coverage: dict[str, Any] | None = None,
) -> QuoteState:
    """A fully filled-in state with pricing computed for ``CURRENT_YEAR``."""
    vehicle_info = VehicleInfo(**(VEHICLE_STEP if vehicle is None else vehicle))
    coverage_info = CoverageInfo(**(COVERAGE_STEP if coverage is None else coverage))
    return QuoteState(
        current_step=current_step,
        personal_info=PersonalInfo(**(PERSONAL_STEP if personal is None else personal)),
        vehicle_info=vehicle_info,
        coverage_info=coverage_info,
        pricing=compute_pricing(vehicle_info, coverage_info, current_year=CURRENT_YEAR),
    )


ISSUE_DATE = date(2025, 3, 5)

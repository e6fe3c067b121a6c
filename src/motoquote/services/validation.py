"""Per-step input validation.

Each validator takes the raw form data of one wizard step and returns either
the accepted detail record or the list of field errors to show inline.
Unknown keys are dropped before validation.
"""

from collections.abc import Callable, Mapping
from typing import Any

from beartype import beartype
from pydantic import Field, ValidationError

from ..core.logging_utils import get_logger
from ..core.result_types import Err, Ok, Result
from ..models.base import BaseModelConfig
from ..models.quote import CoverageDetails, PersonalDetails, VehicleDetails

logger = get_logger(__name__)

FIELD_MESSAGES: dict[str, str] = {
    "full_name": "Full name must be at least 2 characters",
    "nrc_passport": "NRC/Passport number is required",
    "phone_number": "Valid phone number is required",
    "email": "Valid email address is required",
    "make": "Vehicle make is required",
    "model": "Vehicle model is required",
    "year": "Vehicle year is required",
    "registration_number": "Registration number is required",
    "engine_type": "Engine type is required",
    "type": "Coverage type is required",
    "duration": "Duration is required",
    "add_ons": "Add-on selections must be true or false",
}

# Messages that depend on why a field failed, not just which field.
ERROR_TYPE_MESSAGES: dict[tuple[str, str], str] = {
    ("year", "string_pattern_mismatch"): "Vehicle year must be a number",
    ("year", "string_too_long"): "Vehicle year must have 4 digits",
}


@beartype
class FieldError(BaseModelConfig):
    """A single problem with one submitted field."""

    field: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)


StepValidator = Callable[[Mapping[str, Any]], Any]


@beartype
def group_field_errors(errors: list[FieldError]) -> dict[str, list[str]]:
    """Collect messages by field name, preserving order."""
    grouped: dict[str, list[str]] = {}
    for error in errors:
        grouped.setdefault(error.field, []).append(error.message)
    return grouped


def _field_errors(exc: ValidationError) -> list[FieldError]:
    errors: list[FieldError] = []
    seen: set[tuple[str, str]] = set()
    for detail in exc.errors():
        loc = detail.get("loc") or ()
        root = str(loc[0]) if loc else "__root__"
        name = ".".join(str(part) for part in loc) or "__root__"
        message = (
            ERROR_TYPE_MESSAGES.get((root, detail["type"]))
            or FIELD_MESSAGES.get(root)
            or detail["msg"]
        )
        if (name, message) in seen:
            continue
        seen.add((name, message))
        errors.append(FieldError(field=name, message=message))
    return errors


def _validate(
    model: type[BaseModelConfig], data: Mapping[str, Any]
) -> Result[Any, list[FieldError]]:
    known = {key: value for key, value in data.items() if key in model.model_fields}
    ignored = set(data) - set(known)
    if ignored:
        logger.debug("Ignoring unknown %s fields: %s", model.__name__, sorted(ignored))

    try:
        return Ok(model.model_validate(known))
    except ValidationError as exc:
        return Err(_field_errors(exc))


@beartype
def validate_personal_info(
    data: Mapping[str, Any],
) -> Result[PersonalDetails, list[FieldError]]:
    """Step 1: name, NRC/passport, phone and email."""
    return _validate(PersonalDetails, data)


@beartype
def validate_vehicle_info(
    data: Mapping[str, Any],
) -> Result[VehicleDetails, list[FieldError]]:
    """Step 2: make, model, year, registration and engine type."""
    return _validate(VehicleDetails, data)


@beartype
def validate_coverage_info(
    data: Mapping[str, Any],
) -> Result[CoverageDetails, list[FieldError]]:
    """Step 3: coverage type, duration and add-ons."""
    return _validate(CoverageDetails, data)

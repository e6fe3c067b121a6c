"""Quote domain models.

Two families live here. The partial records (``PersonalInfo``,
``VehicleInfo``, ``CoverageInfo``) accumulate wizard input and have every
field optional. The detail records (``PersonalDetails``, ``VehicleDetails``,
``CoverageDetails``) carry the acceptance rules of each wizard step and make
up a finalized :class:`Quote`.
"""

from decimal import Decimal
from enum import Enum

from beartype import beartype
from pydantic import ConfigDict, EmailStr, Field

from .base import BaseModelConfig

TOTAL_STEPS = 4


class CoverageType(str, Enum):
    """Level of cover."""

    THIRD_PARTY = "third-party"
    COMPREHENSIVE = "comprehensive"

    def __str__(self) -> str:
        return self.value

    @property
    def label(self) -> str:
        """Title-cased display name, e.g. ``Third Party``."""
        return self.value.replace("-", " ").title()


class EngineType(str, Enum):
    """Vehicle fuel type."""

    PETROL = "petrol"
    DIESEL = "diesel"

    def __str__(self) -> str:
        return self.value


class CoverageDuration(str, Enum):
    """Policy length in months, kept as the string tokens the form submits."""

    ONE_MONTH = "1"
    THREE_MONTHS = "3"
    SIX_MONTHS = "6"
    TWELVE_MONTHS = "12"

    def __str__(self) -> str:
        return self.value

    @property
    def months(self) -> int:
        return int(self.value)


# Makes offered by the vehicle form, keyed by submitted value.
VEHICLE_MAKES: dict[str, str] = {
    "toyota": "Toyota",
    "nissan": "Nissan",
    "mazda": "Mazda",
    "honda": "Honda",
    "ford": "Ford",
    "bmw": "BMW",
    "mercedes": "Mercedes-Benz",
}


@beartype
class AddOns(BaseModelConfig):
    """Optional extras, each with a fixed monthly cost."""

    roadside_assistance: bool = Field(default=False)
    theft_cover: bool = Field(default=False)
    windscreen_cover: bool = Field(default=False)

    @property
    def selected_labels(self) -> list[str]:
        """Display names of the enabled add-ons, in form order."""
        labels = []
        if self.roadside_assistance:
            labels.append("Roadside Assistance")
        if self.theft_cover:
            labels.append("Theft Cover")
        if self.windscreen_cover:
            labels.append("Windscreen Cover")
        return labels


# Partial records accumulated by the wizard


@beartype
class PersonalInfo(BaseModelConfig):
    """Applicant details collected on step 1 (possibly incomplete)."""

    full_name: str | None = Field(default=None)
    nrc_passport: str | None = Field(
        default=None, description="National registration card or passport number"
    )
    phone_number: str | None = Field(default=None)
    email: str | None = Field(default=None)


@beartype
class VehicleInfo(BaseModelConfig):
    """Vehicle details collected on step 2 (possibly incomplete)."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    make: str | None = Field(default=None)
    model: str | None = Field(default=None)
    year: str | None = Field(default=None)
    registration_number: str | None = Field(default=None)
    engine_type: EngineType | None = Field(default=None)

    @property
    def is_complete(self) -> bool:
        return all(
            value is not None
            for value in (
                self.make,
                self.model,
                self.year,
                self.registration_number,
                self.engine_type,
            )
        )


@beartype
class CoverageInfo(BaseModelConfig):
    """Coverage choices collected on step 3 (possibly incomplete)."""

    type: CoverageType | None = Field(default=None)
    duration: CoverageDuration | None = Field(default=None)
    add_ons: AddOns = Field(default_factory=AddOns)

    @property
    def is_complete(self) -> bool:
        return self.type is not None and self.duration is not None


@beartype
class PricingBreakdown(BaseModelConfig):
    """Monthly price components and the total for the chosen duration.

    Values are kept at full precision; rounding happens when displayed.
    """

    base_premium: Decimal = Field(
        ..., ge=Decimal("0"), description="Coverage base premium after make multiplier"
    )
    age_factor: Decimal = Field(..., ge=Decimal("0"))
    roadside_assistance: Decimal = Field(..., ge=Decimal("0"))
    theft_cover: Decimal = Field(..., ge=Decimal("0"))
    windscreen_cover: Decimal = Field(..., ge=Decimal("0"))
    monthly_total: Decimal = Field(..., ge=Decimal("0"))
    total_amount: Decimal = Field(..., ge=Decimal("0"))


@beartype
class QuoteState(BaseModelConfig):
    """Everything the wizard has gathered so far."""

    current_step: int = Field(default=1, ge=1, le=TOTAL_STEPS)
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    vehicle_info: VehicleInfo = Field(default_factory=VehicleInfo)
    coverage_info: CoverageInfo = Field(default_factory=CoverageInfo)
    pricing: PricingBreakdown | None = Field(default=None)


# Complete records, as accepted by each wizard step


@beartype
class PersonalDetails(BaseModelConfig):
    """Step 1 input."""

    full_name: str = Field(..., min_length=2)
    nrc_passport: str = Field(..., min_length=5)
    phone_number: str = Field(..., min_length=10)
    email: EmailStr


@beartype
class VehicleDetails(BaseModelConfig):
    """Step 2 input. ``make`` is any non-empty string."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    make: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    year: str = Field(..., min_length=4, max_length=4, pattern=r"^\d+$")
    registration_number: str = Field(..., min_length=3)
    engine_type: EngineType


@beartype
class CoverageDetails(BaseModelConfig):
    """Step 3 input."""

    type: CoverageType
    duration: CoverageDuration
    add_ons: AddOns = Field(default_factory=AddOns)


@beartype
class Quote(BaseModelConfig):
    """A finalized quote submitted for record keeping."""

    personal_info: PersonalDetails
    vehicle_info: VehicleDetails
    coverage_info: CoverageDetails


@beartype
def initial_quote_state() -> QuoteState:
    """Step 1, empty records, add-ons off, no pricing."""
    return QuoteState()

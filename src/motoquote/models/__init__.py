"""Domain models."""

from .base import BaseModelConfig
from .quote import (
    TOTAL_STEPS,
    VEHICLE_MAKES,
    AddOns,
    CoverageDetails,
    CoverageDuration,
    CoverageInfo,
    CoverageType,
    EngineType,
    PersonalDetails,
    PersonalInfo,
    PricingBreakdown,
    Quote,
    QuoteState,
    VehicleDetails,
    VehicleInfo,
    initial_quote_state,
)

__all__ = [
    "BaseModelConfig",
    "TOTAL_STEPS",
    "VEHICLE_MAKES",
    "AddOns",
    "CoverageDetails",
    "CoverageDuration",
    "CoverageInfo",
    "CoverageType",
    "EngineType",
    "PersonalDetails",
    "PersonalInfo",
    "PricingBreakdown",
    "Quote",
    "QuoteState",
    "VehicleDetails",
    "VehicleInfo",
    "initial_quote_state",
]

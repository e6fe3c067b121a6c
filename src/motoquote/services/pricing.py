"""Premium calculation for motor quotes.

The monthly premium is built from four parts:

    base premium (by coverage type) x make multiplier
    + age factor (10 per year of vehicle age, never negative)
    + fixed cost of each enabled add-on

and the quoted total is the monthly premium times the duration in months.
Everything is computed in ``Decimal`` at full precision; only
:func:`format_money` rounds, for display.
"""

import re
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from beartype import beartype

from ..models.quote import CoverageInfo, CoverageType, PricingBreakdown, VehicleInfo

BASE_PREMIUMS: dict[CoverageType, Decimal] = {
    CoverageType.THIRD_PARTY: Decimal("150"),
    CoverageType.COMPREHENSIVE: Decimal("350"),
}
DEFAULT_BASE_PREMIUM = Decimal("150")

MAKE_MULTIPLIERS: dict[str, Decimal] = {
    "toyota": Decimal("1.0"),
    "nissan": Decimal("1.0"),
    "mazda": Decimal("1.0"),
    "honda": Decimal("1.0"),
    "ford": Decimal("1.1"),
    "bmw": Decimal("1.3"),
    "mercedes": Decimal("1.4"),
}
DEFAULT_MAKE_MULTIPLIER = Decimal("1.0")

ADD_ON_COSTS: dict[str, Decimal] = {
    "roadside_assistance": Decimal("50"),
    "theft_cover": Decimal("80"),
    "windscreen_cover": Decimal("30"),
}

AGE_FACTOR_PER_YEAR = Decimal("10")
DEFAULT_VEHICLE_YEAR = 2020
DEFAULT_DURATION_MONTHS = 1

_CENTS = Decimal("0.01")
# Longer digit runs are not years or durations and parse as the default.
_LEADING_INTEGER = re.compile(r"^\s*([+-]?\d{1,9})(?!\d)")


@beartype
def parse_leading_int(value: str | None, default: int) -> int:
    """Parse the integer prefix of ``value`` (``"2019 "`` -> 2019).

    Returns ``default`` when the value is missing, has no integer prefix or
    the prefix runs past nine digits.
    """
    if value is None:
        return default
    match = _LEADING_INTEGER.match(value)
    if match is None:
        return default
    return int(match.group(1))


@beartype
def base_premium_for(coverage_type: CoverageType | None) -> Decimal:
    if coverage_type is None:
        return DEFAULT_BASE_PREMIUM
    return BASE_PREMIUMS.get(coverage_type, DEFAULT_BASE_PREMIUM)


@beartype
def make_multiplier_for(make: str | None) -> Decimal:
    """Brand multiplier, matched case-insensitively; unknown makes get 1.0."""
    if not make:
        return DEFAULT_MAKE_MULTIPLIER
    return MAKE_MULTIPLIERS.get(make.strip().lower(), DEFAULT_MAKE_MULTIPLIER)


@beartype
def age_factor_for(vehicle_year: str | None, current_year: int) -> Decimal:
    age = current_year - parse_leading_int(vehicle_year, DEFAULT_VEHICLE_YEAR)
    return max(Decimal("0"), Decimal(age) * AGE_FACTOR_PER_YEAR)


@beartype
def compute_pricing(
    vehicle: VehicleInfo,
    coverage: CoverageInfo,
    *,
    current_year: int | None = None,
) -> PricingBreakdown:
    """Price a quote from (possibly partial) vehicle and coverage records.

    Missing fields fall back to documented defaults, so this never fails.

    Args:
        vehicle: Vehicle details; only ``make`` and ``year`` are used
        coverage: Coverage type, duration and add-ons
        current_year: Year used for the vehicle age (defaults to today's)

    Returns:
        The full price breakdown
    """
    if current_year is None:
        current_year = date.today().year

    base_premium = base_premium_for(coverage.type) * make_multiplier_for(vehicle.make)
    age_factor = age_factor_for(vehicle.year, current_year)

    add_ons = coverage.add_ons
    roadside = ADD_ON_COSTS["roadside_assistance"] if add_ons.roadside_assistance else Decimal("0")
    theft = ADD_ON_COSTS["theft_cover"] if add_ons.theft_cover else Decimal("0")
    windscreen = ADD_ON_COSTS["windscreen_cover"] if add_ons.windscreen_cover else Decimal("0")

    monthly_total = base_premium + age_factor + roadside + theft + windscreen

    duration_token = coverage.duration.value if coverage.duration is not None else None
    duration = parse_leading_int(duration_token, DEFAULT_DURATION_MONTHS)
    total_amount = monthly_total * duration

    return PricingBreakdown(
        base_premium=base_premium,
        age_factor=age_factor,
        roadside_assistance=roadside,
        theft_cover=theft,
        windscreen_cover=windscreen,
        monthly_total=monthly_total,
        total_amount=total_amount,
    )


@beartype
def format_money(amount: Decimal, symbol: str = "K") -> str:
    """Render an amount with two decimals, e.g. ``K2730.00``."""
    return f"{symbol}{amount.quantize(_CENTS, rounding=ROUND_HALF_UP)}"

"""Tests for quote domain models."""

import pytest
from pydantic import ValidationError

from motoquote.models.quote import (
    AddOns,
    CoverageDuration,
    CoverageInfo,
    CoverageType,
    PersonalInfo,
    PricingBreakdown,
    QuoteState,
    VehicleInfo,
    initial_quote_state,
)


class TestEnums:
    def test_coverage_labels(self) -> None:
        assert CoverageType.THIRD_PARTY.label == "Third Party"
        assert CoverageType.COMPREHENSIVE.label == "Comprehensive"

    def test_durations(self) -> None:
        assert [d.months for d in CoverageDuration] == [1, 3, 6, 12]
        assert str(CoverageDuration.SIX_MONTHS) == "6"


class TestPartialRecords:
    def test_everything_starts_unset(self) -> None:
        assert PersonalInfo().model_dump() == {
            "full_name": None,
            "nrc_passport": None,
            "phone_number": None,
            "email": None,
        }
        assert not VehicleInfo().is_complete
        assert not CoverageInfo().is_complete

    def test_vehicle_completeness(self) -> None:
        partial = VehicleInfo(make="ford", model="Ranger", year="2019")
        complete = partial.model_copy(
            update={"registration_number": "BAF 123", "engine_type": "diesel"}
        )

        assert not partial.is_complete
        assert complete.is_complete

    def test_coverage_completeness_ignores_add_ons(self) -> None:
        assert CoverageInfo(type="third-party", duration="3").is_complete

    def test_records_are_frozen(self) -> None:
        with pytest.raises(ValidationError):
            PersonalInfo().full_name = "Jane"  # type: ignore[misc]

    def test_whitespace_is_stripped(self) -> None:
        assert VehicleInfo(make="  bmw ").make == "bmw"


class TestAddOns:
    def test_default_off(self) -> None:
        assert AddOns().selected_labels == []

    def test_selected_labels_in_form_order(self) -> None:
        add_ons = AddOns(windscreen_cover=True, roadside_assistance=True)

        assert add_ons.selected_labels == ["Roadside Assistance", "Windscreen Cover"]


class TestQuoteState:
    def test_initial_state(self) -> None:
        state = initial_quote_state()

        assert state.current_step == 1
        assert state.pricing is None
        assert state.coverage_info.add_ons == AddOns()

    @pytest.mark.parametrize("step", [0, 5])
    def test_step_range(self, step: int) -> None:
        with pytest.raises(ValidationError):
            QuoteState(current_step=step)

    def test_pricing_rejects_negative_amounts(self) -> None:
        with pytest.raises(ValidationError):
            PricingBreakdown(
                base_premium="-1",
                age_factor="0",
                roadside_assistance="0",
                theft_cover="0",
                windscreen_cover="0",
                monthly_total="0",
                total_amount="0",
            )

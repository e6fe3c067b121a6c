"""Tests for quotation document and email draft generation."""

from datetime import date
from pathlib import Path
from unittest.mock import patch
from urllib.parse import parse_qs, urlsplit

import pytest

from motoquote.models.quote import initial_quote_state
from motoquote.services.document_export import (
    EMAIL_REQUIRED_MESSAGE,
    INCOMPLETE_QUOTE_MESSAGE,
    RENDER_FAILED_MESSAGE,
    QuoteDocument,
    build_quote_document,
    compose_email_draft,
    document_sections,
    quote_filename,
    quote_number,
    write_document,
)
from tests.fixtures.test_data import ISSUE_DATE, PERSONAL_STEP, VEHICLE_STEP, priced_state


def _section(state, title: str) -> list[str]:
    for section in document_sections(state):
        if section.title == title:
            return [
                f"{line.text} {line.amount}" if line.amount else line.text
                for line in section.lines
            ]
    raise AssertionError(f"no section {title!r}")


class TestNaming:
    def test_filename_uses_name_and_date(self) -> None:
        assert (
            quote_filename("Jane  Mwila Banda", date(2025, 3, 5))
            == "MotoQuote_Jane_Mwila_Banda_05-03-2025.pdf"
        )

    def test_filename_without_name(self) -> None:
        assert quote_filename(None, date(2025, 12, 1)) == "MotoQuote_Quote_01-12-2025.pdf"

    @pytest.mark.parametrize(
        ("full_name", "expected"),
        [
            ("\u0141ukasz Mwansa", "MotoQuote__ukasz_Mwansa_05-03-2025.pdf"),
            ('Jane "JB" Banda', "MotoQuote_Jane_JB_Banda_05-03-2025.pdf"),
            ("Jane/Banda", "MotoQuote_Jane_Banda_05-03-2025.pdf"),
            ("../../etc", "MotoQuote_.._.._etc_05-03-2025.pdf"),
        ],
    )
    def test_filename_keeps_only_safe_characters(
        self, full_name: str, expected: str
    ) -> None:
        assert quote_filename(full_name, ISSUE_DATE) == expected

    def test_quote_number_uses_last_six_digits(self) -> None:
        assert quote_number(1741176000123) == "MQ-000123"
        assert quote_number().startswith("MQ-")


class TestSections:
    def test_pricing_lines_omit_zero_values(self) -> None:
        lines = _section(priced_state(), "Pricing Breakdown")

        assert lines == [
            "Base Premium: K455.00",
            "Monthly Total: K455.00",
            "Total Amount (6 months): K2730.00",
        ]

    def test_enabled_add_ons_are_listed(self) -> None:
        state = priced_state(
            coverage={
                "type": "third-party",
                "duration": "1",
                "add_ons": {"roadside_assistance": True, "windscreen_cover": True},
            },
            vehicle={"make": "toyota", "year": "2020"},
        )

        coverage = _section(state, "Coverage Information")
        pricing = _section(state, "Pricing Breakdown")

        assert coverage == [
            "Coverage Type: Third Party",
            "Duration: 1 months",
            "Add-ons: Roadside Assistance, Windscreen Cover",
        ]
        assert "Vehicle Age Factor: K50.00" in pricing
        assert "Roadside Assistance: K50.00" in pricing
        assert "Windscreen Cover: K30.00" in pricing
        assert not any(line.startswith("Theft Cover") for line in pricing)

    def test_missing_fields_render_as_not_available(self) -> None:
        state = priced_state(personal={"full_name": "Jane Banda"})

        personal = _section(state, "Personal Information")

        assert personal == [
            "Name: Jane Banda",
            "NRC/Passport: N/A",
            "Phone: N/A",
            "Email: N/A",
        ]

    def test_vehicle_section(self) -> None:
        assert _section(priced_state(), "Vehicle Information") == [
            "Make & Model: BMW X5",
            "Year: 2025",
            "Registration: ABC 1234",
            "Engine Type: Diesel",
        ]

    def test_unlisted_make_is_shown_as_entered(self) -> None:
        state = priced_state(vehicle={**VEHICLE_STEP, "make": "Lada", "model": "Niva"})

        assert _section(state, "Vehicle Information")[0] == "Make & Model: Lada Niva"

    def test_sections_need_pricing(self) -> None:
        with pytest.raises(ValueError):
            document_sections(initial_quote_state())


class TestBuildDocument:
    def test_renders_pdf(self) -> None:
        result = build_quote_document(priced_state(), issued_on=ISSUE_DATE)

        assert result.is_ok()
        document = result.unwrap()
        assert document.content.startswith(b"%PDF")
        assert document.filename == "MotoQuote_Jane_Banda_05-03-2025.pdf"
        assert document.media_type == "application/pdf"

    def test_missing_pricing_is_reported(self) -> None:
        result = build_quote_document(initial_quote_state())

        assert result.is_err()
        assert result.unwrap_err() == INCOMPLETE_QUOTE_MESSAGE

    def test_render_failure_is_reported(self) -> None:
        with patch(
            "motoquote.services.document_export._render_pdf",
            side_effect=RuntimeError("font missing"),
        ):
            result = build_quote_document(priced_state(), issued_on=ISSUE_DATE)

        assert result.is_err()
        assert result.unwrap_err() == RENDER_FAILED_MESSAGE

    def test_write_document(self, tmp_path: Path) -> None:
        document = QuoteDocument(filename="MotoQuote_Test.pdf", content=b"%PDF-1.4 test")

        path = write_document(document, tmp_path / "exports")

        assert path == tmp_path / "exports" / "MotoQuote_Test.pdf"
        assert path.read_bytes() == b"%PDF-1.4 test"

    def test_write_document_stays_in_directory(self, tmp_path: Path) -> None:
        document = QuoteDocument(filename="../escape.pdf", content=b"%PDF")

        path = write_document(document, tmp_path / "exports")

        assert path == tmp_path / "exports" / "escape.pdf"
        assert not (tmp_path / "escape.pdf").exists()

    def test_name_with_slash_is_written_to_export_dir(self, tmp_path: Path) -> None:
        state = priced_state(personal={**PERSONAL_STEP, "full_name": "Jane/Banda"})
        document = build_quote_document(state, issued_on=ISSUE_DATE).unwrap()

        path = write_document(document, tmp_path)

        assert path == tmp_path / "MotoQuote_Jane_Banda_05-03-2025.pdf"
        assert path.read_bytes().startswith(b"%PDF")

    def test_write_document_defaults_to_export_dir(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        from motoquote.core.config import clear_settings_cache

        monkeypatch.setenv("EXPORT_DIR", str(tmp_path / "out"))
        clear_settings_cache()
        document = QuoteDocument(filename="q.pdf", content=b"%PDF")

        path = write_document(document)

        assert path == tmp_path / "out" / "q.pdf"
        assert path.exists()


class TestEmailDraft:
    def test_draft_summarises_quote(self) -> None:
        result = compose_email_draft(priced_state())

        assert result.is_ok()
        draft = result.unwrap()
        assert draft.recipient == PERSONAL_STEP["email"]
        assert draft.subject == "Your MotoQuote Zambia Insurance Quote"
        assert draft.body.startswith("Dear Jane Banda,")
        assert "Vehicle: BMW X5 (2025)" in draft.body
        assert "Coverage: Comprehensive" in draft.body
        assert "Total Premium: K2730.00" in draft.body
        assert "Monthly Premium: K455.00" in draft.body

    def test_mailto_link_carries_subject_and_body(self) -> None:
        draft = compose_email_draft(priced_state()).unwrap()

        parts = urlsplit(draft.mailto_url)
        query = parse_qs(parts.query)

        assert parts.scheme == "mailto"
        assert parts.path == PERSONAL_STEP["email"]
        assert query["subject"] == [draft.subject]
        assert query["body"] == [draft.body]

    def test_email_is_required(self) -> None:
        result = compose_email_draft(priced_state(personal={"full_name": "Jane Banda"}))

        assert result.is_err()
        assert result.unwrap_err() == EMAIL_REQUIRED_MESSAGE

    def test_pricing_is_required(self) -> None:
        state = priced_state().model_copy(update={"pricing": None})

        result = compose_email_draft(state)

        assert result.is_err()
        assert result.unwrap_err() == INCOMPLETE_QUOTE_MESSAGE

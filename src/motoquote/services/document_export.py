"""Quotation document and email draft generation.

Rendering is split from I/O: :func:`build_quote_document` produces PDF bytes
and a filename in memory, :func:`write_document` puts them on disk.
"""

import io
import re
import time
from datetime import date
from decimal import Decimal
from pathlib import Path
from urllib.parse import quote

from beartype import beartype
from pydantic import Field
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from ..core.config import Settings, get_settings
from ..core.logging_utils import get_logger
from ..core.result_types import Err, Ok, Result
from ..models.base import BaseModelConfig
from ..models.quote import VEHICLE_MAKES, QuoteState
from .pricing import format_money

logger = get_logger(__name__)

INCOMPLETE_QUOTE_MESSAGE = "Quote data is incomplete. Please try again."
RENDER_FAILED_MESSAGE = "There was an error generating your PDF. Please try again."
EMAIL_REQUIRED_MESSAGE = "Please provide a valid email address to send the quote."

NOT_AVAILABLE = "N/A"

# Colors (RGB, 0-1)
PRIMARY = (51 / 255, 112 / 255, 255 / 255)
SECONDARY = (34 / 255, 197 / 255, 94 / 255)
TEXT = (31 / 255, 41 / 255, 55 / 255)
PANEL = (245 / 255, 245 / 255, 245 / 255)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


@beartype
class QuoteDocument(BaseModelConfig):
    """A rendered quotation, ready to be saved or served."""

    filename: str = Field(..., min_length=1)
    content: bytes
    media_type: str = Field(default="application/pdf")


@beartype
class EmailDraft(BaseModelConfig):
    """Pre-filled email the applicant can send from their own client."""

    recipient: str = Field(..., min_length=1)
    subject: str
    body: str
    mailto_url: str


@beartype
class DocumentLine(BaseModelConfig):
    """One line of document text; ``amount`` is right-aligned when present."""

    text: str
    amount: str | None = Field(default=None)
    style: str = Field(default="body", pattern="^(heading|body|total|grand_total)$")


@beartype
class DocumentSection(BaseModelConfig):
    title: str
    lines: list[DocumentLine]


def _or_na(value: str | None) -> str:
    return value if value else NOT_AVAILABLE


def _make_label(make: str | None) -> str:
    """Display name for a submitted make; unlisted makes are shown as entered."""
    if not make:
        return NOT_AVAILABLE
    return VEHICLE_MAKES.get(make.lower(), make)


@beartype
def quote_number(now_ms: int | None = None) -> str:
    """``MQ-`` followed by the last six digits of the epoch milliseconds."""
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    return f"MQ-{str(now_ms)[-6:]}"


@beartype
def quote_filename(full_name: str | None, issued_on: date) -> str:
    """Download name, e.g. ``MotoQuote_Jane_Banda_05-03-2025.pdf``.

    Anything outside ``[A-Za-z0-9._-]`` in the name becomes ``_``.
    """
    name = _UNSAFE_FILENAME_CHARS.sub("_", full_name) if full_name else "Quote"
    return f"MotoQuote_{name}_{issued_on.strftime('%d-%m-%Y')}.pdf"


@beartype
def document_sections(
    state: QuoteState, settings: Settings | None = None
) -> list[DocumentSection]:
    """Lay out the document body as titled sections of text lines.

    The state must carry pricing.
    """
    if state.pricing is None:
        raise ValueError("pricing is required to lay out a quotation")
    settings = settings or get_settings()
    symbol = settings.currency_symbol
    personal = state.personal_info
    vehicle = state.vehicle_info
    coverage = state.coverage_info
    pricing = state.pricing

    engine = vehicle.engine_type.value.capitalize() if vehicle.engine_type else None
    add_ons = coverage.add_ons.selected_labels

    pricing_lines = [
        DocumentLine(text="Base Premium:", amount=format_money(pricing.base_premium, symbol))
    ]
    optional_lines: list[tuple[str, Decimal]] = [
        ("Vehicle Age Factor:", pricing.age_factor),
        ("Roadside Assistance:", pricing.roadside_assistance),
        ("Theft Cover:", pricing.theft_cover),
        ("Windscreen Cover:", pricing.windscreen_cover),
    ]
    for label, amount in optional_lines:
        if amount > 0:
            pricing_lines.append(DocumentLine(text=label, amount=format_money(amount, symbol)))

    months = coverage.duration.value if coverage.duration else "1"
    pricing_lines.append(
        DocumentLine(
            text="Monthly Total:",
            amount=format_money(pricing.monthly_total, symbol),
            style="total",
        )
    )
    pricing_lines.append(
        DocumentLine(
            text=f"Total Amount ({months} months):",
            amount=format_money(pricing.total_amount, symbol),
            style="grand_total",
        )
    )

    return [
        DocumentSection(
            title="Personal Information",
            lines=[
                DocumentLine(text=f"Name: {_or_na(personal.full_name)}"),
                DocumentLine(text=f"NRC/Passport: {_or_na(personal.nrc_passport)}"),
                DocumentLine(text=f"Phone: {_or_na(personal.phone_number)}"),
                DocumentLine(text=f"Email: {_or_na(personal.email)}"),
            ],
        ),
        DocumentSection(
            title="Vehicle Information",
            lines=[
                DocumentLine(
                    text=f"Make & Model: {_make_label(vehicle.make)} {_or_na(vehicle.model)}"
                ),
                DocumentLine(text=f"Year: {_or_na(vehicle.year)}"),
                DocumentLine(text=f"Registration: {_or_na(vehicle.registration_number)}"),
                DocumentLine(text=f"Engine Type: {_or_na(engine)}"),
            ],
        ),
        DocumentSection(
            title="Coverage Information",
            lines=[
                DocumentLine(
                    text="Coverage Type: "
                    + (coverage.type.label if coverage.type else NOT_AVAILABLE)
                ),
                DocumentLine(
                    text="Duration: "
                    + (coverage.duration.value if coverage.duration else NOT_AVAILABLE)
                    + " months"
                ),
                DocumentLine(text=f"Add-ons: {', '.join(add_ons) if add_ons else 'None'}"),
            ],
        ),
        DocumentSection(title="Pricing Breakdown", lines=pricing_lines),
    ]


@beartype
def footer_lines(settings: Settings | None = None) -> list[str]:
    settings = settings or get_settings()
    return [
        f"This quote is valid for {settings.quote_validity_days} days from the date of issue.",
        "For more information, contact us at "
        f"{settings.company_phone} or {settings.company_email}",
        f"{settings.company_name} - Making motor insurance accessible and transparent.",
    ]


def _render_pdf(
    sections: list[DocumentSection],
    number: str,
    issued_on: date,
    settings: Settings,
) -> bytes:
    buffer = io.BytesIO()
    page_width, page_height = A4
    c = canvas.Canvas(buffer, pagesize=A4)
    c.setTitle(f"{settings.company_name} Quotation {number}")

    def Y(top_mm: float) -> float:
        """Convert a distance from the top edge into reportlab's y."""
        return page_height - top_mm * mm

    # Header band
    c.setFillColorRGB(*PRIMARY)
    c.rect(0, Y(30), page_width, 30 * mm, stroke=0, fill=1)
    c.setFillColorRGB(1, 1, 1)
    c.setFont("Helvetica-Bold", 24)
    c.drawString(20 * mm, Y(20), settings.company_name)
    c.setFont("Helvetica", 12)
    c.drawString(20 * mm, Y(26), "Motor Insurance Quotation")

    c.setFillColorRGB(*TEXT)
    c.setFont("Helvetica", 10)
    c.drawString(140 * mm, Y(40), f"Quote #: {number}")
    c.drawString(140 * mm, Y(45), f"Date: {issued_on.strftime('%d/%m/%Y')}")

    y = 60.0
    for section in sections:
        if section.title == "Pricing Breakdown":
            panel_height = 25 + 5 * len(section.lines) + 10
            c.setFillColorRGB(*PANEL)
            c.rect(15 * mm, Y(y - 5 + panel_height), 180 * mm, panel_height * mm, stroke=0, fill=1)
            c.setFillColorRGB(*PRIMARY)
        else:
            c.setFillColorRGB(*TEXT)
        c.setFont("Helvetica-Bold", 14)
        c.drawString(20 * mm, Y(y + 5 if section.title == "Pricing Breakdown" else y), section.title)
        y += 15 if section.title == "Pricing Breakdown" else 10

        for line in section.lines:
            c.setFillColorRGB(*TEXT)
            size = 10
            font = "Helvetica"
            if line.style == "total":
                y += 5
                c.setLineWidth(0.5)
                c.line(20 * mm, Y(y), 180 * mm, Y(y))
                y += 8
                font = "Helvetica-Bold"
            elif line.style == "grand_total":
                y += 3
                c.setFillColorRGB(*SECONDARY)
                font, size = "Helvetica-Bold", 12
            c.setFont(font, size)
            c.drawString(20 * mm, Y(y), line.text)
            if line.amount is not None:
                c.drawString(150 * mm, Y(y), line.amount)
            y += 5
        y += 15

    c.setFillColorRGB(*TEXT)
    c.setFont("Helvetica", 8)
    y = 270.0
    for text in footer_lines(settings):
        c.drawString(20 * mm, Y(y), text)
        y += 4

    c.showPage()
    c.save()
    return buffer.getvalue()


@beartype
def build_quote_document(
    state: QuoteState,
    *,
    issued_on: date | None = None,
    settings: Settings | None = None,
) -> Result[QuoteDocument, str]:
    """Render the quotation PDF for ``state``.

    Args:
        state: Wizard state; pricing must be present
        issued_on: Issue date printed on the document (defaults to today)
        settings: Company details and currency

    Returns:
        Result containing the document or a message for the user
    """
    if state.pricing is None:
        return Err(INCOMPLETE_QUOTE_MESSAGE)

    settings = settings or get_settings()
    issued_on = issued_on or date.today()
    number = quote_number()

    try:
        content = _render_pdf(document_sections(state, settings), number, issued_on, settings)
    except Exception:
        logger.exception("Failed to render quotation %s", number)
        return Err(RENDER_FAILED_MESSAGE)

    filename = quote_filename(state.personal_info.full_name, issued_on)
    logger.info("Rendered quotation %s (%d bytes)", number, len(content))
    return Ok(QuoteDocument(filename=filename, content=content))


@beartype
def write_document(document: QuoteDocument, directory: str | Path | None = None) -> Path:
    """Write ``document`` into ``directory`` (the export dir by default)."""
    target_dir = Path(directory or get_settings().export_dir)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / Path(document.filename).name
    path.write_bytes(document.content)
    logger.info("Saved quotation to %s", path)
    return path


@beartype
def compose_email_draft(
    state: QuoteState, settings: Settings | None = None
) -> Result[EmailDraft, str]:
    """Build the email the applicant can send to themselves."""
    email = state.personal_info.email
    if not email:
        return Err(EMAIL_REQUIRED_MESSAGE)
    if state.pricing is None:
        return Err(INCOMPLETE_QUOTE_MESSAGE)

    settings = settings or get_settings()
    symbol = settings.currency_symbol
    vehicle = state.vehicle_info
    coverage = state.coverage_info

    subject = f"Your {settings.company_name} Insurance Quote"
    body = "\n".join(
        [
            f"Dear {state.personal_info.full_name or 'Customer'},",
            "",
            f"Thank you for using {settings.company_name} to get your motor insurance quote.",
            "",
            "Here are your quote details:",
            "",
            f"Vehicle: {_make_label(vehicle.make)} {_or_na(vehicle.model)} ({_or_na(vehicle.year)})",
            f"Registration: {_or_na(vehicle.registration_number)}",
            f"Coverage: {coverage.type.label if coverage.type else NOT_AVAILABLE}",
            f"Duration: {coverage.duration.value if coverage.duration else NOT_AVAILABLE} months",
            "",
            f"Total Premium: {format_money(state.pricing.total_amount, symbol)}",
            f"Monthly Premium: {format_money(state.pricing.monthly_total, symbol)}",
            "",
            f"This quote is valid for {settings.quote_validity_days} days. "
            "To proceed with purchasing this insurance policy, please contact us at:",
            f"Phone: {settings.company_phone}",
            f"Email: {settings.company_email}",
            "",
            "Best regards,",
            f"The {settings.company_name} Team",
        ]
    )
    mailto_url = f"mailto:{email}?subject={quote(subject, safe='')}&body={quote(body, safe='')}"
    return Ok(EmailDraft(recipient=email, subject=subject, body=body, mailto_url=mailto_url))

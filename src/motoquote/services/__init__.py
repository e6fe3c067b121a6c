# MotoQuote - Motor Insurance Quote Wizard
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.


"""Business services for quote pricing, wizard flow and document output."""

from .document_export import (
    EmailDraft,
    QuoteDocument,
    build_quote_document,
    compose_email_draft,
    write_document,
)
from .pricing import compute_pricing, format_money
from .quote_records import QuoteRecordStore, SavedQuote
from .quote_store import QuoteStore
from .quote_wizard import WIZARD_STEPS, QuoteWizardService, WizardStep
from .validation import (
    FieldError,
    validate_coverage_info,
    validate_personal_info,
    validate_vehicle_info,
)

__all__ = [
    "EmailDraft",
    "FieldError",
    "QuoteDocument",
    "QuoteRecordStore",
    "QuoteStore",
    "QuoteWizardService",
    "SavedQuote",
    "WIZARD_STEPS",
    "WizardStep",
    "build_quote_document",
    "compose_email_draft",
    "compute_pricing",
    "format_money",
    "validate_coverage_info",
    "validate_personal_info",
    "validate_vehicle_info",
    "write_document",
]

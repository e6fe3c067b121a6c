# MotoQuote - Motor Insurance Quote Wizard
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.


"""FastAPI dependencies for storage, wizard sessions and quote records."""

from typing import Annotated
from uuid import UUID

from beartype import beartype
from fastapi import Depends, Request

from ..core.cache import CacheBackend
from ..core.cache import get_cache as get_process_cache
from ..core.config import Settings, get_settings
from ..services.quote_records import QuoteRecordStore
from ..services.quote_store import QuoteStore
from ..services.quote_wizard import QuoteWizardService


@beartype
async def get_cache() -> CacheBackend:
    """Provide the progress slot backend for dependency injection."""
    return get_process_cache()


@beartype
def session_key(settings: Settings, session_id: UUID) -> str:
    """Slot key holding one wizard session's progress."""
    return f"{settings.progress_key}:{session_id}"


@beartype
async def get_wizard_service(
    session_id: UUID,
    cache: Annotated[CacheBackend, Depends(get_cache)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> QuoteWizardService:
    """Provide a wizard bound to ``session_id`` with its progress restored.

    Args:
        session_id: Wizard session from the request path
        cache: Progress slot backend
        settings: Application settings

    Returns:
        QuoteWizardService: Loaded wizard for the session
    """
    store = QuoteStore(cache, key=session_key(settings, session_id))
    wizard = QuoteWizardService(store)
    await wizard.load()
    return wizard


@beartype
async def get_quote_records(request: Request) -> QuoteRecordStore:
    """Provide the application's quote record store."""
    return request.app.state.quote_records

"""In-memory record keeping for finalized quotes."""

import secrets
import string
import time

from beartype import beartype
from pydantic import Field

from ..core.logging_utils import get_logger
from ..models.base import BaseModelConfig
from ..models.quote import Quote

logger = get_logger(__name__)

_BASE36 = string.digits + string.ascii_lowercase
ID_SUFFIX_LENGTH = 9


@beartype
class SavedQuote(BaseModelConfig):
    """A quote together with its assigned record id."""

    id: str = Field(..., min_length=1)
    quote: Quote


@beartype
def generate_quote_id(now_ms: int | None = None) -> str:
    """Epoch milliseconds followed by nine random base-36 characters."""
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    suffix = "".join(secrets.choice(_BASE36) for _ in range(ID_SUFFIX_LENGTH))
    return f"{now_ms}{suffix}"


class QuoteRecordStore:
    """Keeps saved quotes for the lifetime of the process."""

    def __init__(self) -> None:
        self._quotes: dict[str, Quote] = {}

    def __len__(self) -> int:
        return len(self._quotes)

    @beartype
    async def save_quote(self, quote: Quote) -> SavedQuote:
        quote_id = generate_quote_id()
        while quote_id in self._quotes:
            quote_id = generate_quote_id()
        self._quotes[quote_id] = quote
        logger.info("Saved quote %s", quote_id)
        return SavedQuote(id=quote_id, quote=quote)

    @beartype
    async def get_quote(self, quote_id: str) -> Quote | None:
        return self._quotes.get(quote_id)

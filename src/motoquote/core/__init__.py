# MotoQuote - Motor Insurance Quote Wizard
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Core infrastructure components for MotoQuote."""

from .cache import Cache, CacheBackend, get_cache
from .cache_stub import MemoryCache
from .config import Settings, get_settings
from .result_types import Err, Ok, Result

__all__ = [
    "Cache",
    "CacheBackend",
    "MemoryCache",
    "Settings",
    "get_cache",
    "get_settings",
    "Ok",
    "Err",
    "Result",
]

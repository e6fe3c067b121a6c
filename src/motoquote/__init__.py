# MotoQuote - Motor Insurance Quote Wizard
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""MotoQuote - motor insurance quote wizard backend."""

__version__ = "1.0.0"

__all__ = ["__version__"]

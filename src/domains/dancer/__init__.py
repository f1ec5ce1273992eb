# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Dancer domain package.

This package provides the dancer directory and dance style proficiencies.
"""

from src.domains.dancer.service import (
    DancerEmailExistsError,
    DancerNotFoundError,
    DancerService,
    DancerServiceError,
    DancerStyleExistsError,
    DancerStyleNotFoundError,
)

__all__ = [
    "DancerService",
    "DancerServiceError",
    "DancerNotFoundError",
    "DancerEmailExistsError",
    "DancerStyleNotFoundError",
    "DancerStyleExistsError",
]

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Session domain package.

This package provides course session scheduling functionality including:
- Sessions bounded by their course's dates
- Cancellation and reinstatement
"""

from src.domains.session.service import (
    CourseNotFoundError,
    InvalidTimeRangeError,
    SessionNotFoundError,
    SessionOutOfBoundsError,
    SessionService,
    SessionServiceError,
    validate_session_window,
)

__all__ = [
    "SessionService",
    "SessionServiceError",
    "CourseNotFoundError",
    "SessionNotFoundError",
    "InvalidTimeRangeError",
    "SessionOutOfBoundsError",
    "validate_session_window",
]

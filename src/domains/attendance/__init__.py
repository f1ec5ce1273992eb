# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Attendance domain package.

This package records per-session attendance of enrolled dancers.
"""

from src.domains.attendance.service import (
    AttendanceConflictError,
    AttendanceNotFoundError,
    AttendanceService,
    AttendanceServiceError,
    CourseNotFoundError,
    NotEnrolledError,
    SessionNotFoundError,
)

__all__ = [
    "AttendanceService",
    "AttendanceServiceError",
    "SessionNotFoundError",
    "CourseNotFoundError",
    "AttendanceNotFoundError",
    "NotEnrolledError",
    "AttendanceConflictError",
]

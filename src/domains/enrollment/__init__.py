# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment domain package.

This package provides course enrollment management functionality including:
- Capacity-checked enrollment of dancers
- Enrollment updates and deletion with seat accounting
- Enrollment queries
"""

from src.domains.enrollment.service import (
    SEAT_RELEASING_STATUSES,
    AlreadyEnrolledError,
    CourseFullError,
    CourseNotFoundError,
    EnrollmentNotFoundError,
    EnrollmentService,
    EnrollmentServiceError,
)

__all__ = [
    "EnrollmentService",
    "EnrollmentServiceError",
    "CourseNotFoundError",
    "EnrollmentNotFoundError",
    "CourseFullError",
    "AlreadyEnrolledError",
    "SEAT_RELEASING_STATUSES",
]

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course domain package.

This package provides course catalog management functionality including:
- Course CRUD with unique names
- Course creation with inline sessions
- Filtered course listing
"""

from src.domains.course.service import (
    CourseNameExistsError,
    CourseNotFoundError,
    CourseService,
    CourseServiceError,
    InvalidCourseDatesError,
)

__all__ = [
    "CourseService",
    "CourseServiceError",
    "CourseNotFoundError",
    "CourseNameExistsError",
    "InvalidCourseDatesError",
]

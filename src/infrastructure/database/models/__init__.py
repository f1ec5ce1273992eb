# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy ORM models for the course service.

Importing this package registers every table on Base.metadata.
"""

from src.infrastructure.database.models.base import (
    SYSTEM_ACTOR,
    AuditMixin,
    Base,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)
from src.infrastructure.database.models.course import (
    Course,
    CourseEnrollment,
    CourseSession,
    SessionAttendance,
)
from src.infrastructure.database.models.dancer import Dancer, DancerStyle

__all__ = [
    # Base
    "Base",
    "UUIDPrimaryKeyMixin",
    "TimestampMixin",
    "AuditMixin",
    "SYSTEM_ACTOR",
    # Course
    "Course",
    "CourseSession",
    "CourseEnrollment",
    "SessionAttendance",
    # Dancer
    "Dancer",
    "DancerStyle",
]

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shared enumerations and response envelopes.

Enum values are the lowercase strings stored in the database.
"""

import math
from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class EnrollmentStatus(str, Enum):
    """Lifecycle state of a course enrollment."""

    ACTIVE = "active"
    COMPLETED = "completed"
    DROPPED = "dropped"
    WAITLISTED = "waitlisted"
    CANCELED = "canceled"


class PaymentStatus(str, Enum):
    """Payment state of a course enrollment."""

    PENDING = "pending"
    PAID = "paid"
    PARTIALLY_PAID = "partially_paid"
    REFUNDED = "refunded"
    FAILED = "failed"


class AttendanceStatus(str, Enum):
    """Attendance outcome for one dancer at one session."""

    UNKNOWN = "unknown"
    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    EXCUSED = "excused"


class DanceStyle(str, Enum):
    BALLET = "ballet"
    CONTEMPORARY = "contemporary"
    JAZZ = "jazz"
    HIP_HOP = "hip_hop"
    TAP = "tap"
    BALLROOM = "ballroom"
    LATIN = "latin"
    SALSA = "salsa"
    BREAKDANCE = "breakdance"
    FOLK = "folk"
    MODERN = "modern"
    SWING = "swing"
    LYRICAL = "lyrical"
    OTHER = "other"


class DifficultyLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    ALL_LEVELS = "all_levels"


class Gender(str, Enum):
    UNSPECIFIED = "unspecified"
    MALE = "male"
    FEMALE = "female"
    NON_BINARY = "non_binary"
    OTHER = "other"


class ExperienceLevel(str, Enum):
    """Dancer experience, ordered from least to most experienced."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    PROFESSIONAL = "professional"

    @classmethod
    def at_least(cls, minimum: "ExperienceLevel") -> list[str]:
        """Values at or above the given level."""
        levels = list(cls)
        return [level.value for level in levels[levels.index(minimum):]]


ProficiencyLevel = ExperienceLevel


class ApiResponse(BaseModel, Generic[T]):
    """Envelope for single-item responses."""

    success: bool = Field(default=True, description="Whether the operation succeeded")
    message: str | None = Field(default=None, description="Human-readable outcome")
    data: T | None = Field(default=None, description="Response payload")


class PagedResponse(BaseModel, Generic[T]):
    """Envelope for paginated list responses."""

    items: list[T] = Field(default_factory=list, description="Items on this page")
    total_count: int = Field(..., description="Total matching items")
    page: int = Field(..., description="1-based page number")
    page_size: int = Field(..., description="Items per page")
    total_pages: int = Field(..., description="Number of pages")
    has_next_page: bool = Field(..., description="Whether a later page exists")
    has_previous_page: bool = Field(..., description="Whether an earlier page exists")

    @classmethod
    def create(
        cls,
        items: list[T],
        total_count: int,
        page: int,
        page_size: int,
    ) -> "PagedResponse[T]":
        """Build a page envelope from items and the total count."""
        total_pages = math.ceil(total_count / page_size) if page_size > 0 else 0
        return cls(
            items=items,
            total_count=total_count,
            page=page,
            page_size=page_size,
            total_pages=total_pages,
            has_next_page=page < total_pages,
            has_previous_page=page > 1,
        )

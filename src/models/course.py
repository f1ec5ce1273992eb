# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course request/response schemas.

Date ordering (end after start) is checked by the course service so the
API reports it as a 400 rather than a schema error.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from src.models.common import DanceStyle, DifficultyLevel
from src.models.session import SessionCreateRequest, SessionResponse


class CourseCreateRequest(BaseModel):
    """Request to create a course."""

    name: str = Field(..., min_length=1, max_length=100, description="Unique course name")
    description: str | None = Field(None, max_length=1000, description="Course description")
    dance_style: DanceStyle = Field(..., description="Dance style taught")
    difficulty_level: DifficultyLevel = Field(..., description="Target level")
    start_date: datetime = Field(..., description="Course start")
    end_date: datetime = Field(..., description="Course end, after start")
    duration_minutes: int = Field(..., ge=10, le=240, description="Nominal session length")
    capacity: int = Field(..., ge=1, le=100, description="Maximum number of enrollments")
    location: str | None = Field(None, max_length=200, description="Default location")
    instructor_id: UUID | None = Field(None, description="Instructor user ID")
    instructor_name: str | None = Field(None, max_length=200, description="Instructor name")
    price: Decimal = Field(Decimal("0"), ge=0, le=10000, decimal_places=2, description="Price")
    currency: str = Field("USD", min_length=3, max_length=3, description="ISO currency code")
    sessions: list[SessionCreateRequest] | None = Field(
        None,
        description="Sessions created together with the course",
    )


class CourseUpdateRequest(BaseModel):
    """Request to update a course. Only provided fields are applied."""

    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=1000)
    dance_style: DanceStyle | None = None
    difficulty_level: DifficultyLevel | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    duration_minutes: int | None = Field(None, ge=10, le=240)
    capacity: int | None = Field(None, ge=1, le=100)
    location: str | None = Field(None, max_length=200)
    instructor_id: UUID | None = None
    instructor_name: str | None = Field(None, max_length=200)
    is_active: bool | None = None
    price: Decimal | None = Field(None, ge=0, le=10000, decimal_places=2)
    currency: str | None = Field(None, min_length=3, max_length=3)


class CourseResponse(BaseModel):
    """Course details with derived capacity and time fields."""

    id: str
    name: str
    description: str | None = None
    dance_style: DanceStyle
    difficulty_level: DifficultyLevel
    start_date: datetime
    end_date: datetime
    duration_minutes: int
    capacity: int
    enrollment_count: int
    location: str | None = None
    instructor_id: str | None = None
    instructor_name: str | None = None
    is_active: bool
    price: Decimal
    currency: str
    is_full: bool = Field(..., description="Whether enrollment_count has reached capacity")
    has_started: bool
    has_ended: bool
    created_at: datetime
    created_by: str | None = None
    updated_at: datetime | None = None
    updated_by: str | None = None
    sessions: list[SessionResponse] = Field(default_factory=list)


class CourseFilter(BaseModel):
    """Filters for course listing."""

    search: str | None = Field(None, description="Substring of name, description or instructor")
    dance_style: DanceStyle | None = None
    difficulty_level: DifficultyLevel | None = None
    is_active: bool | None = None
    start_date_from: datetime | None = None
    start_date_to: datetime | None = None
    instructor_id: UUID | None = None
    has_available_spots: bool | None = Field(
        None,
        description="Only courses with enrollment_count below capacity",
    )
    future_only: bool | None = Field(None, description="Only courses that have not ended")

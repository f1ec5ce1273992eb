# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course session request/response schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from src.models.attendance import AttendanceResponse


class SessionCreateRequest(BaseModel):
    """Request to schedule a session inside a course."""

    start_datetime: datetime = Field(..., description="Session start")
    end_datetime: datetime = Field(..., description="Session end, after start")
    location: str | None = Field(
        None,
        max_length=200,
        description="Session location, defaults to the course location",
    )
    notes: str | None = Field(None, max_length=500, description="Session notes")


class SessionUpdateRequest(BaseModel):
    """Request to update a session. Only provided fields are applied.

    Setting is_canceled to false clears any cancellation reason, including
    one sent in the same request.
    """

    start_datetime: datetime | None = Field(None, description="New session start")
    end_datetime: datetime | None = Field(None, description="New session end")
    location: str | None = Field(None, max_length=200, description="New location")
    notes: str | None = Field(None, max_length=500, description="New notes")
    is_canceled: bool | None = Field(None, description="Cancel or reinstate the session")
    cancellation_reason: str | None = Field(
        None,
        max_length=500,
        description="Reason stored when canceling",
    )


class SessionResponse(BaseModel):
    """Course session details with derived time fields."""

    id: str
    course_id: str
    start_datetime: datetime
    end_datetime: datetime
    location: str | None = None
    notes: str | None = None
    is_canceled: bool
    cancellation_reason: str | None = None
    duration_minutes: int = Field(..., description="Whole minutes between start and end")
    has_started: bool
    has_ended: bool
    created_at: datetime
    created_by: str | None = None
    updated_at: datetime | None = None
    updated_by: str | None = None
    attendances: list[AttendanceResponse] | None = Field(
        None,
        description="Attendance records, present only when requested",
    )

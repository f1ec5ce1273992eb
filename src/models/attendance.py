# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Session attendance request/response schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from src.models.common import AttendanceStatus


class RecordAttendanceRequest(BaseModel):
    """Request to record or overwrite a dancer's attendance."""

    status: AttendanceStatus = Field(..., description="Attendance outcome")
    notes: str | None = Field(
        None,
        max_length=500,
        description="Notes, left unchanged on overwrite when omitted",
    )


class AttendanceResponse(BaseModel):
    """Attendance record for one dancer at one session."""

    id: str
    session_id: str
    dancer_id: str
    dancer_name: str
    status: AttendanceStatus
    recorded_at: datetime | None = None
    notes: str | None = None

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course enrollment request/response schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from src.models.common import EnrollmentStatus, PaymentStatus


class EnrollmentCreateRequest(BaseModel):
    """Request to enroll a dancer in a course.

    Name and e-mail are stored as a snapshot of the dancer at enrollment time.
    """

    dancer_id: UUID = Field(..., description="Dancer ID")
    dancer_name: str = Field(..., min_length=1, max_length=200, description="Dancer name")
    dancer_email: str | None = Field(None, max_length=255, description="Dancer e-mail")
    status: EnrollmentStatus = Field(EnrollmentStatus.ACTIVE, description="Initial status")
    payment_status: PaymentStatus = Field(PaymentStatus.PENDING, description="Payment state")
    amount_paid: Decimal = Field(Decimal("0"), ge=0, le=10000, decimal_places=2)
    notes: str | None = Field(None, max_length=500)


class EnrollmentUpdateRequest(BaseModel):
    """Request to update an enrollment. Only provided fields are applied."""

    status: EnrollmentStatus | None = None
    payment_status: PaymentStatus | None = None
    amount_paid: Decimal | None = Field(None, ge=0, le=10000, decimal_places=2)
    notes: str | None = Field(None, max_length=500)


class EnrollmentResponse(BaseModel):
    """Enrollment details."""

    id: str
    course_id: str
    course_name: str
    dancer_id: str
    dancer_name: str
    dancer_email: str | None = None
    enrollment_date: datetime
    status: EnrollmentStatus
    payment_status: PaymentStatus
    amount_paid: Decimal
    notes: str | None = None
    created_at: datetime
    created_by: str | None = None
    updated_at: datetime | None = None
    updated_by: str | None = None


class EnrollmentFilter(BaseModel):
    """Filters for enrollment listing."""

    course_id: UUID | None = None
    dancer_id: UUID | None = None
    status: EnrollmentStatus | None = None
    payment_status: PaymentStatus | None = None
    enrollment_date_from: datetime | None = None
    enrollment_date_to: datetime | None = None
    search: str | None = Field(None, description="Substring of dancer name or e-mail")

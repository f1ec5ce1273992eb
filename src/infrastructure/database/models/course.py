# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course, session, enrollment and attendance models.

Relationships cascade at the database level:
- courses -> course_sessions, course_enrollments
- course_sessions -> session_attendances

Dancer references (dancer_id plus name snapshot) are not foreign keys:
dancers live in their own directory and are copied at enrollment time.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.infrastructure.database.models.base import AuditMixin, Base, UUIDPrimaryKeyMixin
from src.utils.datetime import has_passed, utc_now, whole_minutes_between


class Course(UUIDPrimaryKeyMixin, AuditMixin, Base):
    """A scheduled dance course with a capacity and a date range.

    enrollment_count is a denormalized counter maintained by the
    enrollment service with conditional UPDATE statements.
    """

    __tablename__ = "courses"

    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    dance_style: Mapped[str] = mapped_column(String(30), nullable=False, default="other")
    difficulty_level: Mapped[str] = mapped_column(String(30), nullable=False, default="all_levels")
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    enrollment_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    location: Mapped[str | None] = mapped_column(String(200), nullable=True)
    instructor_id: Mapped[str | None] = mapped_column(Uuid(as_uuid=False), nullable=True)
    instructor_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")

    sessions: Mapped[list[CourseSession]] = relationship(
        back_populates="course",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="CourseSession.start_datetime",
    )
    enrollments: Mapped[list[CourseEnrollment]] = relationship(
        back_populates="course",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint("enrollment_count >= 0", name="ck_courses_enrollment_count_non_negative"),
        Index("ix_courses_start_end", "start_date", "end_date"),
    )

    @property
    def is_full(self) -> bool:
        """Whether every seat is taken."""
        return self.enrollment_count >= self.capacity

    @property
    def has_started(self) -> bool:
        return has_passed(self.start_date)

    @property
    def has_ended(self) -> bool:
        return has_passed(self.end_date)


class CourseSession(UUIDPrimaryKeyMixin, AuditMixin, Base):
    """A single scheduled occurrence within a course's date range."""

    __tablename__ = "course_sessions"

    course_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    start_datetime: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_datetime: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    location: Mapped[str | None] = mapped_column(String(200), nullable=True)
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)
    is_canceled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    cancellation_reason: Mapped[str | None] = mapped_column(String(500), nullable=True)

    course: Mapped[Course] = relationship(back_populates="sessions")
    attendances: Mapped[list[SessionAttendance]] = relationship(
        back_populates="session",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="SessionAttendance.dancer_name",
    )

    __table_args__ = (
        Index("ix_course_sessions_start_end", "start_datetime", "end_datetime"),
    )

    @property
    def duration_minutes(self) -> int:
        return whole_minutes_between(self.start_datetime, self.end_datetime)

    @property
    def has_started(self) -> bool:
        return has_passed(self.start_datetime)

    @property
    def has_ended(self) -> bool:
        return has_passed(self.end_datetime)


class CourseEnrollment(UUIDPrimaryKeyMixin, AuditMixin, Base):
    """A dancer's enrollment in a course.

    dancer_name and dancer_email are snapshots taken at enrollment time.
    """

    __tablename__ = "course_enrollments"

    course_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
    )
    dancer_id: Mapped[str] = mapped_column(Uuid(as_uuid=False), nullable=False, index=True)
    dancer_name: Mapped[str] = mapped_column(String(200), nullable=False)
    dancer_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    enrollment_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    payment_status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    amount_paid: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)

    course: Mapped[Course] = relationship(back_populates="enrollments")

    __table_args__ = (
        UniqueConstraint("course_id", "dancer_id", name="uq_course_enrollments_course_dancer"),
    )


class SessionAttendance(UUIDPrimaryKeyMixin, AuditMixin, Base):
    """Attendance of one dancer at one session."""

    __tablename__ = "session_attendances"

    session_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("course_sessions.id", ondelete="CASCADE"),
        nullable=False,
    )
    dancer_id: Mapped[str] = mapped_column(Uuid(as_uuid=False), nullable=False)
    dancer_name: Mapped[str] = mapped_column(String(200), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="unknown")
    recorded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)

    session: Mapped[CourseSession] = relationship(back_populates="attendances")

    __table_args__ = (
        UniqueConstraint("session_id", "dancer_id", name="uq_session_attendances_session_dancer"),
    )

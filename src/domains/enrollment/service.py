# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment service for managing dancer course enrollments.

This module provides the EnrollmentService class for:
- Enrolling dancers in courses within capacity
- Updating and deleting enrollments
- Enrollment queries by course, by dancer and with filters

Course.enrollment_count is changed only through conditional UPDATE
statements so concurrent requests can neither overshoot capacity nor drive
the counter below zero. The (course_id, dancer_id) unique constraint closes
the race between the duplicate check and the insert.
"""

from __future__ import annotations

import logging

from sqlalchemy import or_, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import contains_eager, selectinload

from src.core.config import get_settings
from src.infrastructure.database.models import Course, CourseEnrollment
from src.infrastructure.database.repository import Repository
from src.models.common import EnrollmentStatus, PagedResponse
from src.models.enrollment import (
    EnrollmentCreateRequest,
    EnrollmentFilter,
    EnrollmentResponse,
    EnrollmentUpdateRequest,
)
from src.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)

# Under the active_only policy these statuses do not hold a seat.
SEAT_RELEASING_STATUSES = frozenset(
    {EnrollmentStatus.DROPPED.value, EnrollmentStatus.CANCELED.value}
)


class EnrollmentServiceError(Exception):
    """Base exception for enrollment service errors."""

    pass


class CourseNotFoundError(EnrollmentServiceError):
    """Raised when course is not found."""

    pass


class EnrollmentNotFoundError(EnrollmentServiceError):
    """Raised when enrollment is not found."""

    pass


class CourseFullError(EnrollmentServiceError):
    """Raised when the course has no free seat."""

    pass


class AlreadyEnrolledError(EnrollmentServiceError):
    """Raised when the dancer is already enrolled in the course."""

    pass


class EnrollmentService:
    """Service for managing course enrollments.

    Attributes:
        db: Async database session.
        capacity_policy: "ever_enrolled" (every row holds a seat) or
            "active_only" (dropped and canceled rows release theirs).
    """

    def __init__(self, db: AsyncSession, capacity_policy: str | None = None) -> None:
        """Initialize enrollment service.

        Args:
            db: Async database session.
            capacity_policy: Overrides the configured capacity policy.
        """
        self.db = db
        self.capacity_policy = capacity_policy or get_settings().enrollment.capacity_policy
        self.courses = Repository(db, Course)
        self.enrollments = Repository(db, CourseEnrollment)

    async def create_enrollment(
        self,
        course_id: str,
        request: EnrollmentCreateRequest,
        created_by: str | None = None,
    ) -> EnrollmentResponse:
        """Enroll a dancer in a course.

        The seat claim and the insert are committed together; any failure
        rolls both back.

        Args:
            course_id: Course identifier.
            request: Dancer snapshot and enrollment details.
            created_by: Actor name for the audit columns.

        Returns:
            Created enrollment.

        Raises:
            CourseNotFoundError: If course not found.
            CourseFullError: If the course has no free seat.
            AlreadyEnrolledError: If the dancer is already enrolled.
        """
        course = await self._get_course(course_id)

        if course.is_full:
            raise CourseFullError(f"Course '{course.name}' is full")

        if await self.is_enrolled(course.id, str(request.dancer_id)):
            raise AlreadyEnrolledError("Dancer is already enrolled in this course")

        enrollment = CourseEnrollment(
            course_id=course.id,
            dancer_id=str(request.dancer_id),
            dancer_name=request.dancer_name,
            dancer_email=request.dancer_email,
            enrollment_date=utc_now(),
            status=request.status.value,
            payment_status=request.payment_status.value,
            amount_paid=request.amount_paid,
            notes=request.notes,
        )
        enrollment.stamp_created(created_by)

        try:
            if self._holds_seat(enrollment.status):
                await self._claim_seat(course)
            self.enrollments.add(enrollment)
            await self.db.flush()
        except CourseFullError:
            await self.db.rollback()
            raise
        except IntegrityError as e:
            await self.db.rollback()
            raise AlreadyEnrolledError("Dancer is already enrolled in this course") from e

        await self.db.commit()
        await self.db.refresh(course, attribute_names=["enrollment_count"])

        logger.info(
            "Enrollment created: course=%s, dancer=%s, count=%d/%d, by=%s",
            course.id,
            request.dancer_id,
            course.enrollment_count,
            course.capacity,
            enrollment.created_by,
        )

        return self._to_response(enrollment, course)

    async def update_enrollment(
        self,
        enrollment_id: str,
        request: EnrollmentUpdateRequest,
        updated_by: str | None = None,
    ) -> EnrollmentResponse:
        """Update an enrollment. Only provided fields are applied.

        Under the active_only policy a status change into dropped/canceled
        releases the seat and a change back out of them reclaims one.

        Raises:
            EnrollmentNotFoundError: If enrollment not found.
            CourseFullError: If a seat must be reclaimed but the course is full.
        """
        enrollment = await self._get_enrollment(enrollment_id)

        if request.status is not None and request.status.value != enrollment.status:
            held = self._holds_seat(enrollment.status)
            holds = self._holds_seat(request.status.value)
            if holds and not held:
                try:
                    await self._claim_seat(enrollment.course)
                except CourseFullError:
                    await self.db.rollback()
                    raise
            elif held and not holds:
                await self._release_seat(enrollment.course_id)
            enrollment.status = request.status.value

        if request.payment_status is not None:
            enrollment.payment_status = request.payment_status.value
        if request.amount_paid is not None:
            enrollment.amount_paid = request.amount_paid
        if request.notes is not None:
            enrollment.notes = request.notes

        enrollment.stamp_updated(updated_by)
        await self.db.commit()

        logger.info(
            "Enrollment updated: enrollment=%s, status=%s, payment=%s, by=%s",
            enrollment.id,
            enrollment.status,
            enrollment.payment_status,
            enrollment.updated_by,
        )

        return self._to_response(enrollment, enrollment.course)

    async def delete_enrollment(self, enrollment_id: str) -> None:
        """Delete an enrollment and free its seat.

        The counter decrement is floored at zero and committed together with
        the row delete.

        Raises:
            EnrollmentNotFoundError: If enrollment not found.
        """
        enrollment = await self._get_enrollment(enrollment_id)
        course_id = enrollment.course_id

        if self._holds_seat(enrollment.status):
            await self._release_seat(course_id)
        await self.enrollments.delete(enrollment)
        await self.db.commit()

        logger.info(
            "Enrollment deleted: enrollment=%s, course=%s, dancer=%s",
            enrollment_id,
            course_id,
            enrollment.dancer_id,
        )

    async def get_enrollment(self, enrollment_id: str) -> EnrollmentResponse:
        """Get an enrollment by ID.

        Raises:
            EnrollmentNotFoundError: If enrollment not found.
        """
        enrollment = await self._get_enrollment(enrollment_id)
        return self._to_response(enrollment, enrollment.course)

    async def list_for_course(self, course_id: str) -> list[EnrollmentResponse]:
        """List a course's enrollments ordered by dancer name.

        Raises:
            CourseNotFoundError: If course not found.
        """
        course = await self._get_course(course_id)

        query = (
            self.enrollments.select()
            .where(CourseEnrollment.course_id == course.id)
            .order_by(CourseEnrollment.dancer_name)
        )
        enrollments = await self.enrollments.fetch_all(query)
        return [self._to_response(e, course) for e in enrollments]

    async def list_for_dancer(self, dancer_id: str) -> list[EnrollmentResponse]:
        """List a dancer's enrollments, latest course start first."""
        query = (
            self.enrollments.select()
            .join(CourseEnrollment.course)
            .options(contains_eager(CourseEnrollment.course))
            .where(CourseEnrollment.dancer_id == dancer_id)
            .order_by(Course.start_date.desc())
        )
        enrollments = await self.enrollments.fetch_all(query)
        return [self._to_response(e, e.course) for e in enrollments]

    async def list_enrollments(
        self,
        filters: EnrollmentFilter,
        page: int = 1,
        page_size: int = 20,
    ) -> PagedResponse[EnrollmentResponse]:
        """List enrollments with filters, newest enrollment first.

        Args:
            filters: Course, dancer, status, payment, date range and
                dancer name/e-mail search filters.
            page: 1-based page number.
            page_size: Items per page.

        Returns:
            Page of enrollments.
        """
        conditions = []

        if filters.course_id:
            conditions.append(CourseEnrollment.course_id == str(filters.course_id))
        if filters.dancer_id:
            conditions.append(CourseEnrollment.dancer_id == str(filters.dancer_id))
        if filters.status:
            conditions.append(CourseEnrollment.status == filters.status.value)
        if filters.payment_status:
            conditions.append(CourseEnrollment.payment_status == filters.payment_status.value)
        if filters.enrollment_date_from:
            conditions.append(
                CourseEnrollment.enrollment_date >= ensure_utc(filters.enrollment_date_from)
            )
        if filters.enrollment_date_to:
            conditions.append(
                CourseEnrollment.enrollment_date <= ensure_utc(filters.enrollment_date_to)
            )
        if filters.search:
            search_pattern = f"%{filters.search}%"
            conditions.append(
                or_(
                    CourseEnrollment.dancer_name.ilike(search_pattern),
                    CourseEnrollment.dancer_email.ilike(search_pattern),
                )
            )

        query = (
            self.enrollments.select()
            .options(selectinload(CourseEnrollment.course))
            .where(*conditions)
            .order_by(CourseEnrollment.enrollment_date.desc())
        )
        enrollments, total = await self.enrollments.list_paged(query, page, page_size)

        return PagedResponse[EnrollmentResponse].create(
            items=[self._to_response(e, e.course) for e in enrollments],
            total_count=total,
            page=page,
            page_size=page_size,
        )

    async def is_enrolled(self, course_id: str, dancer_id: str) -> bool:
        """Check whether the dancer has an enrollment row in the course."""
        return await self.enrollments.exists(
            CourseEnrollment.course_id == course_id,
            CourseEnrollment.dancer_id == dancer_id,
        )

    async def find_enrollment(self, course_id: str, dancer_id: str) -> CourseEnrollment | None:
        """Get the dancer's enrollment row in the course, if any."""
        return await self.enrollments.find_one(
            CourseEnrollment.course_id == course_id,
            CourseEnrollment.dancer_id == dancer_id,
        )

    def _holds_seat(self, status: str) -> bool:
        if self.capacity_policy == "active_only":
            return status not in SEAT_RELEASING_STATUSES
        return True

    async def _claim_seat(self, course: Course) -> None:
        """Atomically take a seat if one is free.

        Raises:
            CourseFullError: If no row was updated.
        """
        stmt = (
            update(Course)
            .where(
                Course.id == course.id,
                Course.enrollment_count < Course.capacity,
            )
            .values(enrollment_count=Course.enrollment_count + 1)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)

        if result.rowcount == 0:
            raise CourseFullError(f"Course '{course.name}' is full")

    async def _release_seat(self, course_id: str) -> None:
        """Atomically give back a seat, never going below zero."""
        stmt = (
            update(Course)
            .where(Course.id == course_id, Course.enrollment_count > 0)
            .values(enrollment_count=Course.enrollment_count - 1)
            .execution_options(synchronize_session=False)
        )
        await self.db.execute(stmt)

    async def _get_course(self, course_id: str) -> Course:
        course = await self.courses.get(course_id)
        if not course:
            raise CourseNotFoundError(f"Course {course_id} not found")
        return course

    async def _get_enrollment(self, enrollment_id: str) -> CourseEnrollment:
        enrollment = await self.enrollments.get(
            enrollment_id,
            selectinload(CourseEnrollment.course),
        )
        if not enrollment:
            raise EnrollmentNotFoundError(f"Enrollment {enrollment_id} not found")
        return enrollment

    def _to_response(self, enrollment: CourseEnrollment, course: Course) -> EnrollmentResponse:
        return EnrollmentResponse(
            id=str(enrollment.id),
            course_id=str(enrollment.course_id),
            course_name=course.name,
            dancer_id=str(enrollment.dancer_id),
            dancer_name=enrollment.dancer_name,
            dancer_email=enrollment.dancer_email,
            enrollment_date=ensure_utc(enrollment.enrollment_date),
            status=enrollment.status,
            payment_status=enrollment.payment_status,
            amount_paid=enrollment.amount_paid,
            notes=enrollment.notes,
            created_at=ensure_utc(enrollment.created_at),
            created_by=enrollment.created_by,
            updated_at=ensure_utc(enrollment.updated_at),
            updated_by=enrollment.updated_by,
        )

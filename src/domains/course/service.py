# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course service for managing the course catalog.

This module provides the CourseService class for:
- Course CRUD operations with unique names
- Course creation with inline sessions
- Filtered, paginated course listing
"""

from __future__ import annotations

import logging

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.domains.session.service import SessionService, validate_session_window
from src.infrastructure.database.models import Course
from src.infrastructure.database.repository import Repository
from src.models.common import PagedResponse
from src.models.course import (
    CourseCreateRequest,
    CourseFilter,
    CourseResponse,
    CourseUpdateRequest,
)
from src.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)


class CourseServiceError(Exception):
    """Base exception for course service errors."""

    pass


class CourseNotFoundError(CourseServiceError):
    """Raised when course is not found."""

    pass


class CourseNameExistsError(CourseServiceError):
    """Raised when another course already uses the name."""

    pass


class InvalidCourseDatesError(CourseServiceError):
    """Raised when a course would end at or before its start."""

    pass


class CourseService:
    """Service for managing courses.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self.courses = Repository(db, Course)

    async def create_course(
        self,
        request: CourseCreateRequest,
        created_by: str | None = None,
    ) -> CourseResponse:
        """Create a new course, optionally with its sessions.

        Inline sessions are validated against the course dates and default
        to the course location.

        Args:
            request: Course creation data.
            created_by: Actor name for the audit columns.

        Returns:
            Created course with its sessions.

        Raises:
            CourseNameExistsError: If the name is taken.
            InvalidCourseDatesError: If end_date is not after start_date.
            InvalidTimeRangeError: If an inline session ends before it starts.
            SessionOutOfBoundsError: If an inline session leaves the course dates.
        """
        if await self.courses.exists(Course.name == request.name):
            raise CourseNameExistsError(f"A course named '{request.name}' already exists")

        start_date = ensure_utc(request.start_date)
        end_date = ensure_utc(request.end_date)
        if end_date <= start_date:
            raise InvalidCourseDatesError("End date must be after start date")

        course = Course(
            name=request.name,
            description=request.description,
            dance_style=request.dance_style.value,
            difficulty_level=request.difficulty_level.value,
            start_date=start_date,
            end_date=end_date,
            duration_minutes=request.duration_minutes,
            capacity=request.capacity,
            enrollment_count=0,
            location=request.location,
            instructor_id=str(request.instructor_id) if request.instructor_id else None,
            instructor_name=request.instructor_name,
            is_active=True,
            price=request.price,
            currency=request.currency.upper(),
            sessions=[],
        )
        course.stamp_created(created_by)

        inline_sessions = sorted(
            request.sessions or [],
            key=lambda s: ensure_utc(s.start_datetime),
        )
        for session_request in inline_sessions:
            validate_session_window(
                session_request.start_datetime,
                session_request.end_datetime,
                course,
            )
            course.sessions.append(
                SessionService.build_session(course, session_request, created_by)
            )

        self.courses.add(course)
        try:
            await self.db.flush()
        except IntegrityError as e:
            await self.db.rollback()
            raise CourseNameExistsError(f"A course named '{request.name}' already exists") from e

        await self.db.commit()

        logger.info(
            "Course created: id=%s, name=%s, capacity=%d, sessions=%d, by=%s",
            course.id,
            course.name,
            course.capacity,
            len(course.sessions),
            course.created_by,
        )

        return self._to_response(course)

    async def get_course(self, course_id: str) -> CourseResponse:
        """Get a course with its sessions.

        Raises:
            CourseNotFoundError: If course not found.
        """
        course = await self._get_course(course_id, with_sessions=True)
        return self._to_response(course)

    async def list_courses(
        self,
        filters: CourseFilter,
        page: int = 1,
        page_size: int = 20,
    ) -> PagedResponse[CourseResponse]:
        """List courses with filters, earliest start first.

        Args:
            filters: Search, style, level, activity, date, instructor,
                availability and future-only filters.
            page: 1-based page number.
            page_size: Items per page.

        Returns:
            Page of courses without their sessions.
        """
        conditions = []

        if filters.search:
            search_pattern = f"%{filters.search}%"
            conditions.append(
                or_(
                    Course.name.ilike(search_pattern),
                    Course.description.ilike(search_pattern),
                    Course.instructor_name.ilike(search_pattern),
                )
            )
        if filters.dance_style:
            conditions.append(Course.dance_style == filters.dance_style.value)
        if filters.difficulty_level:
            conditions.append(Course.difficulty_level == filters.difficulty_level.value)
        if filters.is_active is not None:
            conditions.append(Course.is_active == filters.is_active)
        if filters.start_date_from:
            conditions.append(Course.start_date >= ensure_utc(filters.start_date_from))
        if filters.start_date_to:
            conditions.append(Course.start_date <= ensure_utc(filters.start_date_to))
        if filters.instructor_id:
            conditions.append(Course.instructor_id == str(filters.instructor_id))
        if filters.has_available_spots:
            conditions.append(Course.enrollment_count < Course.capacity)
        if filters.future_only:
            conditions.append(Course.end_date > utc_now())

        query = self.courses.select().where(*conditions).order_by(Course.start_date)
        courses, total = await self.courses.list_paged(query, page, page_size)

        return PagedResponse[CourseResponse].create(
            items=[self._to_response(c, include_sessions=False) for c in courses],
            total_count=total,
            page=page,
            page_size=page_size,
        )

    async def update_course(
        self,
        course_id: str,
        request: CourseUpdateRequest,
        updated_by: str | None = None,
    ) -> CourseResponse:
        """Update a course. Only provided fields are applied.

        A lone start_date must stay before the stored end_date and a lone
        end_date after the stored start_date.

        Raises:
            CourseNotFoundError: If course not found.
            CourseNameExistsError: If the new name belongs to another course.
            InvalidCourseDatesError: If the dates would be out of order.
        """
        course = await self._get_course(course_id, with_sessions=True)

        if request.name is not None and request.name != course.name:
            if await self.courses.exists(Course.name == request.name, Course.id != course.id):
                raise CourseNameExistsError(f"A course named '{request.name}' already exists")
            course.name = request.name

        start_date = ensure_utc(request.start_date)
        end_date = ensure_utc(request.end_date)

        if start_date is not None and end_date is not None:
            if end_date <= start_date:
                raise InvalidCourseDatesError("End date must be after start date")
        elif start_date is not None:
            if start_date >= ensure_utc(course.end_date):
                raise InvalidCourseDatesError("Start date must be before end date")
        elif end_date is not None:
            if end_date <= ensure_utc(course.start_date):
                raise InvalidCourseDatesError("End date must be after start date")

        if start_date is not None:
            course.start_date = start_date
        if end_date is not None:
            course.end_date = end_date
        if request.description is not None:
            course.description = request.description
        if request.dance_style is not None:
            course.dance_style = request.dance_style.value
        if request.difficulty_level is not None:
            course.difficulty_level = request.difficulty_level.value
        if request.duration_minutes is not None:
            course.duration_minutes = request.duration_minutes
        if request.capacity is not None:
            course.capacity = request.capacity
        if request.location is not None:
            course.location = request.location
        if request.instructor_id is not None:
            course.instructor_id = str(request.instructor_id)
        if request.instructor_name is not None:
            course.instructor_name = request.instructor_name
        if request.is_active is not None:
            course.is_active = request.is_active
        if request.price is not None:
            course.price = request.price
        if request.currency is not None:
            course.currency = request.currency.upper()

        course.stamp_updated(updated_by)
        try:
            await self.db.flush()
        except IntegrityError as e:
            await self.db.rollback()
            raise CourseNameExistsError(f"A course named '{request.name}' already exists") from e

        await self.db.commit()

        logger.info("Course updated: id=%s, by=%s", course.id, course.updated_by)

        return self._to_response(course)

    async def delete_course(self, course_id: str) -> None:
        """Delete a course with its sessions, enrollments and attendance.

        Raises:
            CourseNotFoundError: If course not found.
        """
        course = await self._get_course(course_id)

        await self.courses.delete(course)
        await self.db.commit()

        logger.info("Course deleted: id=%s, name=%s", course_id, course.name)

    async def _get_course(self, course_id: str, with_sessions: bool = False) -> Course:
        options = [selectinload(Course.sessions)] if with_sessions else []
        course = await self.courses.get(course_id, *options)
        if not course:
            raise CourseNotFoundError(f"Course {course_id} not found")
        return course

    def _to_response(self, course: Course, include_sessions: bool = True) -> CourseResponse:
        sessions = []
        if include_sessions:
            sessions = [SessionService.to_response(s) for s in course.sessions]

        return CourseResponse(
            id=str(course.id),
            name=course.name,
            description=course.description,
            dance_style=course.dance_style,
            difficulty_level=course.difficulty_level,
            start_date=ensure_utc(course.start_date),
            end_date=ensure_utc(course.end_date),
            duration_minutes=course.duration_minutes,
            capacity=course.capacity,
            enrollment_count=course.enrollment_count,
            location=course.location,
            instructor_id=str(course.instructor_id) if course.instructor_id else None,
            instructor_name=course.instructor_name,
            is_active=course.is_active,
            price=course.price,
            currency=course.currency,
            is_full=course.is_full,
            has_started=course.has_started,
            has_ended=course.has_ended,
            created_at=ensure_utc(course.created_at),
            created_by=course.created_by,
            updated_at=ensure_utc(course.updated_at),
            updated_by=course.updated_by,
            sessions=sessions,
        )

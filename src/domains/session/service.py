# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Session service for scheduling course sessions.

This module provides the SessionService class for:
- Adding sessions inside a course's date range
- Rescheduling, canceling and reinstating sessions
- Session retrieval with optional attendance records

A session always lies within its course: start >= course.start_date and
end <= course.end_date, with end strictly after start.
"""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.domains.attendance.service import AttendanceService
from src.infrastructure.database.models import Course, CourseSession
from src.infrastructure.database.repository import Repository
from src.models.session import SessionCreateRequest, SessionResponse, SessionUpdateRequest
from src.utils.datetime import ensure_utc

logger = logging.getLogger(__name__)


class SessionServiceError(Exception):
    """Base exception for session service errors."""

    pass


class CourseNotFoundError(SessionServiceError):
    """Raised when the session's course is not found."""

    pass


class SessionNotFoundError(SessionServiceError):
    """Raised when a session is not found under the given course."""

    pass


class InvalidTimeRangeError(SessionServiceError):
    """Raised when a session would end at or before its start."""

    pass


class SessionOutOfBoundsError(SessionServiceError):
    """Raised when a session would fall outside its course's dates."""

    pass


def validate_session_window(start: datetime, end: datetime, course: Course) -> None:
    """Check a full session time range against its course.

    Args:
        start: Proposed session start.
        end: Proposed session end.
        course: Owning course.

    Raises:
        InvalidTimeRangeError: If end is not after start.
        SessionOutOfBoundsError: If the range leaves the course dates.
    """
    if ensure_utc(end) <= ensure_utc(start):
        raise InvalidTimeRangeError("Session end time must be after start time")

    if ensure_utc(start) < ensure_utc(course.start_date) or ensure_utc(end) > ensure_utc(
        course.end_date
    ):
        raise SessionOutOfBoundsError("Session must be within course start and end dates")


class SessionService:
    """Service for managing course sessions.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self.courses = Repository(db, Course)
        self.sessions = Repository(db, CourseSession)

    async def add_session(
        self,
        course_id: str,
        request: SessionCreateRequest,
        created_by: str | None = None,
    ) -> SessionResponse:
        """Schedule a new session for a course.

        Args:
            course_id: Course identifier.
            request: Session times, location and notes.
            created_by: Actor name for the audit columns.

        Returns:
            Created session.

        Raises:
            CourseNotFoundError: If course not found.
            InvalidTimeRangeError: If end is not after start.
            SessionOutOfBoundsError: If the session leaves the course dates.
        """
        course = await self._get_course(course_id)

        start = ensure_utc(request.start_datetime)
        end = ensure_utc(request.end_datetime)
        validate_session_window(start, end, course)

        session = self.build_session(course, request, created_by)
        self.sessions.add(session)
        await self.db.commit()

        logger.info(
            "Session added: course=%s, session=%s, start=%s, by=%s",
            course.id,
            session.id,
            start.isoformat(),
            session.created_by,
        )

        return self.to_response(session)

    async def get_session(
        self,
        course_id: str,
        session_id: str,
        include_attendances: bool = False,
    ) -> SessionResponse:
        """Get a session of a course.

        Args:
            course_id: Course identifier.
            session_id: Session identifier.
            include_attendances: Include attendance records in the response.

        Raises:
            CourseNotFoundError: If course not found.
            SessionNotFoundError: If session not found under this course.
        """
        await self._get_course(course_id)
        session = await self._get_session(course_id, session_id, include_attendances)
        return self.to_response(session, include_attendances)

    async def list_sessions(self, course_id: str) -> list[SessionResponse]:
        """List a course's sessions ordered by start time.

        Raises:
            CourseNotFoundError: If course not found.
        """
        await self._get_course(course_id)

        query = (
            self.sessions.select()
            .where(CourseSession.course_id == course_id)
            .order_by(CourseSession.start_datetime)
        )
        sessions = await self.sessions.fetch_all(query)
        return [self.to_response(s) for s in sessions]

    async def update_session(
        self,
        course_id: str,
        session_id: str,
        request: SessionUpdateRequest,
        updated_by: str | None = None,
    ) -> SessionResponse:
        """Update a session.

        Time validation depends on which ends are supplied: both are checked
        together, a lone start is checked against the stored end and the
        course start, a lone end against the stored start and the course end.

        Reinstating a session (is_canceled=False) always clears the
        cancellation reason.

        Args:
            course_id: Course identifier.
            session_id: Session identifier.
            request: Fields to change.
            updated_by: Actor name for the audit columns.

        Returns:
            Updated session.

        Raises:
            CourseNotFoundError: If course not found.
            SessionNotFoundError: If session not found under this course.
            InvalidTimeRangeError: If the new range ends at or before its start.
            SessionOutOfBoundsError: If the new range leaves the course dates.
        """
        course = await self._get_course(course_id)
        session = await self._get_session(course_id, session_id)

        start = ensure_utc(request.start_datetime)
        end = ensure_utc(request.end_datetime)

        if start is not None and end is not None:
            validate_session_window(start, end, course)
        elif start is not None:
            if start >= ensure_utc(session.end_datetime):
                raise InvalidTimeRangeError("Session start time must be before end time")
            if start < ensure_utc(course.start_date):
                raise SessionOutOfBoundsError("Session cannot start before course start date")
        elif end is not None:
            if end <= ensure_utc(session.start_datetime):
                raise InvalidTimeRangeError("Session end time must be after start time")
            if end > ensure_utc(course.end_date):
                raise SessionOutOfBoundsError("Session cannot end after course end date")

        if start is not None:
            session.start_datetime = start
        if end is not None:
            session.end_datetime = end
        if request.location is not None:
            session.location = request.location
        if request.notes is not None:
            session.notes = request.notes

        if request.is_canceled is not None:
            session.is_canceled = request.is_canceled
            if request.is_canceled:
                if request.cancellation_reason is not None:
                    session.cancellation_reason = request.cancellation_reason
            else:
                session.cancellation_reason = None

        session.stamp_updated(updated_by)
        await self.db.commit()

        logger.info(
            "Session updated: course=%s, session=%s, canceled=%s, by=%s",
            course_id,
            session_id,
            session.is_canceled,
            session.updated_by,
        )

        return self.to_response(session)

    async def delete_session(self, course_id: str, session_id: str) -> None:
        """Delete a session and, through the database cascade, its attendance.

        Raises:
            CourseNotFoundError: If course not found.
            SessionNotFoundError: If session not found under this course.
        """
        await self._get_course(course_id)
        session = await self._get_session(course_id, session_id)

        await self.sessions.delete(session)
        await self.db.commit()

        logger.info("Session deleted: course=%s, session=%s", course_id, session_id)

    @staticmethod
    def build_session(
        course: Course,
        request: SessionCreateRequest,
        created_by: str | None,
    ) -> CourseSession:
        """Create a session row for a course from a request.

        The location falls back to the course location.
        """
        session = CourseSession(
            course_id=course.id,
            start_datetime=ensure_utc(request.start_datetime),
            end_datetime=ensure_utc(request.end_datetime),
            location=request.location if request.location is not None else course.location,
            notes=request.notes,
            is_canceled=False,
            cancellation_reason=None,
        )
        session.stamp_created(created_by)
        return session

    async def _get_course(self, course_id: str) -> Course:
        course = await self.courses.get(course_id)
        if not course:
            raise CourseNotFoundError(f"Course {course_id} not found")
        return course

    async def _get_session(
        self,
        course_id: str,
        session_id: str,
        include_attendances: bool = False,
    ) -> CourseSession:
        """Get a session and check it belongs to the course.

        Raises:
            SessionNotFoundError: If missing or owned by another course.
        """
        options = [selectinload(CourseSession.attendances)] if include_attendances else []
        session = await self.sessions.get(session_id, *options)
        if not session or str(session.course_id) != str(course_id):
            raise SessionNotFoundError(f"Session {session_id} not found for course {course_id}")
        return session

    @staticmethod
    def to_response(
        session: CourseSession,
        include_attendances: bool = False,
    ) -> SessionResponse:
        """Convert a session row to its response, deriving time fields now."""
        attendances = None
        if include_attendances:
            attendances = [AttendanceService.to_response(a) for a in session.attendances]

        return SessionResponse(
            id=str(session.id),
            course_id=str(session.course_id),
            start_datetime=ensure_utc(session.start_datetime),
            end_datetime=ensure_utc(session.end_datetime),
            location=session.location,
            notes=session.notes,
            is_canceled=session.is_canceled,
            cancellation_reason=session.cancellation_reason,
            duration_minutes=session.duration_minutes,
            has_started=session.has_started,
            has_ended=session.has_ended,
            created_at=ensure_utc(session.created_at),
            created_by=session.created_by,
            updated_at=ensure_utc(session.updated_at),
            updated_by=session.updated_by,
            attendances=attendances,
        )

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Attendance service for recording session attendance.

This module provides the AttendanceService class for:
- Recording attendance for enrolled dancers (insert or overwrite)
- Attendance retrieval and deletion

Only dancers enrolled in the session's course can have attendance. There is
at most one record per (session, dancer); any status may replace any other.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.enrollment.service import EnrollmentService
from src.infrastructure.database.models import Course, CourseSession, SessionAttendance
from src.infrastructure.database.repository import Repository
from src.models.attendance import AttendanceResponse, RecordAttendanceRequest
from src.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)


class AttendanceServiceError(Exception):
    """Base exception for attendance service errors."""

    pass


class SessionNotFoundError(AttendanceServiceError):
    """Raised when session is not found."""

    pass


class CourseNotFoundError(AttendanceServiceError):
    """Raised when the session's course is not found."""

    pass


class AttendanceNotFoundError(AttendanceServiceError):
    """Raised when no attendance exists for the session and dancer."""

    pass


class NotEnrolledError(AttendanceServiceError):
    """Raised when the dancer is not enrolled in the session's course."""

    pass


class AttendanceConflictError(AttendanceServiceError):
    """Raised when a concurrent request created the same attendance."""

    pass


class AttendanceService:
    """Service for managing session attendance.

    Attributes:
        db: Async database session.
        enrollment_service: Enrollment checks for the attendance gate.
    """

    def __init__(
        self,
        db: AsyncSession,
        enrollment_service: EnrollmentService | None = None,
    ) -> None:
        self.db = db
        self.enrollment_service = enrollment_service or EnrollmentService(db)
        self.courses = Repository(db, Course)
        self.sessions = Repository(db, CourseSession)
        self.attendances = Repository(db, SessionAttendance)

    async def record_attendance(
        self,
        session_id: str,
        dancer_id: str,
        request: RecordAttendanceRequest,
        recorded_by: str | None = None,
    ) -> tuple[AttendanceResponse, bool]:
        """Record a dancer's attendance at a session.

        The first call for a (session, dancer) pair creates the record with
        the dancer name taken from the enrollment. Later calls overwrite the
        status and recorded_at; notes are overwritten only when provided.

        Args:
            session_id: Session identifier.
            dancer_id: Dancer identifier.
            request: Status and optional notes.
            recorded_by: Actor name for the audit columns.

        Returns:
            Tuple of (attendance, whether it was created).

        Raises:
            SessionNotFoundError: If session not found.
            CourseNotFoundError: If the session's course not found.
            NotEnrolledError: If the dancer is not enrolled in the course.
            AttendanceConflictError: If the record was created concurrently.
        """
        session = await self._get_session(session_id)

        course = await self.courses.get(session.course_id)
        if not course:
            raise CourseNotFoundError(f"Course {session.course_id} not found")

        if not await self.enrollment_service.is_enrolled(course.id, dancer_id):
            raise NotEnrolledError("Dancer is not enrolled in this course")

        attendance = await self._find_attendance(session.id, dancer_id)
        now = utc_now()

        if attendance is None:
            enrollment = await self.enrollment_service.find_enrollment(course.id, dancer_id)
            if not enrollment:
                raise NotEnrolledError("Dancer enrollment not found")

            attendance = SessionAttendance(
                session_id=session.id,
                dancer_id=dancer_id,
                dancer_name=enrollment.dancer_name,
                status=request.status.value,
                recorded_at=now,
                notes=request.notes,
            )
            attendance.stamp_created(recorded_by)
            self.attendances.add(attendance)

            try:
                await self.db.flush()
            except IntegrityError as e:
                await self.db.rollback()
                raise AttendanceConflictError(
                    "Attendance for this dancer was recorded concurrently"
                ) from e
            created = True
        else:
            attendance.status = request.status.value
            attendance.recorded_at = now
            if request.notes is not None:
                attendance.notes = request.notes
            attendance.stamp_updated(recorded_by)
            created = False

        await self.db.commit()

        logger.info(
            "Attendance %s: session=%s, dancer=%s, status=%s",
            "recorded" if created else "updated",
            session_id,
            dancer_id,
            attendance.status,
        )

        return self.to_response(attendance), created

    async def get_attendance(self, session_id: str, dancer_id: str) -> AttendanceResponse:
        """Get a dancer's attendance at a session.

        Raises:
            SessionNotFoundError: If session not found.
            AttendanceNotFoundError: If no record exists.
        """
        session = await self._get_session(session_id)
        attendance = await self._find_attendance(session.id, dancer_id)
        if not attendance:
            raise AttendanceNotFoundError(
                f"Attendance for dancer {dancer_id} at session {session_id} not found"
            )
        return self.to_response(attendance)

    async def list_attendances(self, session_id: str) -> list[AttendanceResponse]:
        """List a session's attendance ordered by dancer name.

        Raises:
            SessionNotFoundError: If session not found.
        """
        session = await self._get_session(session_id)

        query = (
            self.attendances.select()
            .where(SessionAttendance.session_id == session.id)
            .order_by(SessionAttendance.dancer_name)
        )
        attendances = await self.attendances.fetch_all(query)
        return [self.to_response(a) for a in attendances]

    async def delete_attendance(self, session_id: str, dancer_id: str) -> None:
        """Delete a dancer's attendance at a session.

        Raises:
            SessionNotFoundError: If session not found.
            AttendanceNotFoundError: If no record exists.
        """
        session = await self._get_session(session_id)
        attendance = await self._find_attendance(session.id, dancer_id)
        if not attendance:
            raise AttendanceNotFoundError(
                f"Attendance for dancer {dancer_id} at session {session_id} not found"
            )

        await self.attendances.delete(attendance)
        await self.db.commit()

        logger.info("Attendance deleted: session=%s, dancer=%s", session_id, dancer_id)

    async def _get_session(self, session_id: str) -> CourseSession:
        session = await self.sessions.get(session_id)
        if not session:
            raise SessionNotFoundError(f"Session {session_id} not found")
        return session

    async def _find_attendance(self, session_id: str, dancer_id: str) -> SessionAttendance | None:
        return await self.attendances.find_one(
            SessionAttendance.session_id == session_id,
            SessionAttendance.dancer_id == dancer_id,
        )

    @staticmethod
    def to_response(attendance: SessionAttendance) -> AttendanceResponse:
        """Convert an attendance row to its response."""
        return AttendanceResponse(
            id=str(attendance.id),
            session_id=str(attendance.session_id),
            dancer_id=str(attendance.dancer_id),
            dancer_name=attendance.dancer_name,
            status=attendance.status,
            recorded_at=ensure_utc(attendance.recorded_at),
            notes=attendance.notes,
        )

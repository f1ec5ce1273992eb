# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Session attendance API endpoints.

This module provides endpoints for session attendance:
- GET /{session_id}/attendance - List attendance for a session
- GET /{session_id}/attendance/dancer/{dancer_id} - Get a dancer's attendance
- PUT /{session_id}/attendance/dancer/{dancer_id} - Record or overwrite attendance
- DELETE /{session_id}/attendance/dancer/{dancer_id} - Delete attendance

Only dancers enrolled in the session's course can have attendance recorded.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_actor, get_db, require_auth
from src.domains.attendance.service import (
    AttendanceConflictError,
    AttendanceNotFoundError,
    AttendanceService,
    CourseNotFoundError,
    NotEnrolledError,
    SessionNotFoundError,
)
from src.models.attendance import AttendanceResponse, RecordAttendanceRequest
from src.models.common import ApiResponse

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_auth)])


def _get_service(db: AsyncSession) -> AttendanceService:
    """Get attendance service instance."""
    return AttendanceService(db=db)


def _session_not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Session not found",
    )


@router.get(
    "/{session_id}/attendance",
    response_model=ApiResponse[list[AttendanceResponse]],
    summary="List session attendance",
)
async def list_attendance(
    session_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[list[AttendanceResponse]]:
    """List a session's attendance ordered by dancer name.

    Raises:
        HTTPException: If session not found.
    """
    service = _get_service(db)

    try:
        attendances = await service.list_attendances(str(session_id))
    except SessionNotFoundError:
        raise _session_not_found()

    return ApiResponse(data=attendances)


@router.get(
    "/{session_id}/attendance/dancer/{dancer_id}",
    response_model=ApiResponse[AttendanceResponse],
    summary="Get dancer attendance",
)
async def get_attendance(
    session_id: UUID,
    dancer_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[AttendanceResponse]:
    """Get a dancer's attendance at a session.

    Raises:
        HTTPException: If session or attendance record not found.
    """
    service = _get_service(db)

    try:
        attendance = await service.get_attendance(str(session_id), str(dancer_id))
    except SessionNotFoundError:
        raise _session_not_found()
    except AttendanceNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Attendance not found",
        )

    return ApiResponse(data=attendance)


@router.put(
    "/{session_id}/attendance/dancer/{dancer_id}",
    response_model=ApiResponse[AttendanceResponse],
    summary="Record attendance",
    description=(
        "Record a dancer's attendance. Returns 201 when the record is created "
        "and 200 when an existing record is overwritten."
    ),
)
async def record_attendance(
    session_id: UUID,
    dancer_id: UUID,
    data: RecordAttendanceRequest,
    response: Response,
    actor: str = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[AttendanceResponse]:
    """Record or overwrite a dancer's attendance.

    Args:
        session_id: Session identifier.
        dancer_id: Dancer identifier.
        data: Attendance status and notes.
        response: Outgoing response, used to set the status code.
        actor: Audit actor.
        db: Database session.

    Returns:
        The attendance record.

    Raises:
        HTTPException: 404 if session not found, 400 if the dancer is not
            enrolled, 409 on a concurrent first recording.
    """
    service = _get_service(db)

    try:
        attendance, created = await service.record_attendance(
            str(session_id),
            str(dancer_id),
            request=data,
            recorded_by=actor,
        )
    except (SessionNotFoundError, CourseNotFoundError):
        raise _session_not_found()
    except NotEnrolledError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except AttendanceConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    if created:
        response.status_code = status.HTTP_201_CREATED
        return ApiResponse(message="Attendance recorded successfully", data=attendance)

    return ApiResponse(message="Attendance updated successfully", data=attendance)


@router.delete(
    "/{session_id}/attendance/dancer/{dancer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete attendance",
)
async def delete_attendance(
    session_id: UUID,
    dancer_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> None:
    """Delete a dancer's attendance at a session.

    Raises:
        HTTPException: If session or attendance record not found.
    """
    service = _get_service(db)

    try:
        await service.delete_attendance(str(session_id), str(dancer_id))
    except SessionNotFoundError:
        raise _session_not_found()
    except AttendanceNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Attendance not found",
        )

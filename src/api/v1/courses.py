# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course and course session API endpoints.

This module provides endpoints for the course catalog:
- POST / - Create a course (optionally with sessions)
- GET / - List courses with filters
- GET /{course_id} - Get course details with sessions
- PUT /{course_id} - Update course
- DELETE /{course_id} - Delete course with its sessions and enrollments

And for the sessions of a course:
- POST /{course_id}/sessions - Add a session
- GET /{course_id}/sessions - List sessions
- GET /{course_id}/sessions/{session_id} - Get session (optionally with attendance)
- PUT /{course_id}/sessions/{session_id} - Update or cancel session
- DELETE /{course_id}/sessions/{session_id} - Delete session
"""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_actor, get_db, require_auth
from src.domains.course.service import (
    CourseNameExistsError,
    CourseNotFoundError,
    CourseService,
    InvalidCourseDatesError,
)
from src.domains.session.service import (
    CourseNotFoundError as SessionCourseNotFoundError,
    InvalidTimeRangeError,
    SessionNotFoundError,
    SessionOutOfBoundsError,
    SessionService,
)
from src.models.common import ApiResponse, PagedResponse
from src.models.course import (
    CourseCreateRequest,
    CourseFilter,
    CourseResponse,
    CourseUpdateRequest,
)
from src.models.session import SessionCreateRequest, SessionResponse, SessionUpdateRequest

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_auth)])


def _get_service(db: AsyncSession) -> CourseService:
    """Get course service instance."""
    return CourseService(db=db)


def _get_session_service(db: AsyncSession) -> SessionService:
    """Get session service instance."""
    return SessionService(db=db)


# =============================================================================
# Courses
# =============================================================================


@router.post(
    "",
    response_model=ApiResponse[CourseResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create course",
    description="Create a new course, optionally with its initial sessions.",
)
async def create_course(
    data: CourseCreateRequest,
    actor: str = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[CourseResponse]:
    """Create a new course.

    Args:
        data: Course creation request.
        actor: Audit actor.
        db: Database session.

    Returns:
        Created course with its sessions.

    Raises:
        HTTPException: If the name is taken or dates are invalid.
    """
    logger.info("Creating course: %s by %s", data.name, actor)

    service = _get_service(db)

    try:
        course = await service.create_course(request=data, created_by=actor)
    except CourseNameExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except (InvalidCourseDatesError, InvalidTimeRangeError, SessionOutOfBoundsError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return ApiResponse(message="Course created successfully", data=course)


@router.get(
    "",
    response_model=PagedResponse[CourseResponse],
    summary="List courses",
    description="List courses with optional filters, ordered by start date.",
)
async def list_courses(
    filters: Annotated[CourseFilter, Depends()],
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    page_size: Annotated[int, Query(ge=1, le=100, description="Items per page")] = 20,
    db: AsyncSession = Depends(get_db),
) -> PagedResponse[CourseResponse]:
    """List courses.

    Args:
        filters: Course filters.
        page: Page number.
        page_size: Items per page.
        db: Database session.

    Returns:
        Page of courses (without sessions).
    """
    service = _get_service(db)
    return await service.list_courses(filters=filters, page=page, page_size=page_size)


@router.get(
    "/{course_id}",
    response_model=ApiResponse[CourseResponse],
    summary="Get course",
)
async def get_course(
    course_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[CourseResponse]:
    """Get course details including sessions.

    Raises:
        HTTPException: If course not found.
    """
    service = _get_service(db)

    try:
        course = await service.get_course(str(course_id))
    except CourseNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Course not found",
        )

    return ApiResponse(data=course)


@router.put(
    "/{course_id}",
    response_model=ApiResponse[CourseResponse],
    summary="Update course",
)
async def update_course(
    course_id: UUID,
    data: CourseUpdateRequest,
    actor: str = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[CourseResponse]:
    """Update course details.

    Args:
        course_id: Course identifier.
        data: Fields to update.
        actor: Audit actor.
        db: Database session.

    Returns:
        Updated course.

    Raises:
        HTTPException: If course not found, name taken, or dates invalid.
    """
    service = _get_service(db)

    try:
        course = await service.update_course(str(course_id), request=data, updated_by=actor)
    except CourseNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Course not found",
        )
    except CourseNameExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except InvalidCourseDatesError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return ApiResponse(message="Course updated successfully", data=course)


@router.delete(
    "/{course_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete course",
    description="Delete a course together with its sessions, attendance and enrollments.",
)
async def delete_course(
    course_id: UUID,
    actor: str = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> None:
    """Delete a course.

    Raises:
        HTTPException: If course not found.
    """
    logger.info("Deleting course: %s by %s", course_id, actor)

    service = _get_service(db)

    try:
        await service.delete_course(str(course_id))
    except CourseNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Course not found",
        )


# =============================================================================
# Sessions
# =============================================================================


@router.post(
    "/{course_id}/sessions",
    response_model=ApiResponse[SessionResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Add session",
    description="Add a session that lies within the course dates.",
)
async def add_session(
    course_id: UUID,
    data: SessionCreateRequest,
    actor: str = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[SessionResponse]:
    """Add a session to a course.

    Args:
        course_id: Course identifier.
        data: Session times, location and notes.
        actor: Audit actor.
        db: Database session.

    Returns:
        Created session.

    Raises:
        HTTPException: If course not found or the time window is invalid.
    """
    service = _get_session_service(db)

    try:
        session = await service.add_session(str(course_id), request=data, created_by=actor)
    except SessionCourseNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Course not found",
        )
    except (InvalidTimeRangeError, SessionOutOfBoundsError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return ApiResponse(message="Session added successfully", data=session)


@router.get(
    "/{course_id}/sessions",
    response_model=ApiResponse[list[SessionResponse]],
    summary="List sessions",
)
async def list_sessions(
    course_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[list[SessionResponse]]:
    """List the sessions of a course ordered by start time.

    Raises:
        HTTPException: If course not found.
    """
    service = _get_session_service(db)

    try:
        sessions = await service.list_sessions(str(course_id))
    except SessionCourseNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Course not found",
        )

    return ApiResponse(data=sessions)


@router.get(
    "/{course_id}/sessions/{session_id}",
    response_model=ApiResponse[SessionResponse],
    summary="Get session",
)
async def get_session(
    course_id: UUID,
    session_id: UUID,
    include_attendances: Annotated[
        bool, Query(description="Include attendance records")
    ] = False,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[SessionResponse]:
    """Get a session of a course.

    Raises:
        HTTPException: If the session does not exist under this course.
    """
    service = _get_session_service(db)

    try:
        session = await service.get_session(
            str(course_id),
            str(session_id),
            include_attendances=include_attendances,
        )
    except (SessionCourseNotFoundError, SessionNotFoundError):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found",
        )

    return ApiResponse(data=session)


@router.put(
    "/{course_id}/sessions/{session_id}",
    response_model=ApiResponse[SessionResponse],
    summary="Update session",
    description="Update session times or details, or cancel and reinstate it.",
)
async def update_session(
    course_id: UUID,
    session_id: UUID,
    data: SessionUpdateRequest,
    actor: str = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[SessionResponse]:
    """Update a session.

    Args:
        course_id: Course identifier.
        session_id: Session identifier.
        data: Fields to update.
        actor: Audit actor.
        db: Database session.

    Returns:
        Updated session.

    Raises:
        HTTPException: If not found or the new time window is invalid.
    """
    service = _get_session_service(db)

    try:
        session = await service.update_session(
            str(course_id),
            str(session_id),
            request=data,
            updated_by=actor,
        )
    except SessionCourseNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Course not found",
        )
    except SessionNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found",
        )
    except (InvalidTimeRangeError, SessionOutOfBoundsError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return ApiResponse(message="Session updated successfully", data=session)


@router.delete(
    "/{course_id}/sessions/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete session",
)
async def delete_session(
    course_id: UUID,
    session_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> None:
    """Delete a session and its attendance records.

    Raises:
        HTTPException: If the session does not exist under this course.
    """
    service = _get_session_service(db)

    try:
        await service.delete_session(str(course_id), str(session_id))
    except (SessionCourseNotFoundError, SessionNotFoundError):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found",
        )

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course enrollment API endpoints.

This module provides endpoints for enrollment management:
- GET / - List enrollments with filters and pagination
- GET /{enrollment_id} - Get enrollment details
- PUT /{enrollment_id} - Update enrollment status, payment or notes
- DELETE /{enrollment_id} - Delete enrollment
- GET /dancer/{dancer_id} - List a dancer's enrollments
- GET /course/{course_id} - List a course's enrollments
- POST /course/{course_id} - Enroll a dancer in a course

Enrolling never exceeds the course capacity and a dancer can be
enrolled in a course at most once.
"""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_actor, get_db, require_auth
from src.domains.enrollment.service import (
    AlreadyEnrolledError,
    CourseFullError,
    CourseNotFoundError,
    EnrollmentNotFoundError,
    EnrollmentService,
)
from src.models.common import ApiResponse, PagedResponse
from src.models.enrollment import (
    EnrollmentCreateRequest,
    EnrollmentFilter,
    EnrollmentResponse,
    EnrollmentUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_auth)])


def _get_service(db: AsyncSession) -> EnrollmentService:
    """Get enrollment service instance.

    The capacity policy comes from settings.
    """
    return EnrollmentService(db=db)


@router.get(
    "",
    response_model=PagedResponse[EnrollmentResponse],
    summary="List enrollments",
    description="List enrollments with optional filters, newest first.",
)
async def list_enrollments(
    filters: Annotated[EnrollmentFilter, Depends()],
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    page_size: Annotated[int, Query(ge=1, le=100, description="Items per page")] = 20,
    db: AsyncSession = Depends(get_db),
) -> PagedResponse[EnrollmentResponse]:
    """List enrollments.

    Args:
        filters: Enrollment filters.
        page: Page number.
        page_size: Items per page.
        db: Database session.

    Returns:
        Page of enrollments.
    """
    service = _get_service(db)
    return await service.list_enrollments(filters=filters, page=page, page_size=page_size)


@router.get(
    "/dancer/{dancer_id}",
    response_model=ApiResponse[list[EnrollmentResponse]],
    summary="List dancer enrollments",
)
async def list_dancer_enrollments(
    dancer_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[list[EnrollmentResponse]]:
    """List a dancer's enrollments, latest course first."""
    service = _get_service(db)
    enrollments = await service.list_for_dancer(str(dancer_id))
    return ApiResponse(data=enrollments)


@router.get(
    "/course/{course_id}",
    response_model=ApiResponse[list[EnrollmentResponse]],
    summary="List course enrollments",
)
async def list_course_enrollments(
    course_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[list[EnrollmentResponse]]:
    """List the enrollments of a course ordered by dancer name.

    Raises:
        HTTPException: If course not found.
    """
    service = _get_service(db)

    try:
        enrollments = await service.list_for_course(str(course_id))
    except CourseNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Course not found",
        )

    return ApiResponse(data=enrollments)


@router.post(
    "/course/{course_id}",
    response_model=ApiResponse[EnrollmentResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Enroll dancer",
    description="Enroll a dancer in a course if a seat is available.",
)
async def create_enrollment(
    course_id: UUID,
    data: EnrollmentCreateRequest,
    actor: str = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[EnrollmentResponse]:
    """Enroll a dancer in a course.

    Args:
        course_id: Course identifier.
        data: Enrollment request.
        actor: Audit actor.
        db: Database session.

    Returns:
        Created enrollment.

    Raises:
        HTTPException: 404 if course not found, 409 if the course is full
            or the dancer is already enrolled.
    """
    logger.info(
        "Enrolling dancer %s in course %s by %s",
        data.dancer_id,
        course_id,
        actor,
    )

    service = _get_service(db)

    try:
        enrollment = await service.create_enrollment(
            str(course_id),
            request=data,
            created_by=actor,
        )
    except CourseNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Course not found",
        )
    except (CourseFullError, AlreadyEnrolledError) as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return ApiResponse(message="Enrollment created successfully", data=enrollment)


@router.get(
    "/{enrollment_id}",
    response_model=ApiResponse[EnrollmentResponse],
    summary="Get enrollment",
)
async def get_enrollment(
    enrollment_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[EnrollmentResponse]:
    """Get enrollment details.

    Raises:
        HTTPException: If enrollment not found.
    """
    service = _get_service(db)

    try:
        enrollment = await service.get_enrollment(str(enrollment_id))
    except EnrollmentNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Enrollment not found",
        )

    return ApiResponse(data=enrollment)


@router.put(
    "/{enrollment_id}",
    response_model=ApiResponse[EnrollmentResponse],
    summary="Update enrollment",
)
async def update_enrollment(
    enrollment_id: UUID,
    data: EnrollmentUpdateRequest,
    actor: str = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[EnrollmentResponse]:
    """Update enrollment status, payment or notes.

    Raises:
        HTTPException: 404 if not found, 409 if re-activating needs a seat
            the course no longer has.
    """
    service = _get_service(db)

    try:
        enrollment = await service.update_enrollment(
            str(enrollment_id),
            request=data,
            updated_by=actor,
        )
    except EnrollmentNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Enrollment not found",
        )
    except CourseFullError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return ApiResponse(message="Enrollment updated successfully", data=enrollment)


@router.delete(
    "/{enrollment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete enrollment",
)
async def delete_enrollment(
    enrollment_id: UUID,
    actor: str = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> None:
    """Delete an enrollment and release its seat.

    Raises:
        HTTPException: If enrollment not found.
    """
    logger.info("Deleting enrollment %s by %s", enrollment_id, actor)

    service = _get_service(db)

    try:
        await service.delete_enrollment(str(enrollment_id))
    except EnrollmentNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Enrollment not found",
        )

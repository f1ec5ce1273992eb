# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Dancer directory API endpoints.

This module provides endpoints for dancer management:
- POST / - Register a dancer
- GET / - List dancers with filters
- GET /{dancer_id} - Get dancer details
- PUT /{dancer_id} - Update dancer
- DELETE /{dancer_id} - Delete dancer
- GET /{dancer_id}/styles - List dance styles
- POST /{dancer_id}/styles - Add a dance style
- PUT /{dancer_id}/styles/{style} - Update a dance style
- DELETE /{dancer_id}/styles/{style} - Remove a dance style
"""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_actor, get_db, require_auth
from src.domains.dancer.service import (
    DancerEmailExistsError,
    DancerNotFoundError,
    DancerService,
    DancerStyleExistsError,
    DancerStyleNotFoundError,
)
from src.models.common import ApiResponse, DanceStyle, PagedResponse
from src.models.dancer import (
    DancerCreateRequest,
    DancerFilter,
    DancerResponse,
    DancerStyleRequest,
    DancerStyleResponse,
    DancerStyleUpdateRequest,
    DancerUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_auth)])


def _get_service(db: AsyncSession) -> DancerService:
    """Get dancer service instance."""
    return DancerService(db=db)


def _dancer_not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Dancer not found",
    )


@router.post(
    "",
    response_model=ApiResponse[DancerResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Register dancer",
)
async def create_dancer(
    data: DancerCreateRequest,
    actor: str = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[DancerResponse]:
    """Register a new dancer.

    Raises:
        HTTPException: If the e-mail is already registered.
    """
    service = _get_service(db)

    try:
        dancer = await service.create_dancer(request=data, created_by=actor)
    except DancerEmailExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return ApiResponse(message="Dancer created successfully", data=dancer)


@router.get(
    "",
    response_model=PagedResponse[DancerResponse],
    summary="List dancers",
    description="List dancers with optional filters, ordered by last name.",
)
async def list_dancers(
    filters: Annotated[DancerFilter, Depends()],
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    page_size: Annotated[int, Query(ge=1, le=100, description="Items per page")] = 20,
    db: AsyncSession = Depends(get_db),
) -> PagedResponse[DancerResponse]:
    """List dancers.

    Args:
        filters: Dancer filters.
        page: Page number.
        page_size: Items per page.
        db: Database session.

    Returns:
        Page of dancers.
    """
    service = _get_service(db)
    return await service.list_dancers(filters=filters, page=page, page_size=page_size)


@router.get(
    "/{dancer_id}",
    response_model=ApiResponse[DancerResponse],
    summary="Get dancer",
)
async def get_dancer(
    dancer_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[DancerResponse]:
    """Get dancer details with dance styles."""
    service = _get_service(db)

    try:
        dancer = await service.get_dancer(str(dancer_id))
    except DancerNotFoundError:
        raise _dancer_not_found()

    return ApiResponse(data=dancer)


@router.put(
    "/{dancer_id}",
    response_model=ApiResponse[DancerResponse],
    summary="Update dancer",
)
async def update_dancer(
    dancer_id: UUID,
    data: DancerUpdateRequest,
    actor: str = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[DancerResponse]:
    """Update dancer details.

    Raises:
        HTTPException: If dancer not found or the e-mail is taken.
    """
    service = _get_service(db)

    try:
        dancer = await service.update_dancer(str(dancer_id), request=data, updated_by=actor)
    except DancerNotFoundError:
        raise _dancer_not_found()
    except DancerEmailExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return ApiResponse(message="Dancer updated successfully", data=dancer)


@router.delete(
    "/{dancer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete dancer",
)
async def delete_dancer(
    dancer_id: UUID,
    actor: str = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> None:
    """Delete a dancer and their dance styles.

    Enrollments and attendance keep their dancer snapshot.
    """
    logger.info("Deleting dancer %s by %s", dancer_id, actor)

    service = _get_service(db)

    try:
        await service.delete_dancer(str(dancer_id))
    except DancerNotFoundError:
        raise _dancer_not_found()


# =============================================================================
# Dance styles
# =============================================================================


@router.get(
    "/{dancer_id}/styles",
    response_model=ApiResponse[list[DancerStyleResponse]],
    summary="List dance styles",
)
async def list_styles(
    dancer_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[list[DancerStyleResponse]]:
    """List a dancer's dance styles."""
    service = _get_service(db)

    try:
        styles = await service.list_styles(str(dancer_id))
    except DancerNotFoundError:
        raise _dancer_not_found()

    return ApiResponse(data=styles)


@router.post(
    "/{dancer_id}/styles",
    response_model=ApiResponse[DancerStyleResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Add dance style",
)
async def add_style(
    dancer_id: UUID,
    data: DancerStyleRequest,
    actor: str = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[DancerStyleResponse]:
    """Add a dance style to a dancer.

    Raises:
        HTTPException: If dancer not found or already has the style.
    """
    service = _get_service(db)

    try:
        style = await service.add_style(str(dancer_id), request=data, created_by=actor)
    except DancerNotFoundError:
        raise _dancer_not_found()
    except DancerStyleExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return ApiResponse(message="Dance style added successfully", data=style)


@router.put(
    "/{dancer_id}/styles/{style}",
    response_model=ApiResponse[DancerStyleResponse],
    summary="Update dance style",
)
async def update_style(
    dancer_id: UUID,
    style: DanceStyle,
    data: DancerStyleUpdateRequest,
    actor: str = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[DancerStyleResponse]:
    """Update a dancer's proficiency or experience in a style."""
    service = _get_service(db)

    try:
        updated = await service.update_style(
            str(dancer_id),
            style,
            request=data,
            updated_by=actor,
        )
    except DancerNotFoundError:
        raise _dancer_not_found()
    except DancerStyleNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Dance style not found",
        )

    return ApiResponse(message="Dance style updated successfully", data=updated)


@router.delete(
    "/{dancer_id}/styles/{style}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove dance style",
)
async def remove_style(
    dancer_id: UUID,
    style: DanceStyle,
    db: AsyncSession = Depends(get_db),
) -> None:
    """Remove a dance style from a dancer."""
    service = _get_service(db)

    try:
        await service.remove_style(str(dancer_id), style)
    except DancerNotFoundError:
        raise _dancer_not_found()
    except DancerStyleNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Dance style not found",
        )

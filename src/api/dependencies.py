# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection functions.

This module provides reusable dependencies for API endpoints:
- Database session management
- Authentication and the audit actor

Example:
    @router.get("/courses")
    async def list_courses(
        db: AsyncSession = Depends(get_db),
        actor: str = Depends(get_actor),
    ):
        ...
"""

import logging
from typing import AsyncGenerator

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.middleware.auth import CurrentUser, get_actor_name, get_current_user
from src.core.config import get_settings
from src.infrastructure.database.connection import (
    close_database,
    create_schema,
    get_session,
    init_database,
)

logger = logging.getLogger(__name__)


async def init_db() -> None:
    """Initialize the course database connection.

    SQLite databases get their schema created in place; other backends
    are migrated with Alembic.
    """
    settings = get_settings()
    await init_database(settings)

    if settings.database.is_sqlite:
        await create_schema()
        logger.info("SQLite schema created")


async def close_db() -> None:
    """Close the course database connection."""
    await close_database()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get a course database session.

    The session is committed after the request and rolled back on error.

    Yields:
        AsyncSession for the course database.
    """
    async with get_session() as session:
        yield session


def get_optional_user(request: Request) -> CurrentUser | None:
    """Get current user if authenticated.

    Args:
        request: HTTP request.

    Returns:
        CurrentUser or None.
    """
    return get_current_user(request)


def require_auth(request: Request) -> CurrentUser | None:
    """Require an authenticated user when the API is configured to.

    With API_AUTH_REQUIRED disabled, anonymous callers pass through and
    are audited as the system actor.

    Args:
        request: HTTP request.

    Returns:
        CurrentUser, or None for anonymous callers when auth is optional.

    Raises:
        HTTPException: If auth is required and the caller is not authenticated.
    """
    user = get_current_user(request)
    if user is None and get_settings().api.auth_required:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_actor(
    request: Request,
    _user: CurrentUser | None = Depends(require_auth),
) -> str:
    """Get the audit actor name for created_by / updated_by columns."""
    return get_actor_name(request)

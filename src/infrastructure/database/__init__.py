# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database infrastructure for the course service.

This package provides the SQLAlchemy async engine and session lifecycle,
the ORM models, and a generic repository used by the domain services.

Example:
    from src.infrastructure.database import get_session

    async with get_session() as session:
        result = await session.execute(select(Course))
"""

from src.infrastructure.database.connection import (
    DatabaseError,
    check_database_connection,
    close_database,
    create_engine,
    create_schema,
    create_sessionmaker,
    get_engine,
    get_session,
    get_sessionmaker,
    init_database,
)
from src.infrastructure.database.repository import Repository

__all__ = [
    # Connection
    "DatabaseError",
    "check_database_connection",
    "close_database",
    "create_engine",
    "create_schema",
    "create_sessionmaker",
    "get_engine",
    "get_session",
    "get_sessionmaker",
    "init_database",
    # Data access
    "Repository",
]

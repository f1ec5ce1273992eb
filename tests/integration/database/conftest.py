# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest fixtures for database integration tests.

Provides database engines and session factories for testing. Tests run
against a throwaway SQLite file unless TEST_DATABASE_URL points elsewhere.
Each service call should use its own session, the way each API request does.
"""

import os
from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from src.infrastructure.database.connection import create_engine, create_sessionmaker
from src.infrastructure.database.models import Base


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """Get database URL for tests."""
    return os.environ.get(
        "TEST_DATABASE_URL",
        f"sqlite+aiosqlite:///{tmp_path / 'courses_test.db'}",
    )


@pytest_asyncio.fixture(scope="function")
async def db_engine(database_url: str) -> AsyncGenerator[AsyncEngine, None]:
    """Create async engine with a fresh schema."""
    engine = create_engine(database_url)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the sessionmaker used for per-call sessions."""
    return create_sessionmaker(db_engine)


@pytest_asyncio.fixture(scope="function")
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create async session for database tests."""
    async with session_factory() as session:
        yield session
        await session.rollback()

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests
- Integration tests
"""

from collections.abc import Generator
from datetime import datetime, timedelta, timezone
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.core.config import clear_settings_cache


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def test_environment() -> dict[str, str]:
    """Provide test environment variables.

    Returns:
        Dictionary of environment variables for testing.
    """
    return {
        "ENVIRONMENT": "development",
        "DEBUG": "true",
        "LOG_LEVEL": "DEBUG",
        "DB_URL": "sqlite+aiosqlite://",
        "JWT_SECRET_KEY": "test-secret-key-for-testing-only",
        "JWT_ALGORITHM": "HS256",
        "ENROLLMENT_CAPACITY_POLICY": "ever_enrolled",
    }


@pytest.fixture(autouse=True)
def reset_settings(
    monkeypatch: pytest.MonkeyPatch,
    test_environment: dict[str, str],
) -> Generator[None, None, None]:
    """Load settings from the test environment for every test."""
    for key, value in test_environment.items():
        monkeypatch.setenv(key, value)
    clear_settings_cache()
    yield
    clear_settings_cache()


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (requires a database)"
    )


# =============================================================================
# Mock Database Fixtures
# =============================================================================


@pytest.fixture
def mock_db() -> AsyncMock:
    """Create mock database session."""
    db = AsyncMock()
    db.add = MagicMock()
    db.add_all = MagicMock()
    db.delete = AsyncMock()
    db.flush = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.refresh = AsyncMock()
    db.execute = AsyncMock()
    return db


# =============================================================================
# Helper Fixtures
# =============================================================================


@pytest.fixture
def now() -> datetime:
    """Current UTC time."""
    return datetime.now(timezone.utc)


@pytest.fixture
def sample_course_data(now: datetime) -> dict[str, Any]:
    """Provide sample course creation data."""
    return {
        "name": "Salsa Basics",
        "description": "Eight weeks of salsa fundamentals",
        "dance_style": "salsa",
        "difficulty_level": "beginner",
        "start_date": now + timedelta(days=7),
        "end_date": now + timedelta(days=63),
        "duration_minutes": 60,
        "capacity": 12,
        "location": "Studio A",
        "instructor_name": "Maria Lopez",
        "price": "120.00",
    }

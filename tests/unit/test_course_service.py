# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for Course service."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from src.domains.course.service import (
    CourseNameExistsError,
    CourseNotFoundError,
    CourseService,
    InvalidCourseDatesError,
)
from src.domains.session.service import SessionOutOfBoundsError
from src.infrastructure.database.models import Course
from src.models.course import CourseCreateRequest, CourseFilter, CourseUpdateRequest


def _result(value):
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


def _count(value):
    result = MagicMock()
    result.scalar.return_value = value
    return result


def _rows(values):
    result = MagicMock()
    result.scalars.return_value.all.return_value = values
    return result


@pytest.fixture
def course_service(mock_db):
    """Create course service with mock database."""
    return CourseService(db=mock_db)


@pytest.fixture
def sample_course(now):
    """Create a stored course."""
    course = Course(
        id=str(uuid4()),
        name="Salsa Basics",
        description="Eight weeks of salsa fundamentals",
        dance_style="salsa",
        difficulty_level="beginner",
        start_date=now + timedelta(days=7),
        end_date=now + timedelta(days=63),
        duration_minutes=60,
        capacity=12,
        enrollment_count=12,
        location="Studio A",
        is_active=True,
        price=Decimal("120.00"),
        currency="USD",
        sessions=[],
    )
    course.stamp_created("Jane Admin")
    return course


class TestCourseServiceCreate:
    """Tests for course creation."""

    @pytest.mark.asyncio
    async def test_create_course_success(self, course_service, mock_db, sample_course_data):
        """Test creating a course starts with no enrollments."""
        mock_db.execute.return_value = _result(None)

        result = await course_service.create_course(
            CourseCreateRequest(**sample_course_data),
            created_by="Jane Admin",
        )

        assert result.name == "Salsa Basics"
        assert result.enrollment_count == 0
        assert result.is_full is False
        assert result.has_started is False
        assert result.is_active is True
        assert result.currency == "USD"
        assert result.created_by == "Jane Admin"
        assert result.sessions == []
        mock_db.add.assert_called_once()
        mock_db.commit.assert_called_once()

    @pytest.mark.asyncio
    async def test_create_course_with_inline_sessions(
        self, course_service, mock_db, sample_course_data, now
    ):
        """Test inline sessions are sorted and inherit the course location."""
        later = now + timedelta(days=14)
        earlier = now + timedelta(days=8)
        sample_course_data["sessions"] = [
            {"start_datetime": later, "end_datetime": later + timedelta(hours=1)},
            {
                "start_datetime": earlier,
                "end_datetime": earlier + timedelta(hours=1),
                "location": "Studio C",
            },
        ]
        mock_db.execute.return_value = _result(None)

        result = await course_service.create_course(CourseCreateRequest(**sample_course_data))

        assert [s.location for s in result.sessions] == ["Studio C", "Studio A"]
        assert all(s.duration_minutes == 60 for s in result.sessions)

    @pytest.mark.asyncio
    async def test_create_course_inline_session_out_of_bounds(
        self, course_service, mock_db, sample_course_data, now
    ):
        """Test an inline session before the course start is rejected."""
        sample_course_data["sessions"] = [
            {"start_datetime": now, "end_datetime": now + timedelta(hours=1)},
        ]
        mock_db.execute.return_value = _result(None)

        with pytest.raises(SessionOutOfBoundsError):
            await course_service.create_course(CourseCreateRequest(**sample_course_data))

        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_course_name_exists(self, course_service, mock_db, sample_course_data):
        """Test creating with a taken name fails."""
        mock_db.execute.return_value = _result(str(uuid4()))

        with pytest.raises(CourseNameExistsError):
            await course_service.create_course(CourseCreateRequest(**sample_course_data))

        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_course_end_before_start(self, course_service, mock_db, sample_course_data):
        """Test creating with end before start fails."""
        sample_course_data["end_date"] = sample_course_data["start_date"]
        mock_db.execute.return_value = _result(None)

        with pytest.raises(InvalidCourseDatesError):
            await course_service.create_course(CourseCreateRequest(**sample_course_data))

    @pytest.mark.asyncio
    async def test_create_course_concurrent_name(self, course_service, mock_db, sample_course_data):
        """Test a unique violation on flush maps to a name conflict."""
        mock_db.execute.return_value = _result(None)
        mock_db.flush.side_effect = IntegrityError(
            "INSERT INTO courses", {}, Exception("UNIQUE constraint failed")
        )

        with pytest.raises(CourseNameExistsError):
            await course_service.create_course(CourseCreateRequest(**sample_course_data))

        mock_db.rollback.assert_called_once()
        mock_db.commit.assert_not_called()


class TestCourseServiceGetAndList:
    """Tests for course retrieval."""

    @pytest.mark.asyncio
    async def test_get_course(self, course_service, mock_db, sample_course):
        """Test getting a course reports it full at capacity."""
        mock_db.execute.return_value = _result(sample_course)

        result = await course_service.get_course(sample_course.id)

        assert result.id == sample_course.id
        assert result.is_full is True

    @pytest.mark.asyncio
    async def test_get_course_not_found(self, course_service, mock_db):
        """Test getting a missing course fails."""
        mock_db.execute.return_value = _result(None)

        with pytest.raises(CourseNotFoundError):
            await course_service.get_course(str(uuid4()))

    @pytest.mark.asyncio
    async def test_list_courses(self, course_service, mock_db, sample_course):
        """Test listing courses returns a page without sessions."""
        mock_db.execute.side_effect = [_count(1), _rows([sample_course])]

        result = await course_service.list_courses(
            CourseFilter(search="salsa", has_available_spots=False),
            page=1,
            page_size=20,
        )

        assert result.total_count == 1
        assert result.total_pages == 1
        assert result.items[0].name == "Salsa Basics"
        assert result.items[0].sessions == []


class TestCourseServiceUpdate:
    """Tests for course updates."""

    @pytest.mark.asyncio
    async def test_update_capacity_below_enrollments(self, course_service, mock_db, sample_course):
        """Test lowering capacity below the enrollment count is accepted."""
        mock_db.execute.return_value = _result(sample_course)

        result = await course_service.update_course(
            sample_course.id,
            CourseUpdateRequest(capacity=8),
            updated_by="Jane Admin",
        )

        assert result.capacity == 8
        assert result.enrollment_count == 12
        assert result.is_full is True
        assert result.updated_by == "Jane Admin"

    @pytest.mark.asyncio
    async def test_update_raising_capacity_frees_spots(self, course_service, mock_db, sample_course):
        """Test raising capacity makes a full course available again."""
        mock_db.execute.return_value = _result(sample_course)

        result = await course_service.update_course(
            sample_course.id,
            CourseUpdateRequest(capacity=20),
        )

        assert result.is_full is False

    @pytest.mark.asyncio
    async def test_update_name_taken(self, course_service, mock_db, sample_course):
        """Test renaming to another course's name fails."""
        mock_db.execute.side_effect = [_result(sample_course), _result(str(uuid4()))]

        with pytest.raises(CourseNameExistsError):
            await course_service.update_course(
                sample_course.id,
                CourseUpdateRequest(name="Tango Nights"),
            )

        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_same_name_skips_check(self, course_service, mock_db, sample_course):
        """Test keeping the name does not query for duplicates."""
        mock_db.execute.return_value = _result(sample_course)

        await course_service.update_course(
            sample_course.id,
            CourseUpdateRequest(name="Salsa Basics", currency="eur"),
        )

        assert mock_db.execute.call_count == 1
        assert sample_course.currency == "EUR"

    @pytest.mark.asyncio
    async def test_update_lone_end_before_start(self, course_service, mock_db, sample_course):
        """Test moving only the end before the stored start fails."""
        mock_db.execute.return_value = _result(sample_course)

        with pytest.raises(InvalidCourseDatesError):
            await course_service.update_course(
                sample_course.id,
                CourseUpdateRequest(end_date=sample_course.start_date - timedelta(days=1)),
            )

    @pytest.mark.asyncio
    async def test_update_lone_start_after_end(self, course_service, mock_db, sample_course):
        """Test moving only the start past the stored end fails."""
        mock_db.execute.return_value = _result(sample_course)

        with pytest.raises(InvalidCourseDatesError):
            await course_service.update_course(
                sample_course.id,
                CourseUpdateRequest(start_date=sample_course.end_date),
            )

    @pytest.mark.asyncio
    async def test_update_naive_dates_as_utc(self, course_service, mock_db, sample_course):
        """Test naive dates are stored as UTC."""
        mock_db.execute.return_value = _result(sample_course)

        result = await course_service.update_course(
            sample_course.id,
            CourseUpdateRequest(
                start_date=datetime(2031, 1, 5, 9, 0),
                end_date=datetime(2031, 2, 5, 9, 0),
            ),
        )

        assert result.start_date == datetime(2031, 1, 5, 9, 0, tzinfo=timezone.utc)


class TestCourseServiceDelete:
    """Tests for course deletion."""

    @pytest.mark.asyncio
    async def test_delete_course(self, course_service, mock_db, sample_course):
        """Test deleting a course."""
        mock_db.execute.return_value = _result(sample_course)

        await course_service.delete_course(sample_course.id)

        mock_db.delete.assert_called_once_with(sample_course)
        mock_db.commit.assert_called_once()

    @pytest.mark.asyncio
    async def test_delete_course_not_found(self, course_service, mock_db):
        """Test deleting a missing course fails."""
        mock_db.execute.return_value = _result(None)

        with pytest.raises(CourseNotFoundError):
            await course_service.delete_course(str(uuid4()))

        mock_db.delete.assert_not_called()

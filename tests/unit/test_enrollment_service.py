# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for Enrollment service."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from src.domains.enrollment.service import (
    AlreadyEnrolledError,
    CourseFullError,
    CourseNotFoundError,
    EnrollmentNotFoundError,
    EnrollmentService,
)
from src.infrastructure.database.models import Course, CourseEnrollment
from src.models.common import EnrollmentStatus, PaymentStatus
from src.models.enrollment import (
    EnrollmentCreateRequest,
    EnrollmentFilter,
    EnrollmentUpdateRequest,
)


def _result(value):
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    result.scalar.return_value = value
    return result


def _rows(values):
    result = MagicMock()
    result.scalars.return_value.all.return_value = values
    return result


def _rowcount(count):
    result = MagicMock()
    result.rowcount = count
    return result


@pytest.fixture
def enrollment_service(mock_db):
    """Create enrollment service with mock database."""
    return EnrollmentService(db=mock_db, capacity_policy="ever_enrolled")


@pytest.fixture
def active_only_service(mock_db):
    """Create enrollment service that frees seats of dropped enrollments."""
    return EnrollmentService(db=mock_db, capacity_policy="active_only")


@pytest.fixture
def sample_course():
    """Create a sample course with free seats."""
    now = datetime.now(timezone.utc)
    return Course(
        id=str(uuid4()),
        name="Salsa Basics",
        dance_style="salsa",
        difficulty_level="beginner",
        start_date=now + timedelta(days=7),
        end_date=now + timedelta(days=63),
        duration_minutes=60,
        capacity=2,
        enrollment_count=0,
        is_active=True,
        price=Decimal("120.00"),
        currency="USD",
    )


@pytest.fixture
def sample_enrollment(sample_course):
    """Create a sample active enrollment in the sample course."""
    enrollment = CourseEnrollment(
        id=str(uuid4()),
        course_id=sample_course.id,
        dancer_id=str(uuid4()),
        dancer_name="Ana Silva",
        dancer_email="ana@example.com",
        enrollment_date=datetime.now(timezone.utc),
        status="active",
        payment_status="pending",
        amount_paid=Decimal("0"),
    )
    enrollment.stamp_created("system")
    enrollment.course = sample_course
    return enrollment


@pytest.fixture
def enroll_request():
    """Create an enrollment request."""
    return EnrollmentCreateRequest(
        dancer_id=uuid4(),
        dancer_name="Ana Silva",
        dancer_email="ana@example.com",
    )


class TestEnrollmentServiceCreate:
    """Tests for enrolling dancers."""

    @pytest.mark.asyncio
    async def test_create_enrollment_success(
        self, enrollment_service, mock_db, sample_course, enroll_request
    ):
        """Test successful enrollment claims a seat and commits."""
        mock_db.execute.side_effect = [
            _result(sample_course),  # course lookup
            _result(None),  # not enrolled yet
            _rowcount(1),  # seat claimed
        ]

        result = await enrollment_service.create_enrollment(
            sample_course.id,
            request=enroll_request,
            created_by="Jane Admin",
        )

        assert result.course_id == sample_course.id
        assert result.course_name == "Salsa Basics"
        assert result.dancer_id == str(enroll_request.dancer_id)
        assert result.status == EnrollmentStatus.ACTIVE
        assert result.payment_status == PaymentStatus.PENDING
        assert result.created_by == "Jane Admin"
        assert mock_db.execute.call_count == 3
        mock_db.add.assert_called_once()
        mock_db.commit.assert_called_once()
        mock_db.refresh.assert_called_once_with(sample_course, attribute_names=["enrollment_count"])

    @pytest.mark.asyncio
    async def test_create_enrollment_course_not_found(self, enrollment_service, mock_db, enroll_request):
        """Test enrollment fails when course not found."""
        mock_db.execute.return_value = _result(None)

        with pytest.raises(CourseNotFoundError):
            await enrollment_service.create_enrollment(str(uuid4()), request=enroll_request)

        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_enrollment_course_full(
        self, enrollment_service, mock_db, sample_course, enroll_request
    ):
        """Test enrollment fails when every seat is taken."""
        sample_course.enrollment_count = sample_course.capacity
        mock_db.execute.side_effect = [_result(sample_course)]

        with pytest.raises(CourseFullError):
            await enrollment_service.create_enrollment(sample_course.id, request=enroll_request)

        mock_db.add.assert_not_called()
        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_enrollment_already_enrolled(
        self, enrollment_service, mock_db, sample_course, enroll_request
    ):
        """Test enrollment fails when the dancer is already enrolled."""
        mock_db.execute.side_effect = [
            _result(sample_course),
            _result(str(uuid4())),
        ]

        with pytest.raises(AlreadyEnrolledError):
            await enrollment_service.create_enrollment(sample_course.id, request=enroll_request)

        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_enrollment_lost_seat_race(
        self, enrollment_service, mock_db, sample_course, enroll_request
    ):
        """Test a concurrent request taking the last seat yields CourseFull."""
        sample_course.enrollment_count = sample_course.capacity - 1
        mock_db.execute.side_effect = [
            _result(sample_course),
            _result(None),
            _rowcount(0),  # another request claimed the last seat
        ]

        with pytest.raises(CourseFullError):
            await enrollment_service.create_enrollment(sample_course.id, request=enroll_request)

        mock_db.add.assert_not_called()
        mock_db.rollback.assert_called_once()
        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_enrollment_unique_violation(
        self, enrollment_service, mock_db, sample_course, enroll_request
    ):
        """Test a concurrent duplicate insert maps to AlreadyEnrolled and rolls back."""
        mock_db.execute.side_effect = [
            _result(sample_course),
            _result(None),
            _rowcount(1),
        ]
        mock_db.flush.side_effect = IntegrityError(
            "INSERT INTO course_enrollments", {}, Exception("UNIQUE constraint failed")
        )

        with pytest.raises(AlreadyEnrolledError):
            await enrollment_service.create_enrollment(sample_course.id, request=enroll_request)

        mock_db.rollback.assert_called_once()
        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_dropped_enrollment_active_only_takes_no_seat(
        self, active_only_service, mock_db, sample_course
    ):
        """Test an enrollment created as dropped holds no seat under active_only."""
        request = EnrollmentCreateRequest(
            dancer_id=uuid4(),
            dancer_name="Ana Silva",
            status=EnrollmentStatus.DROPPED,
        )
        mock_db.execute.side_effect = [_result(sample_course), _result(None)]

        result = await active_only_service.create_enrollment(sample_course.id, request=request)

        assert result.status == EnrollmentStatus.DROPPED
        assert mock_db.execute.call_count == 2
        mock_db.commit.assert_called_once()


class TestEnrollmentServiceUpdate:
    """Tests for updating enrollments."""

    @pytest.mark.asyncio
    async def test_update_payment_fields(self, enrollment_service, mock_db, sample_enrollment):
        """Test payment fields are applied and the actor is stamped."""
        mock_db.execute.return_value = _result(sample_enrollment)

        result = await enrollment_service.update_enrollment(
            sample_enrollment.id,
            request=EnrollmentUpdateRequest(
                payment_status=PaymentStatus.PAID,
                amount_paid=Decimal("120.00"),
            ),
            updated_by="Front Desk",
        )

        assert result.payment_status == PaymentStatus.PAID
        assert result.amount_paid == Decimal("120.00")
        assert result.updated_by == "Front Desk"
        assert result.updated_at is not None
        assert result.notes is None
        mock_db.commit.assert_called_once()

    @pytest.mark.asyncio
    async def test_update_status_ever_enrolled_keeps_seat(
        self, enrollment_service, mock_db, sample_enrollment
    ):
        """Test dropping does not touch the counter under ever_enrolled."""
        mock_db.execute.return_value = _result(sample_enrollment)

        result = await enrollment_service.update_enrollment(
            sample_enrollment.id,
            request=EnrollmentUpdateRequest(status=EnrollmentStatus.DROPPED),
        )

        assert result.status == EnrollmentStatus.DROPPED
        assert mock_db.execute.call_count == 1

    @pytest.mark.asyncio
    async def test_update_status_active_only_releases_seat(
        self, active_only_service, mock_db, sample_enrollment
    ):
        """Test dropping releases the seat under active_only."""
        mock_db.execute.side_effect = [_result(sample_enrollment), _rowcount(1)]

        await active_only_service.update_enrollment(
            sample_enrollment.id,
            request=EnrollmentUpdateRequest(status=EnrollmentStatus.DROPPED),
        )

        assert mock_db.execute.call_count == 2
        assert sample_enrollment.status == "dropped"

    @pytest.mark.asyncio
    async def test_update_status_active_only_reclaim_on_full_course(
        self, active_only_service, mock_db, sample_enrollment, sample_course
    ):
        """Test re-activating fails when the seat was taken meanwhile."""
        sample_enrollment.status = "dropped"
        sample_course.enrollment_count = sample_course.capacity
        mock_db.execute.side_effect = [_result(sample_enrollment), _rowcount(0)]

        with pytest.raises(CourseFullError):
            await active_only_service.update_enrollment(
                sample_enrollment.id,
                request=EnrollmentUpdateRequest(status=EnrollmentStatus.ACTIVE),
            )

        assert sample_enrollment.status == "dropped"
        mock_db.rollback.assert_called_once()
        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_not_found(self, enrollment_service, mock_db):
        """Test update fails when enrollment not found."""
        mock_db.execute.return_value = _result(None)

        with pytest.raises(EnrollmentNotFoundError):
            await enrollment_service.update_enrollment(
                str(uuid4()),
                request=EnrollmentUpdateRequest(notes="late payer"),
            )


class TestEnrollmentServiceDelete:
    """Tests for deleting enrollments."""

    @pytest.mark.asyncio
    async def test_delete_releases_seat(self, enrollment_service, mock_db, sample_enrollment):
        """Test delete decrements the counter and removes the row."""
        mock_db.execute.side_effect = [_result(sample_enrollment), _rowcount(1)]

        await enrollment_service.delete_enrollment(sample_enrollment.id)

        assert mock_db.execute.call_count == 2
        mock_db.delete.assert_called_once_with(sample_enrollment)
        mock_db.commit.assert_called_once()

    @pytest.mark.asyncio
    async def test_delete_dropped_active_only_keeps_counter(
        self, active_only_service, mock_db, sample_enrollment
    ):
        """Test deleting a seatless enrollment leaves the counter alone."""
        sample_enrollment.status = "canceled"
        mock_db.execute.side_effect = [_result(sample_enrollment)]

        await active_only_service.delete_enrollment(sample_enrollment.id)

        assert mock_db.execute.call_count == 1
        mock_db.delete.assert_called_once_with(sample_enrollment)

    @pytest.mark.asyncio
    async def test_delete_not_found(self, enrollment_service, mock_db):
        """Test delete fails when enrollment not found."""
        mock_db.execute.return_value = _result(None)

        with pytest.raises(EnrollmentNotFoundError):
            await enrollment_service.delete_enrollment(str(uuid4()))

        mock_db.delete.assert_not_called()


class TestEnrollmentServiceQueries:
    """Tests for enrollment queries."""

    @pytest.mark.asyncio
    async def test_get_enrollment(self, enrollment_service, mock_db, sample_enrollment):
        """Test getting an enrollment includes the course name."""
        mock_db.execute.return_value = _result(sample_enrollment)

        result = await enrollment_service.get_enrollment(sample_enrollment.id)

        assert result.id == sample_enrollment.id
        assert result.course_name == "Salsa Basics"

    @pytest.mark.asyncio
    async def test_list_for_course(self, enrollment_service, mock_db, sample_course, sample_enrollment):
        """Test listing a course's enrollments."""
        mock_db.execute.side_effect = [_result(sample_course), _rows([sample_enrollment])]

        result = await enrollment_service.list_for_course(sample_course.id)

        assert [e.dancer_name for e in result] == ["Ana Silva"]

    @pytest.mark.asyncio
    async def test_list_for_course_not_found(self, enrollment_service, mock_db):
        """Test listing fails when course not found."""
        mock_db.execute.return_value = _result(None)

        with pytest.raises(CourseNotFoundError):
            await enrollment_service.list_for_course(str(uuid4()))

    @pytest.mark.asyncio
    async def test_list_enrollments_paged(self, enrollment_service, mock_db, sample_enrollment):
        """Test filtered listing returns a page envelope."""
        mock_db.execute.side_effect = [_result(21), _rows([sample_enrollment])]

        page = await enrollment_service.list_enrollments(
            EnrollmentFilter(status=EnrollmentStatus.ACTIVE, search="ana"),
            page=2,
            page_size=10,
        )

        assert page.total_count == 21
        assert page.total_pages == 3
        assert page.has_next_page is True
        assert page.has_previous_page is True
        assert len(page.items) == 1

    @pytest.mark.asyncio
    async def test_is_enrolled(self, enrollment_service, mock_db):
        """Test is_enrolled reflects whether a row exists."""
        mock_db.execute.side_effect = [_result(str(uuid4())), _result(None)]

        assert await enrollment_service.is_enrolled(str(uuid4()), str(uuid4())) is True
        assert await enrollment_service.is_enrolled(str(uuid4()), str(uuid4())) is False

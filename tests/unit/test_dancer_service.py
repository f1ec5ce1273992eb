# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for Dancer service."""

from datetime import date
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from src.domains.dancer.service import (
    DancerEmailExistsError,
    DancerNotFoundError,
    DancerService,
    DancerStyleExistsError,
    DancerStyleNotFoundError,
)
from src.infrastructure.database.models import Dancer, DancerStyle
from src.models.common import DanceStyle, ExperienceLevel, Gender
from src.models.dancer import (
    DancerCreateRequest,
    DancerFilter,
    DancerStyleRequest,
    DancerStyleUpdateRequest,
    DancerUpdateRequest,
)


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
def dancer_service(mock_db):
    """Create dancer service with mock database."""
    return DancerService(db=mock_db)


@pytest.fixture
def sample_style():
    """Create a stored salsa style entry."""
    style = DancerStyle(
        id=str(uuid4()),
        style="salsa",
        proficiency_level="intermediate",
        years_of_experience=3,
    )
    style.stamp_created("system")
    return style


@pytest.fixture
def sample_dancer(sample_style):
    """Create a stored dancer."""
    dancer = Dancer(
        id=str(uuid4()),
        first_name="Kai",
        last_name="Tanaka",
        email="kai@example.com",
        date_of_birth=date(1998, 6, 15),
        gender="non_binary",
        experience_level="intermediate",
        is_active=True,
        dance_styles=[sample_style],
    )
    dancer.stamp_created("system")
    dancer.joined_date = dancer.created_at
    sample_style.dancer_id = dancer.id
    return dancer


class TestDancerServiceCreate:
    """Tests for dancer registration."""

    @pytest.mark.asyncio
    async def test_create_dancer_success(self, dancer_service, mock_db):
        """Test registering a dancer lowercases the e-mail and sets joined_date."""
        mock_db.execute.return_value = _result(None)

        request = DancerCreateRequest(
            first_name="Ana",
            last_name="Silva",
            email="Ana.Silva@Example.com",
            experience_level=ExperienceLevel.ADVANCED,
            dance_styles=[
                DancerStyleRequest(style=DanceStyle.LATIN),
                DancerStyleRequest(style=DanceStyle.BALLET, years_of_experience=10),
            ],
        )

        result = await dancer_service.create_dancer(request, created_by="Jane Admin")

        assert result.email == "ana.silva@example.com"
        assert result.full_name == "Ana Silva"
        assert result.gender == Gender.UNSPECIFIED
        assert result.experience_level == ExperienceLevel.ADVANCED
        assert result.joined_date == result.created_at
        assert len(result.dance_styles) == 2
        assert result.age is None
        mock_db.add.assert_called_once()
        mock_db.commit.assert_called_once()

    @pytest.mark.asyncio
    async def test_create_dancer_duplicate_styles_collapsed(self, dancer_service, mock_db):
        """Test a style listed twice is registered once."""
        request = DancerCreateRequest(
            first_name="Ana",
            last_name="Silva",
            dance_styles=[
                DancerStyleRequest(style=DanceStyle.SALSA),
                DancerStyleRequest(style=DanceStyle.SALSA, years_of_experience=4),
            ],
        )

        result = await dancer_service.create_dancer(request)

        assert [s.style for s in result.dance_styles] == [DanceStyle.SALSA]
        # No e-mail means no uniqueness query
        mock_db.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_dancer_email_exists(self, dancer_service, mock_db):
        """Test registering with a taken e-mail fails."""
        mock_db.execute.return_value = _result(str(uuid4()))

        with pytest.raises(DancerEmailExistsError):
            await dancer_service.create_dancer(
                DancerCreateRequest(first_name="Ana", last_name="Silva", email="kai@example.com")
            )

        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_dancer_concurrent_email(self, dancer_service, mock_db):
        """Test a unique violation on flush maps to an e-mail conflict."""
        mock_db.execute.return_value = _result(None)
        mock_db.flush.side_effect = IntegrityError(
            "INSERT INTO dancers", {}, Exception("UNIQUE constraint failed")
        )

        with pytest.raises(DancerEmailExistsError):
            await dancer_service.create_dancer(
                DancerCreateRequest(first_name="Ana", last_name="Silva", email="ana@example.com")
            )

        mock_db.rollback.assert_called_once()


class TestDancerServiceReadUpdateDelete:
    """Tests for dancer retrieval, updates and deletion."""

    @pytest.mark.asyncio
    async def test_get_dancer(self, dancer_service, mock_db, sample_dancer):
        """Test getting a dancer with styles."""
        mock_db.execute.return_value = _result(sample_dancer)

        result = await dancer_service.get_dancer(sample_dancer.id)

        assert result.full_name == "Kai Tanaka"
        assert result.age is not None
        assert result.dance_styles[0].style == DanceStyle.SALSA

    @pytest.mark.asyncio
    async def test_get_dancer_not_found(self, dancer_service, mock_db):
        """Test getting a missing dancer fails."""
        mock_db.execute.return_value = _result(None)

        with pytest.raises(DancerNotFoundError):
            await dancer_service.get_dancer(str(uuid4()))

    @pytest.mark.asyncio
    async def test_list_dancers(self, dancer_service, mock_db, sample_dancer):
        """Test listing dancers with filters."""
        mock_db.execute.side_effect = [_count(1), _rows([sample_dancer])]

        result = await dancer_service.list_dancers(
            DancerFilter(
                search="kai",
                min_experience_level=ExperienceLevel.INTERMEDIATE,
                dance_style=DanceStyle.SALSA,
                min_age=18,
                max_age=40,
            ),
        )

        assert result.total_count == 1
        assert result.items[0].id == sample_dancer.id

    @pytest.mark.asyncio
    async def test_update_dancer_fields(self, dancer_service, mock_db, sample_dancer):
        """Test updating stores enum values and leaves omitted fields alone."""
        mock_db.execute.return_value = _result(sample_dancer)

        result = await dancer_service.update_dancer(
            sample_dancer.id,
            DancerUpdateRequest(experience_level=ExperienceLevel.PROFESSIONAL, is_active=False),
            updated_by="Jane Admin",
        )

        assert sample_dancer.experience_level == "professional"
        assert result.is_active is False
        assert result.first_name == "Kai"
        assert sample_dancer.updated_by == "Jane Admin"

    @pytest.mark.asyncio
    async def test_update_dancer_email_taken(self, dancer_service, mock_db, sample_dancer):
        """Test changing to another dancer's e-mail fails."""
        mock_db.execute.side_effect = [_result(sample_dancer), _result(str(uuid4()))]

        with pytest.raises(DancerEmailExistsError):
            await dancer_service.update_dancer(
                sample_dancer.id,
                DancerUpdateRequest(email="ana@example.com"),
            )

        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_dancer(self, dancer_service, mock_db, sample_dancer):
        """Test deleting a dancer."""
        mock_db.execute.return_value = _result(sample_dancer)

        await dancer_service.delete_dancer(sample_dancer.id)

        mock_db.delete.assert_called_once_with(sample_dancer)
        mock_db.commit.assert_called_once()


class TestDancerServiceStyles:
    """Tests for dancer style management."""

    @pytest.mark.asyncio
    async def test_add_style(self, dancer_service, mock_db, sample_dancer):
        """Test adding a new style."""
        mock_db.execute.return_value = _result(sample_dancer)

        result = await dancer_service.add_style(
            sample_dancer.id,
            DancerStyleRequest(style=DanceStyle.JAZZ, years_of_experience=1),
        )

        assert result.style == DanceStyle.JAZZ
        assert len(sample_dancer.dance_styles) == 2
        mock_db.commit.assert_called_once()

    @pytest.mark.asyncio
    async def test_add_style_exists(self, dancer_service, mock_db, sample_dancer):
        """Test adding a style the dancer already has fails."""
        mock_db.execute.return_value = _result(sample_dancer)

        with pytest.raises(DancerStyleExistsError):
            await dancer_service.add_style(
                sample_dancer.id,
                DancerStyleRequest(style=DanceStyle.SALSA),
            )

    @pytest.mark.asyncio
    async def test_update_style(self, dancer_service, mock_db, sample_dancer, sample_style):
        """Test updating a style's proficiency."""
        mock_db.execute.side_effect = [_result(sample_dancer.id), _result(sample_style)]

        result = await dancer_service.update_style(
            sample_dancer.id,
            DanceStyle.SALSA,
            DancerStyleUpdateRequest(proficiency_level=ExperienceLevel.ADVANCED),
        )

        assert result.proficiency_level == ExperienceLevel.ADVANCED
        assert result.years_of_experience == 3

    @pytest.mark.asyncio
    async def test_update_style_missing(self, dancer_service, mock_db, sample_dancer):
        """Test updating a style the dancer lacks fails."""
        mock_db.execute.side_effect = [_result(sample_dancer.id), _result(None)]

        with pytest.raises(DancerStyleNotFoundError):
            await dancer_service.update_style(
                sample_dancer.id,
                DanceStyle.TAP,
                DancerStyleUpdateRequest(years_of_experience=2),
            )

    @pytest.mark.asyncio
    async def test_remove_style_dancer_missing(self, dancer_service, mock_db):
        """Test removing a style of a missing dancer fails."""
        mock_db.execute.return_value = _result(None)

        with pytest.raises(DancerNotFoundError):
            await dancer_service.remove_style(str(uuid4()), DanceStyle.SALSA)

    @pytest.mark.asyncio
    async def test_remove_style(self, dancer_service, mock_db, sample_dancer, sample_style):
        """Test removing a style."""
        mock_db.execute.side_effect = [_result(sample_dancer.id), _result(sample_style)]

        await dancer_service.remove_style(sample_dancer.id, DanceStyle.SALSA)

        mock_db.delete.assert_called_once_with(sample_style)

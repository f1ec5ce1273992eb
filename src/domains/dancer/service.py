# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Dancer service for managing the dancer directory.

This module provides the DancerService class for:
- Dancer CRUD operations with unique e-mail addresses
- Filtered, paginated dancer listing
- Dance style proficiency management

Enrollment and attendance records copy dancer names at write time; edits
here are not propagated to them.
"""

from __future__ import annotations

import logging
from datetime import timedelta

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.infrastructure.database.models import Dancer, DancerStyle
from src.infrastructure.database.repository import Repository
from src.models.common import DanceStyle, ExperienceLevel, PagedResponse
from src.models.dancer import (
    DancerCreateRequest,
    DancerFilter,
    DancerResponse,
    DancerStyleRequest,
    DancerStyleResponse,
    DancerStyleUpdateRequest,
    DancerUpdateRequest,
)
from src.utils.datetime import ensure_utc, years_ago

logger = logging.getLogger(__name__)


class DancerServiceError(Exception):
    """Base exception for dancer service errors."""

    pass


class DancerNotFoundError(DancerServiceError):
    """Raised when dancer is not found."""

    pass


class DancerEmailExistsError(DancerServiceError):
    """Raised when another dancer already uses the e-mail address."""

    pass


class DancerStyleNotFoundError(DancerServiceError):
    """Raised when the dancer has no entry for the style."""

    pass


class DancerStyleExistsError(DancerServiceError):
    """Raised when the dancer already has an entry for the style."""

    pass


class DancerService:
    """Service for managing dancers and their dance styles.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self.dancers = Repository(db, Dancer)
        self.styles = Repository(db, DancerStyle)

    async def create_dancer(
        self,
        request: DancerCreateRequest,
        created_by: str | None = None,
    ) -> DancerResponse:
        """Register a new dancer, optionally with dance styles.

        Raises:
            DancerEmailExistsError: If the e-mail is already registered.
        """
        email = str(request.email).lower() if request.email else None
        if email and await self.dancers.exists(func.lower(Dancer.email) == email):
            raise DancerEmailExistsError(f"A dancer with e-mail '{email}' already exists")

        dancer = Dancer(
            first_name=request.first_name,
            last_name=request.last_name,
            email=email,
            phone_number=request.phone_number,
            date_of_birth=request.date_of_birth,
            gender=request.gender.value,
            height_cm=request.height_cm,
            weight_kg=request.weight_kg,
            experience_level=request.experience_level.value,
            emergency_contact_name=request.emergency_contact_name,
            emergency_contact_phone=request.emergency_contact_phone,
            medical_notes=request.medical_notes,
            notes=request.notes,
            is_active=True,
            dance_styles=[],
        )
        dancer.stamp_created(created_by)
        dancer.joined_date = dancer.created_at

        seen_styles: set[str] = set()
        for style_request in request.dance_styles or []:
            if style_request.style.value in seen_styles:
                continue
            seen_styles.add(style_request.style.value)
            dancer.dance_styles.append(self._build_style(style_request, created_by))

        self.dancers.add(dancer)
        try:
            await self.db.flush()
        except IntegrityError as e:
            await self.db.rollback()
            raise DancerEmailExistsError(f"A dancer with e-mail '{email}' already exists") from e

        await self.db.commit()

        logger.info("Dancer created: id=%s, by=%s", dancer.id, dancer.created_by)

        return self._to_response(dancer)

    async def get_dancer(self, dancer_id: str) -> DancerResponse:
        """Get a dancer with dance styles.

        Raises:
            DancerNotFoundError: If dancer not found.
        """
        dancer = await self._get_dancer(dancer_id)
        return self._to_response(dancer)

    async def list_dancers(
        self,
        filters: DancerFilter,
        page: int = 1,
        page_size: int = 20,
    ) -> PagedResponse[DancerResponse]:
        """List dancers with filters, ordered by last then first name.

        Args:
            filters: Search, gender, minimum experience, style, activity and
                age range filters.
            page: 1-based page number.
            page_size: Items per page.

        Returns:
            Page of dancers.
        """
        conditions = []

        if filters.search:
            search_pattern = f"%{filters.search}%"
            conditions.append(
                or_(
                    Dancer.first_name.ilike(search_pattern),
                    Dancer.last_name.ilike(search_pattern),
                    (Dancer.first_name + " " + Dancer.last_name).ilike(search_pattern),
                    Dancer.email.ilike(search_pattern),
                )
            )
        if filters.gender:
            conditions.append(Dancer.gender == filters.gender.value)
        if filters.min_experience_level:
            conditions.append(
                Dancer.experience_level.in_(
                    ExperienceLevel.at_least(filters.min_experience_level)
                )
            )
        if filters.is_active is not None:
            conditions.append(Dancer.is_active == filters.is_active)
        if filters.min_age is not None:
            # Born on or before this date
            conditions.append(Dancer.date_of_birth <= years_ago(filters.min_age).date())
        if filters.max_age is not None:
            # Born after the day they would turn max_age + 1
            latest = years_ago(filters.max_age + 1).date() + timedelta(days=1)
            conditions.append(Dancer.date_of_birth >= latest)
        if filters.dance_style:
            conditions.append(
                Dancer.dance_styles.any(DancerStyle.style == filters.dance_style.value)
            )

        query = (
            self.dancers.select()
            .options(selectinload(Dancer.dance_styles))
            .where(*conditions)
            .order_by(Dancer.last_name, Dancer.first_name)
        )
        dancers, total = await self.dancers.list_paged(query, page, page_size)

        return PagedResponse[DancerResponse].create(
            items=[self._to_response(d) for d in dancers],
            total_count=total,
            page=page,
            page_size=page_size,
        )

    async def update_dancer(
        self,
        dancer_id: str,
        request: DancerUpdateRequest,
        updated_by: str | None = None,
    ) -> DancerResponse:
        """Update a dancer. Only provided fields are applied.

        Raises:
            DancerNotFoundError: If dancer not found.
            DancerEmailExistsError: If the new e-mail belongs to another dancer.
        """
        dancer = await self._get_dancer(dancer_id)

        if request.email is not None:
            email = str(request.email).lower()
            if email != dancer.email:
                if await self.dancers.exists(
                    func.lower(Dancer.email) == email,
                    Dancer.id != dancer.id,
                ):
                    raise DancerEmailExistsError(
                        f"A dancer with e-mail '{email}' already exists"
                    )
                dancer.email = email

        updates = request.model_dump(exclude_unset=True, exclude={"email"})
        for field, value in updates.items():
            if value is None:
                continue
            setattr(dancer, field, value.value if hasattr(value, "value") else value)

        dancer.stamp_updated(updated_by)
        try:
            await self.db.flush()
        except IntegrityError as e:
            await self.db.rollback()
            raise DancerEmailExistsError("A dancer with this e-mail already exists") from e

        await self.db.commit()

        logger.info("Dancer updated: id=%s, by=%s", dancer.id, dancer.updated_by)

        return self._to_response(dancer)

    async def delete_dancer(self, dancer_id: str) -> None:
        """Delete a dancer and their dance styles.

        Raises:
            DancerNotFoundError: If dancer not found.
        """
        dancer = await self._get_dancer(dancer_id)

        await self.dancers.delete(dancer)
        await self.db.commit()

        logger.info("Dancer deleted: id=%s", dancer_id)

    async def list_styles(self, dancer_id: str) -> list[DancerStyleResponse]:
        """List a dancer's styles.

        Raises:
            DancerNotFoundError: If dancer not found.
        """
        dancer = await self._get_dancer(dancer_id)
        return [self._to_style_response(s) for s in dancer.dance_styles]

    async def add_style(
        self,
        dancer_id: str,
        request: DancerStyleRequest,
        created_by: str | None = None,
    ) -> DancerStyleResponse:
        """Add a dance style to a dancer.

        Raises:
            DancerNotFoundError: If dancer not found.
            DancerStyleExistsError: If the dancer already has the style.
        """
        dancer = await self._get_dancer(dancer_id)

        if any(s.style == request.style.value for s in dancer.dance_styles):
            raise DancerStyleExistsError(
                f"Dancer already has dance style '{request.style.value}'"
            )

        style = self._build_style(request, created_by)
        dancer.dance_styles.append(style)

        try:
            await self.db.flush()
        except IntegrityError as e:
            await self.db.rollback()
            raise DancerStyleExistsError(
                f"Dancer already has dance style '{request.style.value}'"
            ) from e

        await self.db.commit()

        logger.info("Dancer style added: dancer=%s, style=%s", dancer_id, style.style)

        return self._to_style_response(style)

    async def update_style(
        self,
        dancer_id: str,
        style: DanceStyle,
        request: DancerStyleUpdateRequest,
        updated_by: str | None = None,
    ) -> DancerStyleResponse:
        """Update a dancer's proficiency in a style.

        Raises:
            DancerNotFoundError: If dancer not found.
            DancerStyleNotFoundError: If the dancer lacks the style.
        """
        dancer_style = await self._get_style(dancer_id, style)

        if request.proficiency_level is not None:
            dancer_style.proficiency_level = request.proficiency_level.value
        if request.years_of_experience is not None:
            dancer_style.years_of_experience = request.years_of_experience
        if request.notes is not None:
            dancer_style.notes = request.notes

        dancer_style.stamp_updated(updated_by)
        await self.db.commit()

        return self._to_style_response(dancer_style)

    async def remove_style(self, dancer_id: str, style: DanceStyle) -> None:
        """Remove a style from a dancer.

        Raises:
            DancerNotFoundError: If dancer not found.
            DancerStyleNotFoundError: If the dancer lacks the style.
        """
        dancer_style = await self._get_style(dancer_id, style)

        await self.styles.delete(dancer_style)
        await self.db.commit()

        logger.info("Dancer style removed: dancer=%s, style=%s", dancer_id, style.value)

    async def _get_dancer(self, dancer_id: str) -> Dancer:
        dancer = await self.dancers.get(dancer_id, selectinload(Dancer.dance_styles))
        if not dancer:
            raise DancerNotFoundError(f"Dancer {dancer_id} not found")
        return dancer

    async def _get_style(self, dancer_id: str, style: DanceStyle) -> DancerStyle:
        if not await self.dancers.exists(Dancer.id == dancer_id):
            raise DancerNotFoundError(f"Dancer {dancer_id} not found")

        dancer_style = await self.styles.find_one(
            DancerStyle.dancer_id == dancer_id,
            DancerStyle.style == style.value,
        )
        if not dancer_style:
            raise DancerStyleNotFoundError(
                f"Dancer {dancer_id} has no dance style '{style.value}'"
            )
        return dancer_style

    @staticmethod
    def _build_style(request: DancerStyleRequest, created_by: str | None) -> DancerStyle:
        style = DancerStyle(
            style=request.style.value,
            proficiency_level=request.proficiency_level.value,
            years_of_experience=request.years_of_experience,
            notes=request.notes,
        )
        style.stamp_created(created_by)
        return style

    @staticmethod
    def _to_style_response(style: DancerStyle) -> DancerStyleResponse:
        return DancerStyleResponse(
            style=style.style,
            proficiency_level=style.proficiency_level,
            years_of_experience=style.years_of_experience,
            notes=style.notes,
        )

    def _to_response(self, dancer: Dancer) -> DancerResponse:
        return DancerResponse(
            id=str(dancer.id),
            first_name=dancer.first_name,
            last_name=dancer.last_name,
            full_name=dancer.full_name,
            email=dancer.email,
            phone_number=dancer.phone_number,
            date_of_birth=dancer.date_of_birth,
            age=dancer.age,
            gender=dancer.gender,
            height_cm=dancer.height_cm,
            weight_kg=dancer.weight_kg,
            experience_level=dancer.experience_level,
            emergency_contact_name=dancer.emergency_contact_name,
            emergency_contact_phone=dancer.emergency_contact_phone,
            joined_date=ensure_utc(dancer.joined_date),
            is_active=dancer.is_active,
            dance_styles=[self._to_style_response(s) for s in dancer.dance_styles],
            created_at=ensure_utc(dancer.created_at),
            updated_at=ensure_utc(dancer.updated_at),
        )

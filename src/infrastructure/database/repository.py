# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Generic async repository over a single ORM model.

Domain services build one Repository per entity they touch and keep their
business rules on top of it. Every read goes through AsyncSession.execute
so the session stays the single seam for tests.

Example:
    courses = Repository(db, Course)
    course = await courses.get(course_id, selectinload(Course.sessions))
    items, total = await courses.list_paged(
        select(Course).where(Course.is_active.is_(True)),
        page=1,
        page_size=20,
    )
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.interfaces import ORMOption

from src.infrastructure.database.models import Base

ModelT = TypeVar("ModelT", bound=Base)


class Repository(Generic[ModelT]):
    """Basic data access for one model class.

    Attributes:
        db: The request-scoped async session.
        model: The mapped class this repository serves.
    """

    def __init__(self, db: AsyncSession, model: type[ModelT]) -> None:
        self.db = db
        self.model = model

    def select(self) -> Select[tuple[ModelT]]:
        """Start a SELECT for the model."""
        return select(self.model)

    async def get(self, entity_id: str, *options: ORMOption) -> ModelT | None:
        """Get a row by primary key.

        Args:
            entity_id: Primary key value.
            *options: Loader options such as selectinload().

        Returns:
            The row or None if not found.
        """
        stmt = select(self.model).where(self.model.id == entity_id)
        if options:
            stmt = stmt.options(*options)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def find_one(self, *conditions: Any) -> ModelT | None:
        """Get the single row matching all conditions, or None."""
        result = await self.db.execute(select(self.model).where(*conditions))
        return result.scalar_one_or_none()

    async def exists(self, *conditions: Any) -> bool:
        """Check whether any row matches all conditions."""
        stmt = select(self.model.id).where(*conditions).limit(1)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def count(self, *conditions: Any) -> int:
        """Count rows matching all conditions."""
        stmt = select(func.count()).select_from(self.model)
        if conditions:
            stmt = stmt.where(*conditions)
        result = await self.db.execute(stmt)
        return result.scalar() or 0

    async def fetch_all(self, stmt: Select[tuple[ModelT]]) -> list[ModelT]:
        """Execute a SELECT and return all model rows."""
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def list_paged(
        self,
        stmt: Select[tuple[ModelT]],
        page: int,
        page_size: int,
    ) -> tuple[list[ModelT], int]:
        """Execute a SELECT one page at a time.

        The total is counted over the same statement without ordering or
        pagination.

        Args:
            stmt: Filtered and ordered SELECT for the model.
            page: 1-based page number.
            page_size: Rows per page.

        Returns:
            Tuple of (rows on the requested page, total matching rows).
        """
        count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
        count_result = await self.db.execute(count_stmt)
        total = count_result.scalar() or 0

        offset = (page - 1) * page_size
        result = await self.db.execute(stmt.offset(offset).limit(page_size))
        return list(result.scalars().all()), total

    def add(self, entity: ModelT) -> ModelT:
        """Stage a new row in the session."""
        self.db.add(entity)
        return entity

    async def delete(self, entity: ModelT) -> None:
        """Stage a row for deletion."""
        await self.db.delete(entity)

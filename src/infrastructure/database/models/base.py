# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Declarative base and shared column mixins.

Every course-service table carries a UUID primary key plus audit columns.
The audit actor columns are free text (the principal's display name, or
"system"); they do not reference a user table.
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from src.utils.datetime import utc_now

SYSTEM_ACTOR = "system"


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


class UUIDPrimaryKeyMixin:
    """UUID primary key stored as a string."""

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )


class TimestampMixin:
    """Creation and modification timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        onupdate=utc_now,
    )


class AuditMixin(TimestampMixin):
    """Timestamps plus the actor names that produced them."""

    created_by: Mapped[str | None] = mapped_column(String(200), nullable=True)
    updated_by: Mapped[str | None] = mapped_column(String(200), nullable=True)

    def stamp_created(self, actor: str | None) -> None:
        """Record who created the row and when."""
        self.created_by = actor or SYSTEM_ACTOR
        self.created_at = utc_now()

    def stamp_updated(self, actor: str | None) -> None:
        """Record who last modified the row and when."""
        self.updated_by = actor or SYSTEM_ACTOR
        self.updated_at = utc_now()

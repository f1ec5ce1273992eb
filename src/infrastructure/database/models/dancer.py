# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Dancer directory models."""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.infrastructure.database.models.base import AuditMixin, Base, UUIDPrimaryKeyMixin
from src.utils.datetime import age_in_years, utc_now


class Dancer(UUIDPrimaryKeyMixin, AuditMixin, Base):
    """A dancer registered with the studio."""

    __tablename__ = "dancers"

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True, unique=True)
    phone_number: Mapped[str | None] = mapped_column(String(30), nullable=True)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    gender: Mapped[str] = mapped_column(String(20), nullable=False, default="unspecified")
    height_cm: Mapped[int | None] = mapped_column(Integer, nullable=True)
    weight_kg: Mapped[int | None] = mapped_column(Integer, nullable=True)
    experience_level: Mapped[str] = mapped_column(String(20), nullable=False, default="beginner")
    emergency_contact_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    emergency_contact_phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    medical_notes: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    notes: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    joined_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    dance_styles: Mapped[list[DancerStyle]] = relationship(
        back_populates="dancer",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="DancerStyle.style",
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def age(self) -> int | None:
        return age_in_years(self.date_of_birth)


class DancerStyle(UUIDPrimaryKeyMixin, AuditMixin, Base):
    """A dance style a dancer practices, with proficiency."""

    __tablename__ = "dancer_styles"

    dancer_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("dancers.id", ondelete="CASCADE"),
        nullable=False,
    )
    style: Mapped[str] = mapped_column(String(30), nullable=False)
    proficiency_level: Mapped[str] = mapped_column(String(20), nullable=False, default="beginner")
    years_of_experience: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)

    dancer: Mapped[Dancer] = relationship(back_populates="dance_styles")

    __table_args__ = (
        UniqueConstraint("dancer_id", "style", name="uq_dancer_styles_dancer_style"),
    )

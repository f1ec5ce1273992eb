# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Dancer directory request/response schemas."""

from datetime import date, datetime

from pydantic import BaseModel, EmailStr, Field

from src.models.common import DanceStyle, ExperienceLevel, Gender, ProficiencyLevel


class DancerStyleRequest(BaseModel):
    """A dance style with the dancer's proficiency."""

    style: DanceStyle = Field(..., description="Dance style")
    proficiency_level: ProficiencyLevel = Field(
        ProficiencyLevel.BEGINNER,
        description="Proficiency in this style",
    )
    years_of_experience: int = Field(0, ge=0, le=100, description="Years practicing")
    notes: str | None = Field(None, max_length=500)


class DancerStyleUpdateRequest(BaseModel):
    """Request to update a dancer's style entry."""

    proficiency_level: ProficiencyLevel | None = None
    years_of_experience: int | None = Field(None, ge=0, le=100)
    notes: str | None = Field(None, max_length=500)


class DancerStyleResponse(BaseModel):
    style: DanceStyle
    proficiency_level: ProficiencyLevel
    years_of_experience: int
    notes: str | None = None


class DancerCreateRequest(BaseModel):
    """Request to register a dancer."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr | None = Field(None, description="Unique e-mail address")
    phone_number: str | None = Field(None, max_length=30)
    date_of_birth: date | None = None
    gender: Gender = Gender.UNSPECIFIED
    height_cm: int | None = Field(None, ge=50, le=250)
    weight_kg: int | None = Field(None, ge=20, le=300)
    experience_level: ExperienceLevel = ExperienceLevel.BEGINNER
    emergency_contact_name: str | None = Field(None, max_length=200)
    emergency_contact_phone: str | None = Field(None, max_length=30)
    medical_notes: str | None = Field(None, max_length=1000)
    notes: str | None = Field(None, max_length=1000)
    dance_styles: list[DancerStyleRequest] | None = Field(
        None,
        description="Styles registered together with the dancer",
    )


class DancerUpdateRequest(BaseModel):
    """Request to update a dancer. Only provided fields are applied."""

    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)
    email: EmailStr | None = None
    phone_number: str | None = Field(None, max_length=30)
    date_of_birth: date | None = None
    gender: Gender | None = None
    height_cm: int | None = Field(None, ge=50, le=250)
    weight_kg: int | None = Field(None, ge=20, le=300)
    experience_level: ExperienceLevel | None = None
    emergency_contact_name: str | None = Field(None, max_length=200)
    emergency_contact_phone: str | None = Field(None, max_length=30)
    medical_notes: str | None = Field(None, max_length=1000)
    notes: str | None = Field(None, max_length=1000)
    is_active: bool | None = None


class DancerResponse(BaseModel):
    """Dancer details."""

    id: str
    first_name: str
    last_name: str
    full_name: str
    email: str | None = None
    phone_number: str | None = None
    date_of_birth: date | None = None
    age: int | None = None
    gender: Gender
    height_cm: int | None = None
    weight_kg: int | None = None
    experience_level: ExperienceLevel
    emergency_contact_name: str | None = None
    emergency_contact_phone: str | None = None
    joined_date: datetime
    is_active: bool
    dance_styles: list[DancerStyleResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime | None = None


class DancerFilter(BaseModel):
    """Filters for dancer listing."""

    search: str | None = Field(None, description="Substring of name or e-mail")
    gender: Gender | None = None
    min_experience_level: ExperienceLevel | None = None
    dance_style: DanceStyle | None = None
    is_active: bool | None = None
    min_age: int | None = Field(None, ge=0)
    max_age: int | None = Field(None, ge=0)

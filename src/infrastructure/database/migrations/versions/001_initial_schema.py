# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Initial course database schema.

Revision ID: 001_initial
Revises: None
Create Date: 2025-01-15

This migration creates all course database tables based on the
SQLAlchemy models in src/infrastructure/database/models/.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _audit_columns() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_by", sa.String(200), nullable=True),
        sa.Column("updated_by", sa.String(200), nullable=True),
    ]


def upgrade() -> None:
    """Create course database tables."""
    # ==========================================================================
    # 1. courses table
    # ==========================================================================
    op.create_table(
        "courses",
        sa.Column("id", sa.Uuid(as_uuid=False), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.String(1000), nullable=True),
        sa.Column("dance_style", sa.String(30), nullable=False, server_default="other"),
        sa.Column("difficulty_level", sa.String(30), nullable=False, server_default="all_levels"),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("duration_minutes", sa.Integer, nullable=False),
        sa.Column("capacity", sa.Integer, nullable=False),
        sa.Column("enrollment_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("location", sa.String(200), nullable=True),
        sa.Column("instructor_id", sa.Uuid(as_uuid=False), nullable=True),
        sa.Column("instructor_name", sa.String(200), nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("price", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("currency", sa.String(3), nullable=False, server_default="USD"),
        *_audit_columns(),
        sa.UniqueConstraint("name", name="uq_courses_name"),
        sa.CheckConstraint(
            "enrollment_count >= 0",
            name="ck_courses_enrollment_count_non_negative",
        ),
    )
    op.create_index("ix_courses_start_end", "courses", ["start_date", "end_date"])

    # ==========================================================================
    # 2. course_sessions table
    # ==========================================================================
    op.create_table(
        "course_sessions",
        sa.Column("id", sa.Uuid(as_uuid=False), primary_key=True),
        sa.Column(
            "course_id",
            sa.Uuid(as_uuid=False),
            sa.ForeignKey("courses.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("start_datetime", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_datetime", sa.DateTime(timezone=True), nullable=False),
        sa.Column("location", sa.String(200), nullable=True),
        sa.Column("notes", sa.String(500), nullable=True),
        sa.Column("is_canceled", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("cancellation_reason", sa.String(500), nullable=True),
        *_audit_columns(),
    )
    op.create_index("ix_course_sessions_course_id", "course_sessions", ["course_id"])
    op.create_index(
        "ix_course_sessions_start_end",
        "course_sessions",
        ["start_datetime", "end_datetime"],
    )

    # ==========================================================================
    # 3. course_enrollments table
    # ==========================================================================
    op.create_table(
        "course_enrollments",
        sa.Column("id", sa.Uuid(as_uuid=False), primary_key=True),
        sa.Column(
            "course_id",
            sa.Uuid(as_uuid=False),
            sa.ForeignKey("courses.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("dancer_id", sa.Uuid(as_uuid=False), nullable=False),
        sa.Column("dancer_name", sa.String(200), nullable=False),
        sa.Column("dancer_email", sa.String(255), nullable=True),
        sa.Column("enrollment_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("payment_status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("amount_paid", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("notes", sa.String(500), nullable=True),
        *_audit_columns(),
        sa.UniqueConstraint(
            "course_id",
            "dancer_id",
            name="uq_course_enrollments_course_dancer",
        ),
    )
    op.create_index("ix_course_enrollments_dancer_id", "course_enrollments", ["dancer_id"])

    # ==========================================================================
    # 4. session_attendances table
    # ==========================================================================
    op.create_table(
        "session_attendances",
        sa.Column("id", sa.Uuid(as_uuid=False), primary_key=True),
        sa.Column(
            "session_id",
            sa.Uuid(as_uuid=False),
            sa.ForeignKey("course_sessions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("dancer_id", sa.Uuid(as_uuid=False), nullable=False),
        sa.Column("dancer_name", sa.String(200), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="unknown"),
        sa.Column("recorded_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.String(500), nullable=True),
        *_audit_columns(),
        sa.UniqueConstraint(
            "session_id",
            "dancer_id",
            name="uq_session_attendances_session_dancer",
        ),
    )

    # ==========================================================================
    # 5. dancers table
    # ==========================================================================
    op.create_table(
        "dancers",
        sa.Column("id", sa.Uuid(as_uuid=False), primary_key=True),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone_number", sa.String(30), nullable=True),
        sa.Column("date_of_birth", sa.Date, nullable=True),
        sa.Column("gender", sa.String(20), nullable=False, server_default="unspecified"),
        sa.Column("height_cm", sa.Integer, nullable=True),
        sa.Column("weight_kg", sa.Integer, nullable=True),
        sa.Column("experience_level", sa.String(20), nullable=False, server_default="beginner"),
        sa.Column("emergency_contact_name", sa.String(200), nullable=True),
        sa.Column("emergency_contact_phone", sa.String(30), nullable=True),
        sa.Column("medical_notes", sa.String(1000), nullable=True),
        sa.Column("notes", sa.String(1000), nullable=True),
        sa.Column("joined_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        *_audit_columns(),
        sa.UniqueConstraint("email", name="uq_dancers_email"),
    )
    op.create_index("ix_dancers_last_name", "dancers", ["last_name"])

    # ==========================================================================
    # 6. dancer_styles table
    # ==========================================================================
    op.create_table(
        "dancer_styles",
        sa.Column("id", sa.Uuid(as_uuid=False), primary_key=True),
        sa.Column(
            "dancer_id",
            sa.Uuid(as_uuid=False),
            sa.ForeignKey("dancers.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("style", sa.String(30), nullable=False),
        sa.Column("proficiency_level", sa.String(20), nullable=False, server_default="beginner"),
        sa.Column("years_of_experience", sa.Integer, nullable=False, server_default="0"),
        sa.Column("notes", sa.String(500), nullable=True),
        *_audit_columns(),
        sa.UniqueConstraint("dancer_id", "style", name="uq_dancer_styles_dancer_style"),
    )


def downgrade() -> None:
    """Drop course database tables."""
    op.drop_table("dancer_styles")
    op.drop_index("ix_dancers_last_name", table_name="dancers")
    op.drop_table("dancers")
    op.drop_table("session_attendances")
    op.drop_index("ix_course_enrollments_dancer_id", table_name="course_enrollments")
    op.drop_table("course_enrollments")
    op.drop_index("ix_course_sessions_start_end", table_name="course_sessions")
    op.drop_index("ix_course_sessions_course_id", table_name="course_sessions")
    op.drop_table("course_sessions")
    op.drop_index("ix_courses_start_end", table_name="courses")
    op.drop_table("courses")

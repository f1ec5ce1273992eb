# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Infrastructure layer for the course service.

This package contains:
- Database connections (PostgreSQL via asyncpg, SQLite via aiosqlite)
- ORM models, the generic repository and Alembic migrations
"""

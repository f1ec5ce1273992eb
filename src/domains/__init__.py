# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer for the course service.

This package contains domain services that encapsulate business logic.
Each domain module provides a service working on the request's database
session.

Domains:
    attendance: Per-session attendance of enrolled dancers.
    auth: Bearer token verification.
    course: Course catalog.
    dancer: Dancer directory and dance styles.
    enrollment: Capacity-checked course enrollment.
    session: Course session scheduling.
"""

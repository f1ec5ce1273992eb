# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

This package contains all v1 API endpoint definitions.
Each module provides a FastAPI router for a specific domain.

Modules:
    courses: Course catalog and course session endpoints.
    enrollments: Enrollment endpoints (capacity-checked enroll, status, payment).
    attendance: Session attendance endpoints.
    dancers: Dancer directory endpoints (profiles, dance styles).
"""

from fastapi import APIRouter

from src.api.v1 import attendance, courses, dancers, enrollments

# Create the main v1 router
router = APIRouter(prefix="/api/v1")

# Include domain routers
router.include_router(courses.router, prefix="/courses", tags=["Courses"])
router.include_router(enrollments.router, prefix="/enrollments", tags=["Enrollments"])
router.include_router(attendance.router, prefix="/sessions", tags=["Attendance"])
router.include_router(dancers.router, prefix="/dancers", tags=["Dancers"])

__all__ = ["router"]

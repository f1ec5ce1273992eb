# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API middleware components.

Exports:
    AuthMiddleware: JWT authentication middleware.
    CurrentUser: Authenticated principal placed on request.state.
    RequestContextMiddleware: Request-scoped logging context.
"""

from src.api.middleware.auth import AuthMiddleware, CurrentUser, get_actor_name, get_current_user
from src.api.middleware.request_context import RequestContextMiddleware

__all__ = [
    "AuthMiddleware",
    "RequestContextMiddleware",
    "CurrentUser",
    "get_actor_name",
    "get_current_user",
]

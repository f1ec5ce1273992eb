"""Dance Studio Course Service.

Course catalog, session scheduling, capacity-checked enrollment and
attendance tracking for a dance studio.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"

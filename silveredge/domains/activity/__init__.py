# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Activity domain package: logins and sandbox projects."""

from silveredge.domains.activity.service import StudentActivityService

__all__ = ["StudentActivityService"]

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Exceptions for gamification services.

- GamificationServiceError: Base exception for XP, streak, badge and
  achievement errors
- StudentProfileNotFoundError: The student has no profile document
- NotAStudentError: The user exists but is not a student
"""

from silveredge.domains.errors import ResourceNotFoundError


class GamificationServiceError(Exception):
    """Base exception for gamification service errors."""

    pass


class StudentProfileNotFoundError(GamificationServiceError, ResourceNotFoundError):
    """Raised when a student profile is not found."""

    pass


class NotAStudentError(GamificationServiceError, ResourceNotFoundError):
    """Raised when achievements are requested for a non-student user."""

    pass

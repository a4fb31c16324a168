# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Exceptions for progress services.

- ProgressServiceError: Base exception for lesson, submission and
  aggregation errors
- *NotFoundError: A referenced lesson, exercise, quiz, course or progress
  record does not exist
- InvalidTimeSpentError: A time-spent update would decrease the total
"""

from silveredge.domains.errors import ResourceNotFoundError, ValidationFailedError


class ProgressServiceError(Exception):
    """Base exception for progress service errors."""

    pass


class LessonNotFoundError(ProgressServiceError, ResourceNotFoundError):
    """Raised when a lesson is not found."""

    pass


class LessonProgressNotFoundError(ProgressServiceError, ResourceNotFoundError):
    """Raised when a student has no progress record for a lesson."""

    pass


class ExerciseNotFoundError(ProgressServiceError, ResourceNotFoundError):
    """Raised when an exercise is not found."""

    pass


class QuizNotFoundError(ProgressServiceError, ResourceNotFoundError):
    """Raised when a quiz is not found."""

    pass


class CourseNotFoundError(ProgressServiceError, ResourceNotFoundError):
    """Raised when a course is not found."""

    pass


class InvalidTimeSpentError(ProgressServiceError, ValidationFailedError):
    """Raised when time spent would be decreased."""

    pass

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shared enums and base schema configuration."""

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class APIModel(BaseModel):
    """Base for response/request schemas.

    Attributes are snake_case in Python and camelCase on the wire.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class UserRole(str, Enum):
    """Role tag of a user document."""

    STUDENT = "student"
    TEACHER = "teacher"
    PARENT = "parent"
    ADMIN = "admin"


class UserStatus(str, Enum):
    """Account status; users are soft-deactivated, never deleted."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class CourseStatus(str, Enum):
    """Publication state of a course."""

    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class LessonStatus(str, Enum):
    """Per-student lesson state. not_started has no stored record."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class AttendanceStatus(str, Enum):
    """Attendance mark for a student on a class day."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    EXCUSED = "excused"


class BadgeTriggerType(str, Enum):
    """Student action category a badge is tied to."""

    FIRST_LOGIN = "first_login"
    FIRST_LESSON = "first_lesson"
    FIRST_EXERCISE = "first_exercise"
    FIRST_QUIZ = "first_quiz"
    FIRST_SANDBOX = "first_sandbox"
    LESSONS_COMPLETED = "lessons_completed"
    EXERCISES_PASSED = "exercises_passed"
    COURSES_FINISHED = "courses_finished"
    LOGIN_STREAK = "login_streak"
    XP_EARNED = "xp_earned"
    LEVEL_REACHED = "level_reached"

    @property
    def is_first_time(self) -> bool:
        """First-time triggers carry no threshold value."""
        return self.value.startswith("first_")

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""ORM models for the progress store.

Importing this package registers every table on Base.metadata.
"""

from silveredge.infrastructure.database.models.base import (
    Base,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
    new_id,
)
from silveredge.infrastructure.database.models.course import (
    Course,
    Exercise,
    Lesson,
    Quiz,
    Section,
)
from silveredge.infrastructure.database.models.gamification import (
    Badge,
    SandboxProject,
    StudentBadge,
    XpTransaction,
)
from silveredge.infrastructure.database.models.progress import (
    ExerciseSubmission,
    LessonProgress,
    QuizSubmission,
)
from silveredge.infrastructure.database.models.school import (
    Attendance,
    Class,
    ClassCourse,
    ClassStudent,
)
from silveredge.infrastructure.database.models.user import (
    StudentParent,
    StudentProfile,
    User,
)

__all__ = [
    "Attendance",
    "Badge",
    "Base",
    "Class",
    "ClassCourse",
    "ClassStudent",
    "Course",
    "Exercise",
    "ExerciseSubmission",
    "Lesson",
    "LessonProgress",
    "Quiz",
    "QuizSubmission",
    "SandboxProject",
    "Section",
    "StudentBadge",
    "StudentParent",
    "StudentProfile",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    "User",
    "XpTransaction",
    "new_id",
]

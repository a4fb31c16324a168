# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pydantic request/response schemas.

Attributes are snake_case in Python and camelCase in JSON.
"""

from silveredge.models.classes import (
    NO_ACTIVITY,
    ClassCourseProgress,
    ClassStats,
    EnrollmentResponse,
)
from silveredge.models.common import (
    APIModel,
    AttendanceStatus,
    BadgeTriggerType,
    CourseStatus,
    LessonStatus,
    UserRole,
    UserStatus,
)
from silveredge.models.gamification import (
    AchievementsResponse,
    BadgeCatalogEntry,
    BadgeResponse,
    EarnedBadgeResponse,
    LevelProgressResponse,
    XpHistoryResponse,
    XpTransactionResponse,
)
from silveredge.models.progress import (
    CourseProgressResponse,
    LessonCompletionResponse,
    LessonProgressDetail,
    LessonProgressResponse,
    StudentProgressSummary,
    TimeSpentRequest,
)
from silveredge.models.submissions import (
    ExerciseSubmissionRequest,
    ExerciseSubmissionResponse,
    ExerciseSubmitResult,
    QuestionResult,
    QuizAnswer,
    QuizSubmissionRequest,
    QuizSubmissionResponse,
    QuizSubmitResult,
    TestResult,
)

__all__ = [
    "APIModel",
    "AchievementsResponse",
    "AttendanceStatus",
    "BadgeCatalogEntry",
    "BadgeResponse",
    "BadgeTriggerType",
    "ClassCourseProgress",
    "ClassStats",
    "CourseProgressResponse",
    "CourseStatus",
    "EarnedBadgeResponse",
    "EnrollmentResponse",
    "ExerciseSubmissionRequest",
    "ExerciseSubmissionResponse",
    "ExerciseSubmitResult",
    "LessonCompletionResponse",
    "LessonProgressDetail",
    "LessonProgressResponse",
    "LessonStatus",
    "LevelProgressResponse",
    "NO_ACTIVITY",
    "QuestionResult",
    "QuizAnswer",
    "QuizSubmissionRequest",
    "QuizSubmissionResponse",
    "QuizSubmitResult",
    "StudentProgressSummary",
    "TestResult",
    "TimeSpentRequest",
    "UserRole",
    "UserStatus",
    "XpHistoryResponse",
    "XpTransactionResponse",
]

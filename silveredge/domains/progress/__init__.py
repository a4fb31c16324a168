# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Progress domain package.

- LessonProgressService: lesson start, completion and time tracking
- SubmissionService: exercise and quiz grading with first-success XP
- ProgressAggregator: student, course and class roll-ups
"""

from silveredge.domains.progress.aggregator import ProgressAggregator
from silveredge.domains.progress.exceptions import (
    CourseNotFoundError,
    ExerciseNotFoundError,
    InvalidTimeSpentError,
    LessonNotFoundError,
    LessonProgressNotFoundError,
    ProgressServiceError,
    QuizNotFoundError,
)
from silveredge.domains.progress.grading import (
    QuizGrade,
    grade_exercise,
    grade_quiz,
    pass_threshold,
)
from silveredge.domains.progress.lessons import (
    LessonCompletionResult,
    LessonProgressService,
)
from silveredge.domains.progress.repositories import (
    AttendanceRepository,
    ContentRepository,
    ProgressRepository,
    RosterRepository,
)
from silveredge.domains.progress.submissions import SubmissionService

__all__ = [
    "AttendanceRepository",
    "ContentRepository",
    "CourseNotFoundError",
    "ExerciseNotFoundError",
    "InvalidTimeSpentError",
    "LessonCompletionResult",
    "LessonNotFoundError",
    "LessonProgressNotFoundError",
    "LessonProgressService",
    "ProgressAggregator",
    "ProgressRepository",
    "ProgressServiceError",
    "QuizGrade",
    "QuizNotFoundError",
    "RosterRepository",
    "SubmissionService",
    "grade_exercise",
    "grade_quiz",
    "pass_threshold",
]

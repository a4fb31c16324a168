# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Lesson, course and student progress schemas."""

from datetime import datetime

from pydantic import Field

from silveredge.models.common import APIModel, LessonStatus
from silveredge.models.submissions import (
    ExerciseSubmissionResponse,
    QuizSubmissionResponse,
)


class LessonProgressResponse(APIModel):
    """Progress of one student in one lesson.

    ``id`` is None for the not_started view, which has no stored record.
    """

    id: str | None = None
    student_id: str
    lesson_id: str
    status: LessonStatus
    started_at: datetime | None = None
    completed_at: datetime | None = None
    time_spent_seconds: int = 0
    xp_earned: int = 0


class LessonProgressDetail(LessonProgressResponse):
    """Lesson progress plus the student's attempts in that lesson."""

    exercise_submissions: list[ExerciseSubmissionResponse] = Field(default_factory=list)
    quiz_submissions: list[QuizSubmissionResponse] = Field(default_factory=list)


class LessonCompletionResponse(APIModel):
    """Result of completing a lesson. xp_earned is 0 on repeat completion."""

    progress: LessonProgressResponse
    xp_earned: int


class TimeSpentRequest(APIModel):
    """Seconds to add to the time spent in a lesson."""

    delta_seconds: int


class CourseProgressResponse(APIModel):
    """A student's completion of one course."""

    course_id: str
    course_title: str
    total_lessons: int
    completed_lessons: int
    progress_percent: int
    last_accessed_at: datetime | None = None


class StudentProgressSummary(APIModel):
    """Roll-up of a student's progress across the class courses."""

    total_lessons: int = 0
    completed_lessons: int = 0
    in_progress_lessons: int = 0
    total_xp_earned: int = 0
    courses_started: int = 0
    courses_completed: int = 0
    level: int = 1
    current_streak_days: int = 0
    courses: list[CourseProgressResponse] = Field(default_factory=list)

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course and class progress aggregation.

Roll-ups are computed on demand from lesson progress, class membership
and attendance. Every figure degrades to 0 or "No activity" on missing
data so dashboards always render; only asking for a specific course that
does not exist raises.

Usage:
    from silveredge.domains.progress import ProgressAggregator

    aggregator = ProgressAggregator.from_session(db)
    stats = await aggregator.compute_class_stats(class_id)
"""

from __future__ import annotations

import logging
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from silveredge.core.config import get_settings
from silveredge.domains.gamification.levels import level_for_xp
from silveredge.domains.gamification.streaks import effective_streak
from silveredge.domains.progress.exceptions import CourseNotFoundError
from silveredge.domains.progress.repositories import (
    AttendanceRepository,
    ContentRepository,
    ProgressRepository,
    RosterRepository,
)
from silveredge.models.classes import NO_ACTIVITY, ClassCourseProgress, ClassStats
from silveredge.models.common import AttendanceStatus, LessonStatus
from silveredge.models.progress import CourseProgressResponse, StudentProgressSummary
from silveredge.utils.datetime import format_iso, local_day, utc_now

logger = logging.getLogger(__name__)


def round_percent(part: int, whole: int) -> int:
    """Percentage of part in whole, rounded half up; 0 when whole is 0."""
    if whole <= 0:
        return 0
    return (200 * part + whole) // (2 * whole)


def round_mean(values: list[int]) -> int:
    """Mean of integers rounded half up; 0 for no values."""
    if not values:
        return 0
    return (2 * sum(values) + len(values)) // (2 * len(values))


class ProgressAggregator:
    """Computes student, course and class progress figures.

    Attributes:
        content: Course and lesson lookups.
        progress: Lesson progress counts.
        roster: Class membership and profiles.
        attendance: Attendance counts.
    """

    def __init__(
        self,
        content: ContentRepository,
        progress: ProgressRepository,
        roster: RosterRepository,
        attendance: AttendanceRepository,
        attendance_window_days: int | None = None,
        tz_name: str | None = None,
    ) -> None:
        config = get_settings().gamification
        self.content = content
        self.progress = progress
        self.roster = roster
        self.attendance = attendance
        self.attendance_window_days = attendance_window_days or config.attendance_window_days
        self.tz_name = tz_name or config.timezone
        self.level_step = config.level_xp_step

    @classmethod
    def from_session(cls, db: AsyncSession) -> ProgressAggregator:
        """Build an aggregator over database-backed repositories."""
        return cls(
            ContentRepository(db),
            ProgressRepository(db),
            RosterRepository(db),
            AttendanceRepository(db),
        )

    async def course_progress_percent(self, student_id: str, course_id: str) -> int:
        """Percentage of a course's published lessons the student completed."""
        lesson_ids = await self.content.list_published_lesson_ids(course_id)
        counts = await self.progress.count_by_status(student_id, lesson_ids)
        return round_percent(counts.get(LessonStatus.COMPLETED.value, 0), len(lesson_ids))

    async def get_student_course_progress(
        self,
        student_id: str,
        course_id: str,
    ) -> CourseProgressResponse:
        """Get a student's progress in one course.

        Args:
            student_id: Student user identifier.
            course_id: Course identifier.

        Returns:
            Lesson totals, completion percentage and last access time.

        Raises:
            CourseNotFoundError: If the course does not exist.
        """
        course = await self.content.get_course(course_id)
        if course is None:
            raise CourseNotFoundError(f"Course not found: {course_id}")

        lesson_ids = await self.content.list_published_lesson_ids(course_id)
        counts = await self.progress.count_by_status(student_id, lesson_ids)
        completed = counts.get(LessonStatus.COMPLETED.value, 0)

        return CourseProgressResponse(
            course_id=course.id,
            course_title=course.title,
            total_lessons=len(lesson_ids),
            completed_lessons=completed,
            progress_percent=round_percent(completed, len(lesson_ids)),
            last_accessed_at=await self.progress.last_accessed_at(student_id, lesson_ids),
        )

    async def get_student_progress_summary(self, student_id: str) -> StudentProgressSummary:
        """Roll up a student's progress over the courses of their class.

        A student without a profile or class gets an all-zero summary.
        """
        profile = await self.roster.get_profile(student_id)
        if profile is None:
            return StudentProgressSummary()

        summary = StudentProgressSummary(
            total_xp_earned=profile.total_xp,
            level=level_for_xp(profile.total_xp, self.level_step),
            current_streak_days=effective_streak(
                profile.last_active_on,
                profile.current_streak_days,
                local_day(utc_now(), self.tz_name),
            ),
        )
        if profile.class_id is None:
            return summary

        for course in await self.roster.list_courses(profile.class_id):
            lesson_ids = await self.content.list_published_lesson_ids(course.id)
            counts = await self.progress.count_by_status(student_id, lesson_ids)
            completed = counts.get(LessonStatus.COMPLETED.value, 0)
            in_progress = counts.get(LessonStatus.IN_PROGRESS.value, 0)

            summary.total_lessons += len(lesson_ids)
            summary.completed_lessons += completed
            summary.in_progress_lessons += in_progress
            if completed > 0:
                summary.courses_started += 1
                if completed == len(lesson_ids):
                    summary.courses_completed += 1

            summary.courses.append(
                CourseProgressResponse(
                    course_id=course.id,
                    course_title=course.title,
                    total_lessons=len(lesson_ids),
                    completed_lessons=completed,
                    progress_percent=round_percent(completed, len(lesson_ids)),
                    last_accessed_at=await self.progress.last_accessed_at(student_id, lesson_ids),
                )
            )

        return summary

    async def class_course_progress(self, class_id: str, course_id: str) -> int:
        """Average completion percentage of a class's students in a course."""
        student_ids = await self.roster.list_student_ids(class_id)
        if not student_ids:
            return 0
        lesson_ids = await self.content.list_published_lesson_ids(course_id)
        return round_mean(await self._student_percents(student_ids, lesson_ids))

    async def compute_class_stats(self, class_id: str) -> ClassStats:
        """Attendance rate, average progress and last activity of a class.

        Attendance covers the trailing window (30 days by default) and
        counts present and late marks as attended. Average progress is the
        mean of every student's completion percentage in every course
        assigned to the class.
        """
        if await self.roster.get_class(class_id) is None:
            logger.debug("Class %s not found, returning default stats", class_id)
            return ClassStats()

        student_ids = await self.roster.list_student_ids(class_id)

        today = local_day(utc_now(), self.tz_name)
        since = today - timedelta(days=self.attendance_window_days)
        marks = await self.attendance.count_by_status(class_id, since)
        attended = marks.get(AttendanceStatus.PRESENT.value, 0) + marks.get(
            AttendanceStatus.LATE.value, 0
        )
        attendance_rate = round_percent(attended, sum(marks.values()))

        percents: list[int] = []
        if student_ids:
            for course in await self.roster.list_courses(class_id):
                lesson_ids = await self.content.list_published_lesson_ids(course.id)
                percents.extend(await self._student_percents(student_ids, lesson_ids))

        last_activity = await self.roster.last_activity(student_ids)

        return ClassStats(
            attendance_rate=attendance_rate,
            avg_progress=round_mean(percents),
            last_activity=format_iso(last_activity) if last_activity else NO_ACTIVITY,
        )

    async def get_class_courses_with_progress(self, class_id: str) -> list[ClassCourseProgress]:
        """Courses assigned to a class with the class average for each."""
        student_ids = await self.roster.list_student_ids(class_id)

        courses = []
        for course in await self.roster.list_courses(class_id):
            lesson_ids = await self.content.list_published_lesson_ids(course.id)
            percents = await self._student_percents(student_ids, lesson_ids)
            courses.append(
                ClassCourseProgress(
                    course_id=course.id,
                    title=course.title,
                    status=course.status,
                    total_lessons=len(lesson_ids),
                    progress_percent=round_mean(percents),
                )
            )
        return courses

    async def _student_percents(
        self,
        student_ids: list[str],
        lesson_ids: list[str],
    ) -> list[int]:
        """Each student's rounded completion percentage of the lessons."""
        completed = await self.progress.completed_counts_by_student(student_ids, lesson_ids)
        return [
            round_percent(completed.get(student_id, 0), len(lesson_ids))
            for student_id in student_ids
        ]

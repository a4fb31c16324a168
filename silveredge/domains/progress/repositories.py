# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Read-only repositories used by the progress aggregator.

Each repository answers one family of questions with plain values, so
the aggregator can be exercised with in-memory fakes.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from silveredge.infrastructure.database.models import (
    Attendance,
    Class,
    ClassCourse,
    ClassStudent,
    Course,
    Lesson,
    LessonProgress,
    Section,
    StudentProfile,
)
from silveredge.models.common import LessonStatus


class ContentRepository:
    """Course, section and lesson lookups."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_course(self, course_id: str) -> Course | None:
        return await self.db.get(Course, course_id)

    async def list_published_lesson_ids(self, course_id: str) -> list[str]:
        """Ids of the published lessons of a course, in course order."""
        rows = await self.db.scalars(
            select(Lesson.id)
            .join(Section, Section.id == Lesson.section_id)
            .where(Section.course_id == course_id, Lesson.is_published.is_(True))
            .order_by(Section.order_index, Lesson.order_index)
        )
        return list(rows.all())


class ProgressRepository:
    """Lesson progress counts."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def count_by_status(
        self,
        student_id: str,
        lesson_ids: Sequence[str],
    ) -> dict[str, int]:
        """Count a student's progress records per status within some lessons."""
        if not lesson_ids:
            return {}
        result = await self.db.execute(
            select(LessonProgress.status, func.count())
            .where(
                LessonProgress.student_id == student_id,
                LessonProgress.lesson_id.in_(lesson_ids),
            )
            .group_by(LessonProgress.status)
        )
        return {status: count for status, count in result.all()}

    async def completed_counts_by_student(
        self,
        student_ids: Sequence[str],
        lesson_ids: Sequence[str],
    ) -> dict[str, int]:
        """Completed lesson count per student; students with none are absent."""
        if not student_ids or not lesson_ids:
            return {}
        result = await self.db.execute(
            select(LessonProgress.student_id, func.count())
            .where(
                LessonProgress.student_id.in_(student_ids),
                LessonProgress.lesson_id.in_(lesson_ids),
                LessonProgress.status == LessonStatus.COMPLETED.value,
            )
            .group_by(LessonProgress.student_id)
        )
        return {student_id: count for student_id, count in result.all()}

    async def last_accessed_at(
        self,
        student_id: str,
        lesson_ids: Sequence[str],
    ) -> datetime | None:
        if not lesson_ids:
            return None
        return await self.db.scalar(
            select(func.max(LessonProgress.updated_at)).where(
                LessonProgress.student_id == student_id,
                LessonProgress.lesson_id.in_(lesson_ids),
            )
        )


class RosterRepository:
    """Class membership and student profiles."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_class(self, class_id: str) -> Class | None:
        return await self.db.get(Class, class_id)

    async def list_student_ids(self, class_id: str) -> list[str]:
        rows = await self.db.scalars(
            select(ClassStudent.student_id).where(ClassStudent.class_id == class_id)
        )
        return list(rows.all())

    async def list_courses(self, class_id: str) -> list[Course]:
        rows = await self.db.scalars(
            select(Course)
            .join(ClassCourse, ClassCourse.course_id == Course.id)
            .where(ClassCourse.class_id == class_id)
            .order_by(Course.title)
        )
        return list(rows.all())

    async def get_profile(self, student_id: str) -> StudentProfile | None:
        result = await self.db.execute(
            select(StudentProfile)
            .where(StudentProfile.user_id == student_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def last_activity(self, student_ids: Sequence[str]) -> datetime | None:
        """Most recent activity time across students."""
        if not student_ids:
            return None
        return await self.db.scalar(
            select(func.max(StudentProfile.last_activity_date)).where(
                StudentProfile.user_id.in_(student_ids)
            )
        )


class AttendanceRepository:
    """Attendance record counts."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def count_by_status(self, class_id: str, since: date) -> dict[str, int]:
        """Count a class's attendance marks per status on or after ``since``."""
        result = await self.db.execute(
            select(Attendance.status, func.count())
            .where(Attendance.class_id == class_id, Attendance.date >= since)
            .group_by(Attendance.status)
        )
        return {status: count for status, count in result.all()}

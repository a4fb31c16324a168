# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for progress aggregation over in-memory repositories."""

from collections import Counter
from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from silveredge.domains.progress import CourseNotFoundError, ProgressAggregator
from silveredge.domains.progress.aggregator import round_mean, round_percent
from silveredge.models.classes import NO_ACTIVITY
from silveredge.utils.datetime import local_day, utc_now


class FakeContent:
    def __init__(self) -> None:
        self.courses: dict[str, SimpleNamespace] = {}
        self.lessons: dict[str, list[str]] = {}

    def add_course(self, course_id: str, lesson_count: int, title: str = "") -> SimpleNamespace:
        course = SimpleNamespace(id=course_id, title=title or course_id, status="published")
        self.courses[course_id] = course
        self.lessons[course_id] = [f"{course_id}-l{i}" for i in range(lesson_count)]
        return course

    async def get_course(self, course_id):
        return self.courses.get(course_id)

    async def list_published_lesson_ids(self, course_id):
        return list(self.lessons.get(course_id, []))


class FakeProgress:
    def __init__(self) -> None:
        self.statuses: dict[tuple[str, str], str] = {}

    def mark(self, student_id: str, lesson_ids: list[str], status: str = "completed") -> None:
        for lesson_id in lesson_ids:
            self.statuses[(student_id, lesson_id)] = status

    async def count_by_status(self, student_id, lesson_ids):
        return dict(
            Counter(
                status
                for (sid, lid), status in self.statuses.items()
                if sid == student_id and lid in lesson_ids
            )
        )

    async def completed_counts_by_student(self, student_ids, lesson_ids):
        return dict(
            Counter(
                sid
                for (sid, lid), status in self.statuses.items()
                if sid in student_ids and lid in lesson_ids and status == "completed"
            )
        )

    async def last_accessed_at(self, student_id, lesson_ids):
        return None


class FakeRoster:
    def __init__(self) -> None:
        self.classes: set[str] = set()
        self.members: dict[str, list[str]] = {}
        self.class_courses: dict[str, list[SimpleNamespace]] = {}
        self.profiles: dict[str, SimpleNamespace] = {}
        self.last_seen: datetime | None = None

    async def get_class(self, class_id):
        return SimpleNamespace(id=class_id) if class_id in self.classes else None

    async def list_student_ids(self, class_id):
        return list(self.members.get(class_id, []))

    async def list_courses(self, class_id):
        return list(self.class_courses.get(class_id, []))

    async def get_profile(self, student_id):
        return self.profiles.get(student_id)

    async def last_activity(self, student_ids):
        return self.last_seen if student_ids else None


class FakeAttendance:
    def __init__(self) -> None:
        self.marks: dict[str, dict[str, int]] = {}
        self.since: date | None = None

    async def count_by_status(self, class_id, since):
        self.since = since
        return dict(self.marks.get(class_id, {}))


@pytest.fixture
def content() -> FakeContent:
    return FakeContent()


@pytest.fixture
def progress() -> FakeProgress:
    return FakeProgress()


@pytest.fixture
def roster() -> FakeRoster:
    return FakeRoster()


@pytest.fixture
def attendance() -> FakeAttendance:
    return FakeAttendance()


@pytest.fixture
def aggregator(content, progress, roster, attendance) -> ProgressAggregator:
    return ProgressAggregator(content, progress, roster, attendance)


def _profile(class_id: str | None = None, total_xp: int = 0, streak: int = 0, last_on=None):
    return SimpleNamespace(
        class_id=class_id,
        total_xp=total_xp,
        current_streak_days=streak,
        last_active_on=last_on,
    )


class TestRounding:
    """Tests for half-up integer rounding."""

    @pytest.mark.parametrize(
        ("part", "whole", "expected"),
        [(0, 0, 0), (5, 0, 0), (1, 3, 33), (2, 3, 67), (1, 2, 50), (1, 8, 13), (3, 3, 100)],
    )
    def test_round_percent(self, part: int, whole: int, expected: int) -> None:
        assert round_percent(part, whole) == expected

    @pytest.mark.parametrize(
        ("values", "expected"),
        [([], 0), ([1, 2], 2), ([33, 67], 50), ([0, 0, 1], 0), ([100, 50, 0], 50)],
    )
    def test_round_mean(self, values: list[int], expected: int) -> None:
        assert round_mean(values) == expected


class TestCourseProgress:
    """Tests for one student's course progress."""

    @pytest.mark.asyncio
    async def test_completed_fraction(self, aggregator, content, progress) -> None:
        content.add_course("c1", 3, title="Python Basics")
        progress.mark("s1", ["c1-l0"])
        progress.mark("s1", ["c1-l1"], status="in_progress")

        result = await aggregator.get_student_course_progress("s1", "c1")

        assert result.course_title == "Python Basics"
        assert result.total_lessons == 3
        assert result.completed_lessons == 1
        assert result.progress_percent == 33

    @pytest.mark.asyncio
    async def test_course_without_lessons_is_zero(self, aggregator, content) -> None:
        content.add_course("empty", 0)

        result = await aggregator.get_student_course_progress("s1", "empty")

        assert result.progress_percent == 0
        assert result.total_lessons == 0

    @pytest.mark.asyncio
    async def test_percent_rounds_half_up(self, aggregator, content, progress) -> None:
        content.add_course("c2", 8)
        progress.mark("s1", ["c2-l0"])

        # 1 of 8 is 12.5%
        assert await aggregator.course_progress_percent("s1", "c2") == 13
        assert await aggregator.course_progress_percent("s1", "missing") == 0

    @pytest.mark.asyncio
    async def test_unknown_course_raises(self, aggregator) -> None:
        with pytest.raises(CourseNotFoundError):
            await aggregator.get_student_course_progress("s1", "missing")


class TestStudentSummary:
    """Tests for the student roll-up."""

    @pytest.mark.asyncio
    async def test_unknown_student_gets_zeros(self, aggregator) -> None:
        summary = await aggregator.get_student_progress_summary("nobody")

        assert summary.total_lessons == 0
        assert summary.total_xp_earned == 0
        assert summary.level == 1
        assert summary.courses == []

    @pytest.mark.asyncio
    async def test_student_without_class(self, aggregator, roster) -> None:
        roster.profiles["s1"] = _profile(total_xp=150)

        summary = await aggregator.get_student_progress_summary("s1")

        assert summary.total_xp_earned == 150
        assert summary.level == 2
        assert summary.total_lessons == 0

    @pytest.mark.asyncio
    async def test_rolls_up_class_courses(self, aggregator, content, progress, roster) -> None:
        today = local_day(utc_now())
        a = content.add_course("a", 2)
        b = content.add_course("b", 3)
        content.add_course("other", 4)
        roster.class_courses["k1"] = [a, b]
        roster.profiles["s1"] = _profile("k1", total_xp=320, streak=3, last_on=today)
        progress.mark("s1", ["a-l0", "a-l1"])
        progress.mark("s1", ["b-l0"], status="in_progress")
        progress.mark("s1", ["other-l0"])

        summary = await aggregator.get_student_progress_summary("s1")

        assert summary.total_lessons == 5
        assert summary.completed_lessons == 2
        assert summary.in_progress_lessons == 1
        assert summary.courses_started == 1
        assert summary.courses_completed == 1
        assert summary.level == 3
        assert summary.current_streak_days == 3
        assert [c.progress_percent for c in summary.courses] == [100, 0]

    @pytest.mark.asyncio
    async def test_broken_streak_reads_zero(self, aggregator, roster) -> None:
        last_on = local_day(utc_now()) - timedelta(days=3)
        roster.profiles["s1"] = _profile(streak=9, last_on=last_on)

        summary = await aggregator.get_student_progress_summary("s1")

        assert summary.current_streak_days == 0


class TestClassStats:
    """Tests for class dashboard figures."""

    @pytest.mark.asyncio
    async def test_unknown_class_defaults(self, aggregator) -> None:
        stats = await aggregator.compute_class_stats("missing")

        assert stats.attendance_rate == 0
        assert stats.avg_progress == 0
        assert stats.last_activity == NO_ACTIVITY

    @pytest.mark.asyncio
    async def test_empty_class(self, aggregator, roster) -> None:
        roster.classes.add("k1")

        stats = await aggregator.compute_class_stats("k1")

        assert (stats.attendance_rate, stats.avg_progress) == (0, 0)
        assert stats.last_activity == NO_ACTIVITY

    @pytest.mark.asyncio
    async def test_attendance_counts_present_and_late(self, aggregator, roster, attendance) -> None:
        roster.classes.add("k1")
        attendance.marks["k1"] = {"present": 3, "late": 1, "absent": 3, "excused": 1}

        stats = await aggregator.compute_class_stats("k1")

        assert stats.attendance_rate == 50
        assert attendance.since == local_day(utc_now()) - timedelta(days=30)

    @pytest.mark.asyncio
    async def test_average_progress_over_students_and_courses(
        self, aggregator, content, progress, roster
    ) -> None:
        a = content.add_course("a", 4)
        b = content.add_course("b", 2)
        roster.classes.add("k1")
        roster.members["k1"] = ["s1", "s2"]
        roster.class_courses["k1"] = [a, b]
        roster.last_seen = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)
        progress.mark("s1", ["a-l0", "a-l1", "b-l0", "b-l1"])
        progress.mark("s2", ["a-l0"])

        stats = await aggregator.compute_class_stats("k1")

        # s1: 50, 100; s2: 25, 0
        assert stats.avg_progress == 44
        assert stats.last_activity == "2025-03-01T12:00:00+00:00"


class TestClassCourses:
    """Tests for per-course class averages."""

    @pytest.mark.asyncio
    async def test_course_averages(self, aggregator, content, progress, roster) -> None:
        a = content.add_course("a", 2, title="Alpha")
        roster.members["k1"] = ["s1", "s2"]
        roster.class_courses["k1"] = [a]
        progress.mark("s1", ["a-l0"])

        courses = await aggregator.get_class_courses_with_progress("k1")

        assert len(courses) == 1
        assert courses[0].title == "Alpha"
        assert courses[0].total_lessons == 2
        assert courses[0].progress_percent == 25

    @pytest.mark.asyncio
    async def test_class_course_progress_without_students(self, aggregator, content) -> None:
        content.add_course("a", 2)

        assert await aggregator.class_course_progress("k1", "a") == 0

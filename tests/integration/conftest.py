# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest fixtures for database-backed service tests.

Each test gets its own SQLite file with the full schema, a session for
the code under test, and a Seeder that inserts users, content and
classes through a separate session.
"""

from datetime import date
from pathlib import Path
from typing import Any, AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from silveredge.infrastructure.database import create_engine_for_url, create_schema, create_sessionmaker
from silveredge.infrastructure.database.models import (
    Attendance,
    Class,
    ClassCourse,
    ClassStudent,
    Course,
    Exercise,
    Lesson,
    Quiz,
    Section,
    StudentParent,
    StudentProfile,
    User,
)
from silveredge.infrastructure.events import EventData, get_event_bus


@pytest_asyncio.fixture(scope="function")
async def db_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """Create a SQLite engine with the schema created."""
    engine = create_engine_for_url(f"sqlite+aiosqlite:///{tmp_path / 'progress.db'}")
    await create_schema(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return create_sessionmaker(db_engine)


@pytest_asyncio.fixture(scope="function")
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Session handed to the service under test."""
    async with session_factory() as session:
        yield session


class Seeder:
    """Inserts fixture rows, committing each call."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory
        self._counter = 0

    async def _add(self, *rows: Any) -> None:
        async with self.session_factory() as session:
            session.add_all(rows)
            await session.commit()

    def _next(self) -> int:
        self._counter += 1
        return self._counter

    async def student(self, with_profile: bool = True, **profile_values: Any) -> User:
        n = self._next()
        user = User(username=f"student{n}", display_name=f"Student {n}", role="student")
        await self._add(user)
        if with_profile:
            await self._add(StudentProfile(user_id=user.id, **profile_values))
        return user

    async def user(self, role: str) -> User:
        n = self._next()
        user = User(username=f"{role}{n}", display_name=f"{role.title()} {n}", role=role)
        await self._add(user)
        return user

    async def link_parent(self, student_id: str, parent_id: str) -> None:
        await self._add(StudentParent(student_id=student_id, parent_id=parent_id))

    async def course(self, title: str = "Python Basics", status: str = "published") -> Course:
        course = Course(title=title, status=status)
        await self._add(course)
        return course

    async def section(self, course: Course, order_index: int = 0) -> Section:
        section = Section(course_id=course.id, title=f"Section {order_index}", order_index=order_index)
        await self._add(section)
        return section

    async def lesson(
        self,
        section: Section,
        xp_reward: int = 10,
        is_published: bool = True,
        order_index: int = 0,
        title: str | None = None,
    ) -> Lesson:
        lesson = Lesson(
            section_id=section.id,
            title=title or f"Lesson {self._next()}",
            xp_reward=xp_reward,
            is_published=is_published,
            order_index=order_index,
        )
        await self._add(lesson)
        return lesson

    async def course_with_lessons(
        self,
        count: int,
        xp_reward: int = 10,
        title: str = "Python Basics",
    ) -> tuple[Course, list[Lesson]]:
        course = await self.course(title)
        section = await self.section(course)
        lessons = [
            await self.lesson(section, xp_reward=xp_reward, order_index=i) for i in range(count)
        ]
        return course, lessons

    async def exercise(self, lesson: Lesson, xp_reward: int = 15) -> Exercise:
        exercise = Exercise(lesson_id=lesson.id, title="Print hello", xp_reward=xp_reward)
        await self._add(exercise)
        return exercise

    async def quiz(
        self,
        lesson: Lesson,
        questions: list[dict[str, Any]],
        xp_reward: int = 20,
    ) -> Quiz:
        quiz = Quiz(lesson_id=lesson.id, title="Loops quiz", xp_reward=xp_reward, questions=questions)
        await self._add(quiz)
        return quiz

    async def class_(self, name: str = "Class 1A") -> Class:
        class_ = Class(name=name)
        await self._add(class_)
        return class_

    async def assign_course(self, class_: Class, course: Course) -> None:
        await self._add(ClassCourse(class_id=class_.id, course_id=course.id))

    async def enroll(self, class_: Class, student: User) -> None:
        await self._add(ClassStudent(class_id=class_.id, student_id=student.id))
        async with self.session_factory() as session:
            profile = (
                await session.execute(
                    select(StudentProfile).where(StudentProfile.user_id == student.id)
                )
            ).scalar_one_or_none()
            if profile is not None:
                profile.class_id = class_.id
                await session.commit()

    async def attendance(self, class_: Class, student: User, day: date, status: str) -> None:
        await self._add(
            Attendance(class_id=class_.id, student_id=student.id, date=day, status=status)
        )

    async def profile(self, student_id: str) -> StudentProfile:
        """Read a profile through a fresh session."""
        async with self.session_factory() as session:
            result = await session.execute(
                select(StudentProfile).where(StudentProfile.user_id == student_id)
            )
            return result.scalar_one()


@pytest.fixture
def seed(session_factory: async_sessionmaker[AsyncSession]) -> Seeder:
    """Row factory for the test database."""
    return Seeder(session_factory)


@pytest.fixture
def recorded_events() -> list[EventData]:
    """Every event published on the application bus during the test."""
    events: list[EventData] = []

    async def record(event: EventData) -> None:
        events.append(event)

    get_event_bus().subscribe("*", record)
    return events

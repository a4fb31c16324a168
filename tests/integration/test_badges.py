# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for badge evaluation and event triggers."""

import asyncio

import pytest
import pytest_asyncio
from sqlalchemy import select, update

from silveredge.domains.activity import StudentActivityService
from silveredge.domains.gamification import (
    BadgeEvaluator,
    register_badge_triggers,
    unregister_badge_triggers,
)
from silveredge.domains.progress import LessonProgressService
from silveredge.infrastructure.database.models import Badge, StudentBadge
from silveredge.infrastructure.database.seeds import DEFAULT_BADGES, seed_badges
from silveredge.infrastructure.events import EventBus, EventTypes, get_event_bus
from silveredge.models.common import BadgeTriggerType

pytestmark = pytest.mark.integration


@pytest_asyncio.fixture
async def badges(session_factory) -> dict[str, Badge]:
    """Default catalog, by name."""
    async with session_factory() as session:
        created = await seed_badges(session)
        await session.commit()
    return {badge.name: badge for badge in created}


@pytest.fixture
def evaluator(db_session) -> BadgeEvaluator:
    return BadgeEvaluator(db_session)


class TestEvaluate:
    """Tests for awarding badges from counters."""

    @pytest.mark.asyncio
    async def test_no_activity_awards_nothing(self, evaluator, seed, badges) -> None:
        student = await seed.student()

        assert await evaluator.evaluate(student.id) == []

    @pytest.mark.asyncio
    async def test_first_lesson_badge_awarded_once(self, evaluator, db_session, seed, badges) -> None:
        student = await seed.student()
        _, lessons = await seed.course_with_lessons(2)
        await LessonProgressService(db_session, EventBus()).complete_lesson(lessons[0].id, student.id)

        first = await evaluator.evaluate(student.id)
        second = await evaluator.evaluate(student.id)

        assert [badge.name for badge in first] == ["Code Voyager"]
        assert second == []

    @pytest.mark.asyncio
    async def test_xp_threshold(self, evaluator, seed, badges) -> None:
        student = await seed.student(total_xp=600)

        awarded = await evaluator.evaluate(student.id)

        assert [badge.name for badge in awarded] == ["XP Hunter"]

    @pytest.mark.asyncio
    async def test_level_threshold(self, evaluator, seed, badges) -> None:
        student = await seed.student(total_xp=1000)

        awarded = await evaluator.evaluate(student.id, [BadgeTriggerType.LEVEL_REACHED])

        assert [badge.name for badge in awarded] == ["Rising Star"]

    @pytest.mark.asyncio
    async def test_trigger_filter(self, evaluator, seed, badges) -> None:
        student = await seed.student(total_xp=600, login_count=1)

        awarded = await evaluator.evaluate(student.id, [BadgeTriggerType.FIRST_LOGIN])
        nothing = await evaluator.evaluate(student.id, [])

        assert [badge.name for badge in awarded] == ["First Steps"]
        assert nothing == []

    @pytest.mark.asyncio
    async def test_finishing_course(self, evaluator, db_session, seed, badges) -> None:
        student = await seed.student()
        _, (lesson,) = await seed.course_with_lessons(1)
        await LessonProgressService(db_session, EventBus()).complete_lesson(lesson.id, student.id)

        awarded = await evaluator.evaluate(student.id)

        assert {badge.name for badge in awarded} == {"Code Voyager", "Course Completer"}

    @pytest.mark.asyncio
    async def test_unpublished_lessons_do_not_block_course(self, evaluator, db_session, seed, badges) -> None:
        student = await seed.student()
        course = await seed.course()
        section = await seed.section(course)
        lesson = await seed.lesson(section)
        await seed.lesson(section, is_published=False, order_index=1)
        await LessonProgressService(db_session, EventBus()).complete_lesson(lesson.id, student.id)

        counters = await evaluator.compute_counters(student.id)

        assert counters.courses_finished == 1

    @pytest.mark.asyncio
    async def test_inactive_badge_skipped(self, evaluator, db_session, seed, session_factory, badges) -> None:
        student = await seed.student()
        _, lessons = await seed.course_with_lessons(2)
        async with session_factory() as session:
            await session.execute(
                update(Badge).where(Badge.name == "Code Voyager").values(is_active=False)
            )
            await session.commit()
        await LessonProgressService(db_session, EventBus()).complete_lesson(lessons[0].id, student.id)

        assert await evaluator.evaluate(student.id) == []

    @pytest.mark.asyncio
    async def test_missing_profile_awards_nothing(self, evaluator, seed, badges) -> None:
        student = await seed.student(with_profile=False)

        assert await evaluator.evaluate(student.id) == []

    @pytest.mark.asyncio
    async def test_publishes_badge_awarded(self, db_session, seed, badges) -> None:
        student = await seed.student(total_xp=600)
        bus = EventBus()
        received = []

        async def record(event):
            received.append(event)

        bus.subscribe(EventTypes.Gamification.BADGE_AWARDED, record)

        await BadgeEvaluator(db_session, bus).evaluate(student.id)

        assert len(received) == 1
        assert received[0].payload["badge_name"] == "XP Hunter"
        assert received[0].payload["trigger_type"] == "xp_earned"


class TestAwardBadge:
    """Tests for the single-award guarantee."""

    @pytest.mark.asyncio
    async def test_duplicate_award_rejected(self, evaluator, db_session, seed, session_factory, badges) -> None:
        student = await seed.student()
        badge = badges["First Steps"]
        async with session_factory() as session:
            session.add(StudentBadge(student_id=student.id, badge_id=badge.id))
            await session.commit()

        assert await evaluator.award_badge(student.id, badge) is False
        await db_session.commit()

        rows = (await db_session.scalars(select(StudentBadge))).all()
        assert len(rows) == 1

    @pytest.mark.asyncio
    async def test_parallel_evaluations_award_once(self, session_factory, seed, badges) -> None:
        student = await seed.student(total_xp=600)

        async def evaluate() -> list[Badge]:
            async with session_factory() as session:
                return await BadgeEvaluator(session).evaluate(student.id)

        first, second = await asyncio.gather(evaluate(), evaluate())

        assert sorted([len(first), len(second)]) == [0, 1]
        async with session_factory() as session:
            held = (
                await session.scalars(
                    select(StudentBadge.badge_id).where(StudentBadge.student_id == student.id)
                )
            ).all()
        assert held == [badges["XP Hunter"].id]


class TestBadgeCatalog:
    """Tests for the catalog with per-student progress."""

    @pytest.mark.asyncio
    async def test_catalog_lists_every_badge(self, evaluator, seed, badges) -> None:
        student = await seed.student()

        catalog = await evaluator.get_badge_catalog(student.id)

        assert len(catalog) == len(DEFAULT_BADGES) == 25
        assert not any(entry.is_earned for entry in catalog)

    @pytest.mark.asyncio
    async def test_catalog_progress(self, evaluator, db_session, seed, badges) -> None:
        student = await seed.student()
        _, lessons = await seed.course_with_lessons(2)
        await LessonProgressService(db_session, EventBus()).complete_lesson(lessons[0].id, student.id)
        await evaluator.evaluate(student.id)

        catalog = {entry.name: entry for entry in await evaluator.get_badge_catalog(student.id)}

        voyager = catalog["Code Voyager"]
        assert voyager.is_earned is True
        assert voyager.earned_at is not None
        assert (voyager.progress, voyager.target) == (1, 1)
        streak = catalog["Learning Streak"]
        assert streak.is_earned is False
        assert (streak.progress, streak.target) == (1, 5)


class TestBadgeTriggers:
    """Tests for event-driven evaluation."""

    @pytest.mark.asyncio
    async def test_login_awards_first_steps(
        self, db_session, seed, session_factory, badges, recorded_events
    ) -> None:
        student = await seed.student()
        bus = get_event_bus()
        handler = register_badge_triggers(bus, session_factory)

        await StudentActivityService(db_session, bus).record_login(student.id)

        async with session_factory() as session:
            held = (
                await session.scalars(
                    select(Badge.name)
                    .join(StudentBadge, StudentBadge.badge_id == Badge.id)
                    .where(StudentBadge.student_id == student.id)
                )
            ).all()
        assert held == ["First Steps"]
        awarded = [
            e for e in recorded_events if e.event_type == EventTypes.Gamification.BADGE_AWARDED
        ]
        assert [e.payload["badge_name"] for e in awarded] == ["First Steps"]

        unregister_badge_triggers(bus, handler)

    @pytest.mark.asyncio
    async def test_lesson_completion_triggers(self, db_session, seed, session_factory, badges) -> None:
        student = await seed.student()
        _, lessons = await seed.course_with_lessons(2)
        bus = EventBus()
        register_badge_triggers(bus, session_factory)

        await LessonProgressService(db_session, bus).complete_lesson(lessons[0].id, student.id)

        async with session_factory() as session:
            count = len((await session.scalars(select(StudentBadge))).all())
        assert count == 1

    @pytest.mark.asyncio
    async def test_unregister_stops_evaluation(self, db_session, seed, session_factory, badges) -> None:
        student = await seed.student()
        bus = EventBus()
        handler = register_badge_triggers(bus, session_factory)
        unregister_badge_triggers(bus, handler)

        await StudentActivityService(db_session, bus).record_login(student.id)

        async with session_factory() as session:
            assert (await session.scalars(select(StudentBadge))).all() == []

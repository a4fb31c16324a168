# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Badge trigger evaluation.

Badges are awarded from event handlers rather than inline in each
service: every progress, XP and activity event re-evaluates the badges
whose trigger type belongs to that event against the student's current
counters.

A badge is awarded iff it is active, the student does not hold it yet,
and the counter for its trigger type has reached trigger_value (or, for
first-time triggers, is at least 1). The unique (student, badge)
constraint makes concurrent evaluations award each badge once; the losing
insert is rolled back to its savepoint and ignored.

Example:
    register_badge_triggers(get_event_bus(), get_sessionmaker())
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy import distinct, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from silveredge.core.config import get_settings
from silveredge.domains.gamification.levels import level_for_xp
from silveredge.domains.gamification.streaks import activity_day, effective_streak
from silveredge.infrastructure.database.models import (
    Badge,
    ExerciseSubmission,
    Lesson,
    LessonProgress,
    QuizSubmission,
    Section,
    StudentBadge,
    StudentProfile,
)
from silveredge.infrastructure.events import EventBus, EventData, EventHandler, EventTypes
from silveredge.models.common import BadgeTriggerType, LessonStatus
from silveredge.models.gamification import BadgeCatalogEntry, BadgeResponse
from silveredge.utils.datetime import utc_now

logger = logging.getLogger(__name__)

T = BadgeTriggerType

TRIGGERS_BY_EVENT: dict[str, frozenset[BadgeTriggerType]] = {
    EventTypes.Progress.LESSON_STARTED: frozenset(),
    EventTypes.Progress.LESSON_COMPLETED: frozenset(
        {T.FIRST_LESSON, T.LESSONS_COMPLETED, T.COURSES_FINISHED}
    ),
    EventTypes.Progress.EXERCISE_SUBMITTED: frozenset({T.FIRST_EXERCISE, T.EXERCISES_PASSED}),
    EventTypes.Progress.QUIZ_SUBMITTED: frozenset({T.FIRST_QUIZ}),
    EventTypes.Gamification.XP_AWARDED: frozenset({T.XP_EARNED, T.LEVEL_REACHED}),
    EventTypes.Student.LOGGED_IN: frozenset({T.FIRST_LOGIN}),
    EventTypes.Student.SANDBOX_PROJECT_CREATED: frozenset({T.FIRST_SANDBOX}),
}

# Any activity can extend the streak.
ALWAYS_CHECKED = frozenset({T.LOGIN_STREAK})


def triggers_for_event(event_type: str) -> frozenset[BadgeTriggerType]:
    """Trigger types to re-evaluate after an event."""
    return TRIGGERS_BY_EVENT.get(event_type, frozenset()) | ALWAYS_CHECKED


@dataclass
class StudentCounters:
    """Aggregate counters badge thresholds are compared against."""

    lessons_completed: int = 0
    exercises_passed: int = 0
    quizzes_passed: int = 0
    courses_finished: int = 0
    current_streak: int = 0
    total_xp: int = 0
    level: int = 1
    logins: int = 0
    sandbox_projects: int = 0

    def value_for(self, trigger_type: BadgeTriggerType) -> int:
        """Counter a trigger type is measured by."""
        return {
            T.FIRST_LOGIN: self.logins,
            T.FIRST_LESSON: self.lessons_completed,
            T.FIRST_EXERCISE: self.exercises_passed,
            T.FIRST_QUIZ: self.quizzes_passed,
            T.FIRST_SANDBOX: self.sandbox_projects,
            T.LESSONS_COMPLETED: self.lessons_completed,
            T.EXERCISES_PASSED: self.exercises_passed,
            T.COURSES_FINISHED: self.courses_finished,
            T.LOGIN_STREAK: self.current_streak,
            T.XP_EARNED: self.total_xp,
            T.LEVEL_REACHED: self.level,
        }[trigger_type]


def badge_target(badge: Badge) -> int | None:
    """Counter value that earns a badge; None for a misconfigured threshold badge."""
    if T(badge.trigger_type).is_first_time:
        return 1
    return badge.trigger_value


def qualifies(badge: Badge, counters: StudentCounters) -> bool:
    """Check whether counters meet a badge's trigger."""
    target = badge_target(badge)
    if target is None:
        logger.warning("Badge %s has no trigger value, skipping", badge.id)
        return False
    return counters.value_for(T(badge.trigger_type)) >= target


class BadgeEvaluator:
    """Evaluates and awards badges for one student at a time.

    Attributes:
        db: Async database session.
        event_bus: Bus that receives badge awarded events.
    """

    def __init__(self, db: AsyncSession, event_bus: EventBus | None = None) -> None:
        self.db = db
        self.event_bus = event_bus
        self.level_step = get_settings().gamification.level_xp_step

    async def compute_counters(self, student_id: str) -> StudentCounters | None:
        """Gather a student's counters.

        Returns:
            The counters, or None when the student has no profile.
        """
        result = await self.db.execute(
            select(StudentProfile)
            .where(StudentProfile.user_id == student_id)
            .execution_options(populate_existing=True)
        )
        profile = result.scalar_one_or_none()
        if profile is None:
            return None

        lessons_completed = await self.db.scalar(
            select(func.count())
            .select_from(LessonProgress)
            .where(
                LessonProgress.student_id == student_id,
                LessonProgress.status == LessonStatus.COMPLETED.value,
            )
        )
        exercises_passed = await self.db.scalar(
            select(func.count(distinct(ExerciseSubmission.exercise_id))).where(
                ExerciseSubmission.student_id == student_id,
                ExerciseSubmission.passed.is_(True),
            )
        )
        quizzes_passed = await self.db.scalar(
            select(func.count(distinct(QuizSubmission.quiz_id))).where(
                QuizSubmission.student_id == student_id,
                QuizSubmission.passed.is_(True),
            )
        )

        return StudentCounters(
            lessons_completed=lessons_completed or 0,
            exercises_passed=exercises_passed or 0,
            quizzes_passed=quizzes_passed or 0,
            courses_finished=await self._count_courses_finished(student_id),
            current_streak=effective_streak(
                profile.last_active_on,
                profile.current_streak_days,
                activity_day(utc_now()),
            ),
            total_xp=profile.total_xp,
            level=max(profile.current_level, level_for_xp(profile.total_xp, self.level_step)),
            logins=profile.login_count,
            sandbox_projects=profile.sandbox_project_count,
        )

    async def evaluate(
        self,
        student_id: str,
        trigger_types: Iterable[BadgeTriggerType] | None = None,
    ) -> list[Badge]:
        """Award every badge the student now qualifies for.

        Args:
            student_id: Student user identifier.
            trigger_types: Only consider badges of these trigger types;
                all active badges when None.

        Returns:
            Badges awarded by this call.
        """
        counters = await self.compute_counters(student_id)
        if counters is None:
            logger.debug("No profile for student %s, skipping badge evaluation", student_id)
            return []

        query = select(Badge).where(Badge.is_active.is_(True))
        if trigger_types is not None:
            types = [t.value for t in trigger_types]
            if not types:
                return []
            query = query.where(Badge.trigger_type.in_(types))
        candidates = (await self.db.scalars(query)).all()

        held = await self._held_badge_ids(student_id)
        awarded = []
        for badge in candidates:
            if badge.id in held or not qualifies(badge, counters):
                continue
            if await self.award_badge(student_id, badge):
                awarded.append(badge)

        await self.db.commit()

        for badge in awarded:
            logger.info("Awarded badge %s (%s) to student %s", badge.name, badge.id, student_id)
            if self.event_bus is not None:
                await self.event_bus.publish(
                    EventTypes.Gamification.BADGE_AWARDED,
                    {
                        "student_id": student_id,
                        "badge_id": badge.id,
                        "badge_name": badge.name,
                        "trigger_type": badge.trigger_type,
                    },
                )
        return awarded

    async def award_badge(self, student_id: str, badge: Badge) -> bool:
        """Insert a StudentBadge unless the student already holds it.

        Returns:
            True if this call created the award.
        """
        try:
            async with self.db.begin_nested():
                self.db.add(StudentBadge(student_id=student_id, badge_id=badge.id))
        except IntegrityError:
            logger.debug("Badge %s already held by student %s", badge.id, student_id)
            return False
        return True

    async def get_badge_catalog(self, student_id: str) -> list[BadgeCatalogEntry]:
        """List active badges with the student's status towards each.

        Args:
            student_id: Student user identifier.

        Returns:
            Catalog entries with earned flag, earn time and progress.
        """
        counters = await self.compute_counters(student_id) or StudentCounters()
        badges = (
            await self.db.scalars(
                select(Badge)
                .where(Badge.is_active.is_(True))
                .order_by(Badge.trigger_type, Badge.trigger_value, Badge.name)
            )
        ).all()
        earned = dict(
            (
                await self.db.execute(
                    select(StudentBadge.badge_id, StudentBadge.earned_at).where(
                        StudentBadge.student_id == student_id
                    )
                )
            ).all()
        )

        entries = []
        for badge in badges:
            target = badge_target(badge) or 0
            value = counters.value_for(T(badge.trigger_type))
            entries.append(
                BadgeCatalogEntry(
                    **BadgeResponse.model_validate(badge).model_dump(),
                    is_earned=badge.id in earned,
                    earned_at=earned.get(badge.id),
                    progress=min(value, target),
                    target=target,
                )
            )
        return entries

    async def _held_badge_ids(self, student_id: str) -> set[str]:
        rows = await self.db.scalars(
            select(StudentBadge.badge_id).where(StudentBadge.student_id == student_id)
        )
        return set(rows.all())

    async def _count_courses_finished(self, student_id: str) -> int:
        """Courses in which the student completed every published lesson."""
        totals = (
            select(Section.course_id, func.count(Lesson.id).label("total"))
            .join(Lesson, Lesson.section_id == Section.id)
            .where(Lesson.is_published.is_(True))
            .group_by(Section.course_id)
            .subquery()
        )
        done = (
            select(Section.course_id, func.count(LessonProgress.id).label("done"))
            .select_from(LessonProgress)
            .join(Lesson, Lesson.id == LessonProgress.lesson_id)
            .join(Section, Section.id == Lesson.section_id)
            .where(
                LessonProgress.student_id == student_id,
                LessonProgress.status == LessonStatus.COMPLETED.value,
                Lesson.is_published.is_(True),
            )
            .group_by(Section.course_id)
            .subquery()
        )
        count = await self.db.scalar(
            select(func.count())
            .select_from(done.join(totals, done.c.course_id == totals.c.course_id))
            .where(done.c.done >= totals.c.total)
        )
        return count or 0


def register_badge_triggers(
    event_bus: EventBus,
    sessionmaker: async_sessionmaker[AsyncSession],
) -> EventHandler:
    """Subscribe the badge evaluator to student activity events.

    Each event is evaluated in its own session, after the publishing
    service has committed.

    Args:
        event_bus: Bus to subscribe on.
        sessionmaker: Session factory for evaluation sessions.

    Returns:
        The subscribed handler, for unsubscribing.
    """

    async def on_student_activity(event: EventData) -> None:
        student_id = event.student_id
        if not student_id:
            return
        async with sessionmaker() as session:
            evaluator = BadgeEvaluator(session, event_bus)
            await evaluator.evaluate(student_id, triggers_for_event(event.event_type))

    for event_type in TRIGGERS_BY_EVENT:
        event_bus.subscribe(event_type, on_student_activity)

    logger.info("Badge triggers registered for %d event types", len(TRIGGERS_BY_EVENT))
    return on_student_activity


def unregister_badge_triggers(event_bus: EventBus, handler: EventHandler) -> None:
    """Remove a handler installed by register_badge_triggers."""
    for event_type in TRIGGERS_BY_EVENT:
        event_bus.unsubscribe(event_type, handler)

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Lesson progress tracking.

A student's progress in a lesson moves not_started (no record) →
in_progress → completed. Completed is terminal: the transition is a
conditional UPDATE, so only one caller ever wins it and the lesson's XP
is granted exactly once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from silveredge.domains.gamification.streaks import StreakTracker
from silveredge.domains.gamification.xp_ledger import XpLedger, publish_xp_awarded
from silveredge.domains.progress.exceptions import (
    InvalidTimeSpentError,
    LessonNotFoundError,
    LessonProgressNotFoundError,
)
from silveredge.infrastructure.database.models import (
    Exercise,
    ExerciseSubmission,
    Lesson,
    LessonProgress,
    QuizSubmission,
)
from silveredge.infrastructure.events import EventBus, EventTypes, get_event_bus
from silveredge.models.common import LessonStatus
from silveredge.models.progress import (
    LessonProgressDetail,
    LessonProgressResponse,
)
from silveredge.models.submissions import (
    ExerciseSubmissionResponse,
    QuizSubmissionResponse,
)
from silveredge.utils.datetime import utc_now

logger = logging.getLogger(__name__)


@dataclass
class LessonCompletionResult:
    """Progress after completion and the XP this call granted."""

    progress: LessonProgressResponse
    xp_earned: int


class LessonProgressService:
    """Service for per-student lesson progress.

    Attributes:
        db: Async database session.
        event_bus: Bus that receives events after each commit.
    """

    def __init__(self, db: AsyncSession, event_bus: EventBus | None = None) -> None:
        """Initialize lesson progress service.

        Args:
            db: Async database session.
            event_bus: Event bus; defaults to the application bus.
        """
        self.db = db
        self.event_bus = event_bus or get_event_bus()

    async def start_lesson(self, lesson_id: str, student_id: str) -> LessonProgressResponse:
        """Open a lesson for a student.

        Creates an in_progress record on first view; later calls return the
        existing record unchanged. Either way the student's activity is
        recorded.

        Args:
            lesson_id: Lesson identifier.
            student_id: Student user identifier.

        Returns:
            The student's progress in the lesson.

        Raises:
            LessonNotFoundError: If the lesson does not exist.
            StudentProfileNotFoundError: If the student has no profile.
        """
        await self._get_lesson(lesson_id)
        now = utc_now()

        await StreakTracker(self.db).record_activity(student_id, now)

        progress = await self._get_progress(lesson_id, student_id)
        created = False
        if progress is None:
            progress, created = await self._insert_progress(
                LessonProgress(
                    student_id=student_id,
                    lesson_id=lesson_id,
                    status=LessonStatus.IN_PROGRESS.value,
                    started_at=now,
                )
            )

        response = LessonProgressResponse.model_validate(progress)
        await self.db.commit()

        if created:
            logger.info("Student %s started lesson %s", student_id, lesson_id)
            await self.event_bus.publish(
                EventTypes.Progress.LESSON_STARTED,
                {"student_id": student_id, "lesson_id": lesson_id},
            )

        return response

    async def complete_lesson(self, lesson_id: str, student_id: str) -> LessonCompletionResult:
        """Mark a lesson completed and grant its XP once.

        Args:
            lesson_id: Lesson identifier.
            student_id: Student user identifier.

        Returns:
            The completed progress and the XP granted by this call, which is
            0 if the lesson was already completed.

        Raises:
            LessonNotFoundError: If the lesson does not exist.
            StudentProfileNotFoundError: If the student has no profile.
        """
        lesson = await self._get_lesson(lesson_id)
        now = utc_now()
        reward = max(lesson.xp_reward, 0)

        transitioned = False
        if await self._get_progress(lesson_id, student_id) is None:
            _, transitioned = await self._insert_progress(
                LessonProgress(
                    student_id=student_id,
                    lesson_id=lesson_id,
                    status=LessonStatus.COMPLETED.value,
                    started_at=now,
                    completed_at=now,
                    xp_earned=reward,
                )
            )

        if not transitioned:
            result = await self.db.execute(
                update(LessonProgress)
                .where(
                    LessonProgress.student_id == student_id,
                    LessonProgress.lesson_id == lesson_id,
                    LessonProgress.status != LessonStatus.COMPLETED.value,
                )
                .values(
                    status=LessonStatus.COMPLETED.value,
                    completed_at=now,
                    xp_earned=reward,
                )
                .execution_options(synchronize_session=False)
            )
            transitioned = result.rowcount == 1

        award = None
        if transitioned:
            award = await XpLedger(self.db).award_xp(
                student_id,
                reward,
                f"Completed Lesson: {lesson.title}",
                lesson.id,
            )
        if award is None:
            await StreakTracker(self.db).record_activity(student_id, now)

        progress = await self._get_progress(lesson_id, student_id)
        response = LessonProgressResponse.model_validate(progress)
        await self.db.commit()

        xp_earned = award.amount if award else 0
        if transitioned:
            logger.info(
                "Student %s completed lesson %s (+%d XP)",
                student_id,
                lesson_id,
                xp_earned,
            )
            await self.event_bus.publish(
                EventTypes.Progress.LESSON_COMPLETED,
                {
                    "student_id": student_id,
                    "lesson_id": lesson_id,
                    "xp_earned": xp_earned,
                },
            )
            await publish_xp_awarded(self.event_bus, award)

        return LessonCompletionResult(progress=response, xp_earned=xp_earned)

    async def update_time_spent(
        self,
        lesson_id: str,
        student_id: str,
        delta_seconds: int,
    ) -> LessonProgressResponse:
        """Add time to a student's lesson record.

        Args:
            lesson_id: Lesson identifier.
            student_id: Student user identifier.
            delta_seconds: Seconds to add; must not be negative.

        Returns:
            The updated progress.

        Raises:
            InvalidTimeSpentError: If delta_seconds is negative.
            LessonProgressNotFoundError: If the student never opened the lesson.
        """
        if delta_seconds < 0:
            raise InvalidTimeSpentError(f"Time spent cannot decrease: {delta_seconds}")

        result = await self.db.execute(
            update(LessonProgress)
            .where(
                LessonProgress.student_id == student_id,
                LessonProgress.lesson_id == lesson_id,
            )
            .values(time_spent_seconds=LessonProgress.time_spent_seconds + delta_seconds)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise LessonProgressNotFoundError(
                f"No progress for student {student_id} in lesson {lesson_id}"
            )

        progress = await self._get_progress(lesson_id, student_id)
        response = LessonProgressResponse.model_validate(progress)
        await self.db.commit()
        return response

    async def get_lesson_progress(self, lesson_id: str, student_id: str) -> LessonProgressDetail:
        """Get a student's progress in a lesson with their attempts.

        Args:
            lesson_id: Lesson identifier.
            student_id: Student user identifier.

        Returns:
            Stored progress, or a not_started view with zero time and XP.
            Exercise and quiz submissions are newest first.

        Raises:
            LessonNotFoundError: If the lesson does not exist.
        """
        await self._get_lesson(lesson_id)

        progress = await self._get_progress(lesson_id, student_id)
        if progress is None:
            base = LessonProgressResponse(
                student_id=student_id,
                lesson_id=lesson_id,
                status=LessonStatus.NOT_STARTED,
            )
        else:
            base = LessonProgressResponse.model_validate(progress)

        exercise_rows = await self.db.scalars(
            select(ExerciseSubmission)
            .join(Exercise, Exercise.id == ExerciseSubmission.exercise_id)
            .where(
                Exercise.lesson_id == lesson_id,
                ExerciseSubmission.student_id == student_id,
            )
            .order_by(ExerciseSubmission.submitted_at.desc())
        )
        quiz_rows = await self.db.scalars(
            select(QuizSubmission)
            .where(
                QuizSubmission.lesson_id == lesson_id,
                QuizSubmission.student_id == student_id,
            )
            .order_by(QuizSubmission.submitted_at.desc())
        )

        return LessonProgressDetail(
            **base.model_dump(),
            exercise_submissions=[
                ExerciseSubmissionResponse.model_validate(row) for row in exercise_rows.all()
            ],
            quiz_submissions=[
                QuizSubmissionResponse.model_validate(row) for row in quiz_rows.all()
            ],
        )

    async def _get_lesson(self, lesson_id: str) -> Lesson:
        lesson = await self.db.get(Lesson, lesson_id)
        if lesson is None:
            raise LessonNotFoundError(f"Lesson not found: {lesson_id}")
        return lesson

    async def _get_progress(self, lesson_id: str, student_id: str) -> LessonProgress | None:
        result = await self.db.execute(
            select(LessonProgress)
            .where(
                LessonProgress.student_id == student_id,
                LessonProgress.lesson_id == lesson_id,
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _insert_progress(self, progress: LessonProgress) -> tuple[LessonProgress, bool]:
        """Insert a progress record, yielding to a concurrent insert.

        Returns:
            Tuple of (stored record, whether this call created it).
        """
        try:
            async with self.db.begin_nested():
                self.db.add(progress)
        except IntegrityError:
            logger.debug(
                "Progress for student %s in lesson %s already exists",
                progress.student_id,
                progress.lesson_id,
            )
            existing = await self._get_progress(progress.lesson_id, progress.student_id)
            if existing is None:
                raise
            return existing, False
        return progress, True

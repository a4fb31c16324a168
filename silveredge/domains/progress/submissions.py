# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Exercise and quiz submissions.

Every attempt is stored as a new row. XP is granted only on a student's
first passing attempt, decided by looking for an earlier passing row rather
than a cached flag, so retried submissions never double-grant. The check
runs under a lock on the student's profile row, so concurrent attempts by
one student are decided one after the other.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from silveredge.core.config import get_settings
from silveredge.domains.gamification.exceptions import StudentProfileNotFoundError
from silveredge.domains.gamification.streaks import StreakTracker
from silveredge.domains.gamification.xp_ledger import XpLedger, publish_xp_awarded
from silveredge.domains.progress.exceptions import ExerciseNotFoundError, QuizNotFoundError
from silveredge.domains.progress.grading import grade_exercise, grade_quiz
from silveredge.infrastructure.database.models import (
    Exercise,
    ExerciseSubmission,
    Quiz,
    QuizSubmission,
    StudentProfile,
)
from silveredge.infrastructure.events import EventBus, EventTypes, get_event_bus
from silveredge.models.submissions import (
    ExerciseSubmissionRequest,
    ExerciseSubmissionResponse,
    ExerciseSubmitResult,
    QuizSubmissionRequest,
    QuizSubmissionResponse,
    QuizSubmitResult,
)
from silveredge.utils.datetime import utc_now

logger = logging.getLogger(__name__)

DEFAULT_REVIEW_LIMIT = 10


class SubmissionService:
    """Grades and records exercise and quiz attempts.

    Attributes:
        db: Async database session.
        event_bus: Bus that receives events after each commit.
    """

    def __init__(self, db: AsyncSession, event_bus: EventBus | None = None) -> None:
        """Initialize submission service.

        Args:
            db: Async database session.
            event_bus: Event bus; defaults to the application bus.
        """
        self.db = db
        self.event_bus = event_bus or get_event_bus()
        self.pass_percent = get_settings().gamification.quiz_pass_percent

    async def submit_exercise(
        self,
        exercise_id: str,
        student_id: str,
        request: ExerciseSubmissionRequest,
    ) -> ExerciseSubmitResult:
        """Grade and store an exercise attempt.

        Args:
            exercise_id: Exercise identifier.
            student_id: Student user identifier.
            request: Submitted code and test results.

        Returns:
            The stored submission, pass flag and XP earned.

        Raises:
            ExerciseNotFoundError: If the exercise does not exist.
            StudentProfileNotFoundError: If the student has no profile.
        """
        exercise = await self.db.get(Exercise, exercise_id)
        if exercise is None:
            raise ExerciseNotFoundError(f"Exercise not found: {exercise_id}")

        await self._lock_profile(student_id)
        passed = grade_exercise(request.test_results)
        first_success = passed and not await self._has_passed(
            ExerciseSubmission,
            ExerciseSubmission.exercise_id == exercise_id,
            student_id,
        )
        xp_earned = max(exercise.xp_reward, 0) if first_success else 0

        now = utc_now()
        submission = ExerciseSubmission(
            student_id=student_id,
            exercise_id=exercise_id,
            code=request.code,
            test_results=[r.model_dump(by_alias=True) for r in request.test_results],
            passed=passed,
            xp_earned=xp_earned,
            submitted_at=now,
        )
        self.db.add(submission)
        await self.db.flush()

        award = await XpLedger(self.db).award_xp(
            student_id,
            xp_earned,
            f"Completed Exercise: {exercise.title}",
            exercise.id,
        )
        if award is None:
            await StreakTracker(self.db).record_activity(student_id, now)

        response = ExerciseSubmissionResponse.model_validate(submission)
        await self.db.commit()

        logger.info(
            "Exercise %s submitted by %s: passed=%s xp=%d",
            exercise_id,
            student_id,
            passed,
            xp_earned,
        )
        await self.event_bus.publish(
            EventTypes.Progress.EXERCISE_SUBMITTED,
            {
                "student_id": student_id,
                "exercise_id": exercise_id,
                "lesson_id": exercise.lesson_id,
                "passed": passed,
                "xp_earned": xp_earned,
            },
        )
        await publish_xp_awarded(self.event_bus, award)

        return ExerciseSubmitResult(
            submission=response,
            passed=passed,
            test_results=request.test_results,
            xp_earned=xp_earned,
        )

    async def submit_quiz(
        self,
        quiz_id: str,
        student_id: str,
        request: QuizSubmissionRequest,
    ) -> QuizSubmitResult:
        """Grade and store a quiz attempt.

        Args:
            quiz_id: Quiz identifier.
            student_id: Student user identifier.
            request: Selected options per question.

        Returns:
            The stored submission, score, pass flag, XP earned and the
            per-answer results.

        Raises:
            QuizNotFoundError: If the quiz does not exist.
            StudentProfileNotFoundError: If the student has no profile.
        """
        quiz = await self.db.get(Quiz, quiz_id)
        if quiz is None:
            raise QuizNotFoundError(f"Quiz not found: {quiz_id}")

        await self._lock_profile(student_id)
        grade = grade_quiz(quiz.questions or [], request.answers, self.pass_percent)
        first_success = grade.passed and not await self._has_passed(
            QuizSubmission,
            QuizSubmission.quiz_id == quiz_id,
            student_id,
        )
        xp_earned = max(quiz.xp_reward, 0) if first_success else 0

        now = utc_now()
        submission = QuizSubmission(
            student_id=student_id,
            quiz_id=quiz_id,
            lesson_id=quiz.lesson_id,
            answers=[r.model_dump(by_alias=True) for r in grade.results],
            score=grade.score,
            max_score=grade.max_score,
            passed=grade.passed,
            xp_earned=xp_earned,
            submitted_at=now,
        )
        self.db.add(submission)
        await self.db.flush()

        award = await XpLedger(self.db).award_xp(
            student_id,
            xp_earned,
            f"Passed Quiz: {quiz.title}",
            quiz.id,
        )
        if award is None:
            await StreakTracker(self.db).record_activity(student_id, now)

        response = QuizSubmissionResponse.model_validate(submission)
        await self.db.commit()

        logger.info(
            "Quiz %s submitted by %s: score=%d/%d passed=%s xp=%d",
            quiz_id,
            student_id,
            grade.score,
            grade.max_score,
            grade.passed,
            xp_earned,
        )
        await self.event_bus.publish(
            EventTypes.Progress.QUIZ_SUBMITTED,
            {
                "student_id": student_id,
                "quiz_id": quiz_id,
                "lesson_id": quiz.lesson_id,
                "passed": grade.passed,
                "score": grade.score,
                "max_score": grade.max_score,
                "xp_earned": xp_earned,
            },
        )
        await publish_xp_awarded(self.event_bus, award)

        return QuizSubmitResult(
            submission=response,
            score=grade.score,
            max_score=grade.max_score,
            passed=grade.passed,
            xp_earned=xp_earned,
            results=grade.results,
        )

    async def list_exercise_submissions(
        self,
        exercise_id: str,
        student_id: str | None = None,
        limit: int = DEFAULT_REVIEW_LIMIT,
    ) -> list[ExerciseSubmissionResponse]:
        """List recent attempts at an exercise, newest first.

        Raises:
            ExerciseNotFoundError: If the exercise does not exist.
        """
        if await self.db.get(Exercise, exercise_id) is None:
            raise ExerciseNotFoundError(f"Exercise not found: {exercise_id}")

        query = select(ExerciseSubmission).where(ExerciseSubmission.exercise_id == exercise_id)
        if student_id:
            query = query.where(ExerciseSubmission.student_id == student_id)
        rows = await self.db.scalars(
            query.order_by(ExerciseSubmission.submitted_at.desc()).limit(limit)
        )
        return [ExerciseSubmissionResponse.model_validate(row) for row in rows.all()]

    async def list_quiz_submissions(
        self,
        quiz_id: str,
        student_id: str | None = None,
        limit: int = DEFAULT_REVIEW_LIMIT,
    ) -> list[QuizSubmissionResponse]:
        """List recent attempts at a quiz, newest first.

        Raises:
            QuizNotFoundError: If the quiz does not exist.
        """
        if await self.db.get(Quiz, quiz_id) is None:
            raise QuizNotFoundError(f"Quiz not found: {quiz_id}")

        query = select(QuizSubmission).where(QuizSubmission.quiz_id == quiz_id)
        if student_id:
            query = query.where(QuizSubmission.student_id == student_id)
        rows = await self.db.scalars(
            query.order_by(QuizSubmission.submitted_at.desc()).limit(limit)
        )
        return [QuizSubmissionResponse.model_validate(row) for row in rows.all()]

    async def _has_passed(self, model, target_clause, student_id: str) -> bool:
        """Check for an earlier passing attempt by the student."""
        found = await self.db.scalar(
            select(model.id)
            .where(target_clause, model.student_id == student_id, model.passed.is_(True))
            .limit(1)
        )
        return found is not None

    async def _lock_profile(self, student_id: str) -> None:
        """Hold the student's profile row until commit."""
        locked = await self.db.scalar(
            select(StudentProfile.id)
            .where(StudentProfile.user_id == student_id)
            .with_for_update()
        )
        if locked is None:
            raise StudentProfileNotFoundError(f"Student profile not found: {student_id}")

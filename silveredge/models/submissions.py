# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Exercise and quiz submission schemas."""

from datetime import datetime

from pydantic import Field

from silveredge.models.common import APIModel


class TestResult(APIModel):
    """Outcome of one test case as reported by the code runner."""

    __test__ = False

    test_case_id: str
    passed: bool
    actual_output: str | None = None
    error: str | None = None


class ExerciseSubmissionRequest(APIModel):
    """A student's exercise attempt."""

    code: str = ""
    test_results: list[TestResult] = Field(min_length=1)


class QuizAnswer(APIModel):
    """Selected option for one question; None means unanswered."""

    question_id: str
    selected_index: int | None = Field(default=None, ge=0)


class QuizSubmissionRequest(APIModel):
    """A student's quiz attempt."""

    answers: list[QuizAnswer] = Field(default_factory=list)


class QuestionResult(APIModel):
    """Per-answer grading result. correct_index is -1 for unknown questions."""

    question_id: str
    selected_index: int | None = None
    is_correct: bool
    correct_index: int


class ExerciseSubmissionResponse(APIModel):
    """Stored exercise submission."""

    id: str
    student_id: str
    exercise_id: str
    code: str
    passed: bool
    test_results: list[TestResult]
    xp_earned: int
    submitted_at: datetime


class ExerciseSubmitResult(APIModel):
    """Result returned to the student after submitting an exercise."""

    submission: ExerciseSubmissionResponse
    passed: bool
    test_results: list[TestResult]
    xp_earned: int


class QuizSubmissionResponse(APIModel):
    """Stored quiz submission."""

    id: str
    student_id: str
    quiz_id: str
    lesson_id: str
    answers: list[QuestionResult]
    score: int
    max_score: int
    passed: bool
    xp_earned: int
    submitted_at: datetime


class QuizSubmitResult(APIModel):
    """Result returned to the student after submitting a quiz."""

    submission: QuizSubmissionResponse
    score: int
    max_score: int
    passed: bool
    xp_earned: int
    results: list[QuestionResult]

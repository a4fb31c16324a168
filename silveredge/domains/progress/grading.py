# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pure grading rules for exercises and quizzes.

Grading never raises on wrong, missing or unknown answers; they are simply
scored as incorrect.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from silveredge.models.submissions import QuestionResult, QuizAnswer, TestResult

DEFAULT_PASS_PERCENT = 70


@dataclass
class QuizGrade:
    """Score of one quiz attempt."""

    score: int
    max_score: int
    passed: bool
    results: list[QuestionResult] = field(default_factory=list)


def grade_exercise(test_results: Iterable[TestResult]) -> bool:
    """An exercise passes iff every supplied test passed.

    An empty result list does not pass.
    """
    results = list(test_results)
    return bool(results) and all(result.passed for result in results)


def pass_threshold(max_score: int, pass_percent: int = DEFAULT_PASS_PERCENT) -> int:
    """Smallest passing score: ceil(max_score * pass_percent / 100)."""
    return (max_score * pass_percent + 99) // 100


def _correct_index(question: Mapping[str, Any]) -> int:
    """Stored answer key, or -1 when it is missing or malformed."""
    value = question.get("correctIndex", question.get("correct_index"))
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return -1
    return value


def grade_quiz(
    questions: Sequence[Mapping[str, Any]],
    answers: Iterable[QuizAnswer],
    pass_percent: int = DEFAULT_PASS_PERCENT,
) -> QuizGrade:
    """Score quiz answers against stored questions.

    Only the first answer given for a question counts; repeated answers
    for the same question are reported as incorrect. The maximum score is
    the number of questions, and a quiz without questions cannot be passed.

    Args:
        questions: Stored questions with ``id`` and ``correctIndex``.
        answers: Submitted answers in submission order.
        pass_percent: Percentage of max score required to pass.

    Returns:
        QuizGrade with one result per submitted answer.
    """
    by_id = {str(q.get("id")): q for q in questions}
    answered: set[str] = set()
    results: list[QuestionResult] = []
    score = 0

    for answer in answers:
        question = by_id.get(answer.question_id)
        correct_index = _correct_index(question) if question is not None else -1
        is_correct = (
            question is not None
            and answer.question_id not in answered
            and correct_index >= 0
            and answer.selected_index == correct_index
        )
        if question is not None:
            answered.add(answer.question_id)
        if is_correct:
            score += 1
        results.append(
            QuestionResult(
                question_id=answer.question_id,
                selected_index=answer.selected_index,
                is_correct=is_correct,
                correct_index=correct_index,
            )
        )

    max_score = len(questions)
    passed = max_score > 0 and score >= pass_threshold(max_score, pass_percent)
    return QuizGrade(score=score, max_score=max_score, passed=passed, results=results)

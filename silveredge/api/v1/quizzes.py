# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Quiz submission API endpoints.

- POST /{quiz_id}/students/{student_id}/submissions - Submit answers
- GET /{quiz_id}/submissions - Review recent attempts
"""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from silveredge.api.dependencies import get_db, get_events
from silveredge.domains.progress import SubmissionService
from silveredge.infrastructure.events import EventBus
from silveredge.models.submissions import (
    QuizSubmissionRequest,
    QuizSubmissionResponse,
    QuizSubmitResult,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_service(db: AsyncSession, event_bus: EventBus) -> SubmissionService:
    return SubmissionService(db=db, event_bus=event_bus)


@router.post(
    "/{quiz_id}/students/{student_id}/submissions",
    response_model=QuizSubmitResult,
    status_code=status.HTTP_201_CREATED,
    summary="Submit quiz answers",
)
async def submit_quiz(
    quiz_id: str,
    student_id: str,
    data: QuizSubmissionRequest,
    db: AsyncSession = Depends(get_db),
    event_bus: EventBus = Depends(get_events),
) -> QuizSubmitResult:
    """Grade and store a quiz attempt.

    Args:
        quiz_id: Quiz identifier.
        student_id: Student user identifier.
        data: Selected option per question.
        db: Database session.
        event_bus: Application event bus.

    Returns:
        Score, pass flag, XP earned and per-answer results.
    """
    service = _get_service(db, event_bus)
    return await service.submit_quiz(quiz_id, student_id, data)


@router.get(
    "/{quiz_id}/submissions",
    response_model=list[QuizSubmissionResponse],
    summary="List quiz attempts",
)
async def list_quiz_submissions(
    quiz_id: str,
    student_id: str | None = Query(None, alias="studentId"),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    event_bus: EventBus = Depends(get_events),
) -> list[QuizSubmissionResponse]:
    service = _get_service(db, event_bus)
    return await service.list_quiz_submissions(quiz_id, student_id, limit)

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Exercise submission API endpoints.

- POST /{exercise_id}/students/{student_id}/submissions - Submit an attempt
- GET /{exercise_id}/submissions - Review recent attempts
"""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from silveredge.api.dependencies import get_db, get_events
from silveredge.domains.progress import SubmissionService
from silveredge.infrastructure.events import EventBus
from silveredge.models.submissions import (
    ExerciseSubmissionRequest,
    ExerciseSubmissionResponse,
    ExerciseSubmitResult,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_service(db: AsyncSession, event_bus: EventBus) -> SubmissionService:
    return SubmissionService(db=db, event_bus=event_bus)


@router.post(
    "/{exercise_id}/students/{student_id}/submissions",
    response_model=ExerciseSubmitResult,
    status_code=status.HTTP_201_CREATED,
    summary="Submit an exercise attempt",
)
async def submit_exercise(
    exercise_id: str,
    student_id: str,
    data: ExerciseSubmissionRequest,
    db: AsyncSession = Depends(get_db),
    event_bus: EventBus = Depends(get_events),
) -> ExerciseSubmitResult:
    """Grade and store an exercise attempt.

    The exercise passes when every reported test passed. XP is granted on
    the student's first passing attempt only.

    Args:
        exercise_id: Exercise identifier.
        student_id: Student user identifier.
        data: Submitted code and test results.
        db: Database session.
        event_bus: Application event bus.

    Returns:
        Stored submission, pass flag and XP earned.
    """
    logger.debug(
        "Exercise submission: exercise=%s, student=%s, tests=%d",
        exercise_id,
        student_id,
        len(data.test_results),
    )
    service = _get_service(db, event_bus)
    return await service.submit_exercise(exercise_id, student_id, data)


@router.get(
    "/{exercise_id}/submissions",
    response_model=list[ExerciseSubmissionResponse],
    summary="List exercise attempts",
)
async def list_exercise_submissions(
    exercise_id: str,
    student_id: str | None = Query(None, alias="studentId"),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    event_bus: EventBus = Depends(get_events),
) -> list[ExerciseSubmissionResponse]:
    """List recent attempts at an exercise, newest first."""
    service = _get_service(db, event_bus)
    return await service.list_exercise_submissions(exercise_id, student_id, limit)

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Lesson progress API endpoints.

- POST /{lesson_id}/students/{student_id}/start - Open a lesson
- POST /{lesson_id}/students/{student_id}/complete - Complete a lesson
- POST /{lesson_id}/students/{student_id}/time - Add time spent
- GET /{lesson_id}/students/{student_id}/progress - Progress with attempts
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from silveredge.api.dependencies import get_db, get_events
from silveredge.domains.progress import LessonProgressService
from silveredge.infrastructure.events import EventBus
from silveredge.models.progress import (
    LessonCompletionResponse,
    LessonProgressDetail,
    LessonProgressResponse,
    TimeSpentRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_service(db: AsyncSession, event_bus: EventBus) -> LessonProgressService:
    """Get lesson progress service instance.

    Args:
        db: Database session.
        event_bus: Application event bus.

    Returns:
        Configured LessonProgressService instance.
    """
    return LessonProgressService(db=db, event_bus=event_bus)


@router.post(
    "/{lesson_id}/students/{student_id}/start",
    response_model=LessonProgressResponse,
    summary="Start a lesson",
)
async def start_lesson(
    lesson_id: str,
    student_id: str,
    db: AsyncSession = Depends(get_db),
    event_bus: EventBus = Depends(get_events),
) -> LessonProgressResponse:
    """Mark a lesson as opened by a student.

    Opening a lesson again leaves the existing record untouched.
    """
    service = _get_service(db, event_bus)
    return await service.start_lesson(lesson_id, student_id)


@router.post(
    "/{lesson_id}/students/{student_id}/complete",
    response_model=LessonCompletionResponse,
    summary="Complete a lesson",
)
async def complete_lesson(
    lesson_id: str,
    student_id: str,
    db: AsyncSession = Depends(get_db),
    event_bus: EventBus = Depends(get_events),
) -> LessonCompletionResponse:
    """Complete a lesson, granting its XP the first time only.

    Args:
        lesson_id: Lesson identifier.
        student_id: Student user identifier.
        db: Database session.
        event_bus: Application event bus.

    Returns:
        The progress record and the XP granted by this call.
    """
    service = _get_service(db, event_bus)
    result = await service.complete_lesson(lesson_id, student_id)
    return LessonCompletionResponse(progress=result.progress, xp_earned=result.xp_earned)


@router.post(
    "/{lesson_id}/students/{student_id}/time",
    response_model=LessonProgressResponse,
    summary="Add time spent on a lesson",
)
async def add_time_spent(
    lesson_id: str,
    student_id: str,
    data: TimeSpentRequest,
    db: AsyncSession = Depends(get_db),
    event_bus: EventBus = Depends(get_events),
) -> LessonProgressResponse:
    service = _get_service(db, event_bus)
    return await service.update_time_spent(lesson_id, student_id, data.delta_seconds)


@router.get(
    "/{lesson_id}/students/{student_id}/progress",
    response_model=LessonProgressDetail,
    summary="Get lesson progress",
)
async def get_lesson_progress(
    lesson_id: str,
    student_id: str,
    db: AsyncSession = Depends(get_db),
    event_bus: EventBus = Depends(get_events),
) -> LessonProgressDetail:
    """Get a student's progress in a lesson with their recent attempts."""
    service = _get_service(db, event_bus)
    return await service.get_lesson_progress(lesson_id, student_id)

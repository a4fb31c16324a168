# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student progress and gamification API endpoints.

Dashboard endpoints:
- GET /{student_id} - Student account with profile
- GET /{student_id}/progress - Progress summary across class courses
- GET /{student_id}/courses/{course_id}/progress - Progress in one course
- GET /{student_id}/achievements - Badges, XP and streak snapshot
- GET /{student_id}/badges - Badge catalog with earned status
- GET /{student_id}/xp-history - Paged XP ledger

Activity endpoints:
- POST /{student_id}/login - Record a login
- POST /{student_id}/sandbox-projects/{project_id} - Record a sandbox project
"""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from silveredge.api.dependencies import get_db, get_events
from silveredge.domains.activity import StudentActivityService
from silveredge.domains.gamification import (
    AchievementsService,
    BadgeEvaluator,
    XpLedger,
)
from silveredge.domains.progress import ProgressAggregator
from silveredge.domains.user import StudentAccount, StudentProfileView, UserLookupService
from silveredge.infrastructure.events import EventBus
from silveredge.models.gamification import (
    AchievementsResponse,
    BadgeCatalogEntry,
    XpHistoryResponse,
    XpTransactionResponse,
)
from silveredge.models.progress import CourseProgressResponse, StudentProgressSummary

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/{student_id}",
    response_model=StudentAccount,
    summary="Get student",
)
async def get_student(
    student_id: str,
    db: AsyncSession = Depends(get_db),
) -> StudentAccount:
    """Get a student account with its gamification profile."""
    return await UserLookupService(db).get_student(student_id)


@router.get(
    "/{student_id}/progress",
    response_model=StudentProgressSummary,
    summary="Get student progress summary",
)
async def get_progress_summary(
    student_id: str,
    db: AsyncSession = Depends(get_db),
) -> StudentProgressSummary:
    """Roll up a student's progress over the courses of their class.

    Unknown students and students without a class get an all-zero summary.
    """
    aggregator = ProgressAggregator.from_session(db)
    return await aggregator.get_student_progress_summary(student_id)


@router.get(
    "/{student_id}/courses/{course_id}/progress",
    response_model=CourseProgressResponse,
    summary="Get course progress",
)
async def get_course_progress(
    student_id: str,
    course_id: str,
    db: AsyncSession = Depends(get_db),
) -> CourseProgressResponse:
    aggregator = ProgressAggregator.from_session(db)
    return await aggregator.get_student_course_progress(student_id, course_id)


@router.get(
    "/{student_id}/achievements",
    response_model=AchievementsResponse,
    summary="Get student achievements",
)
async def get_achievements(
    student_id: str,
    db: AsyncSession = Depends(get_db),
) -> AchievementsResponse:
    """Get earned badges, XP, level and streak of a student.

    Args:
        student_id: Student user identifier.
        db: Database session.

    Returns:
        Achievements snapshot with the most recent XP grants.
    """
    return await AchievementsService(db).get_student_achievements(student_id)


@router.get(
    "/{student_id}/badges",
    response_model=list[BadgeCatalogEntry],
    summary="Get badge catalog",
)
async def get_badge_catalog(
    student_id: str,
    db: AsyncSession = Depends(get_db),
) -> list[BadgeCatalogEntry]:
    """List active badges with the student's progress towards each."""
    return await BadgeEvaluator(db).get_badge_catalog(student_id)


@router.get(
    "/{student_id}/xp-history",
    response_model=XpHistoryResponse,
    summary="Get XP history",
)
async def get_xp_history(
    student_id: str,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    source: str | None = Query(None, description="Only grants whose source starts with this"),
    db: AsyncSession = Depends(get_db),
) -> XpHistoryResponse:
    """Page through a student's XP grants, newest first.

    Args:
        student_id: Student user identifier.
        limit: Page size.
        offset: Entries to skip.
        source: Source prefix filter, e.g. "Completed Lesson".
        db: Database session.

    Returns:
        One page of the ledger with the total count.
    """
    items, total = await XpLedger(db).list_xp_transactions(
        student_id,
        limit=limit,
        offset=offset,
        source_prefix=source,
    )
    return XpHistoryResponse(
        items=[XpTransactionResponse.model_validate(item) for item in items],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.post(
    "/{student_id}/login",
    response_model=StudentProfileView,
    summary="Record a login",
)
async def record_login(
    student_id: str,
    db: AsyncSession = Depends(get_db),
    event_bus: EventBus = Depends(get_events),
) -> StudentProfileView:
    """Count a login and advance the student's streak."""
    service = StudentActivityService(db, event_bus)
    return await service.record_login(student_id)


@router.post(
    "/{student_id}/sandbox-projects/{project_id}",
    response_model=StudentProfileView,
    status_code=status.HTTP_201_CREATED,
    summary="Record a sandbox project",
)
async def record_sandbox_project(
    student_id: str,
    project_id: str,
    db: AsyncSession = Depends(get_db),
    event_bus: EventBus = Depends(get_events),
) -> StudentProfileView:
    service = StudentActivityService(db, event_bus)
    return await service.record_sandbox_project(student_id, project_id)

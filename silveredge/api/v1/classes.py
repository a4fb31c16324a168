# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Class dashboard and enrollment API endpoints.

Dashboard endpoints:
- GET /{class_id}/stats - Attendance rate, average progress, last activity
- GET /{class_id}/courses - Assigned courses with class progress

Student enrollment endpoints:
- POST /{class_id}/students/{student_id} - Enroll a student
- DELETE /{class_id}/students/{student_id} - Withdraw a student
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from silveredge.api.dependencies import get_db
from silveredge.domains.enrollment import EnrollmentService
from silveredge.domains.progress import ProgressAggregator
from silveredge.models.classes import ClassCourseProgress, ClassStats, EnrollmentResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_enrollment_service(db: AsyncSession) -> EnrollmentService:
    """Get enrollment service instance.

    Args:
        db: Database session.

    Returns:
        Configured EnrollmentService instance.
    """
    return EnrollmentService(db=db)


@router.get(
    "/{class_id}/stats",
    response_model=ClassStats,
    summary="Get class statistics",
)
async def get_class_stats(
    class_id: str,
    db: AsyncSession = Depends(get_db),
) -> ClassStats:
    """Get the dashboard figures of a class.

    Unknown classes and empty classes report zeros and "No activity".
    """
    aggregator = ProgressAggregator.from_session(db)
    return await aggregator.compute_class_stats(class_id)


@router.get(
    "/{class_id}/courses",
    response_model=list[ClassCourseProgress],
    summary="List class courses with progress",
)
async def get_class_courses(
    class_id: str,
    db: AsyncSession = Depends(get_db),
) -> list[ClassCourseProgress]:
    aggregator = ProgressAggregator.from_session(db)
    return await aggregator.get_class_courses_with_progress(class_id)


@router.post(
    "/{class_id}/students/{student_id}",
    response_model=EnrollmentResponse,
    summary="Enroll student in class",
)
async def enroll_student(
    class_id: str,
    student_id: str,
    response: Response,
    db: AsyncSession = Depends(get_db),
) -> EnrollmentResponse:
    """Enroll a student in a class.

    The student leaves any class they were in before. Enrolling an
    already enrolled student returns the existing enrollment.

    Args:
        class_id: Class identifier.
        student_id: Student user identifier.
        response: Outgoing response, for the status code.
        db: Database session.

    Returns:
        Enrollment response.
    """
    logger.info("Enrolling student: student=%s, class=%s", student_id, class_id)

    service = _get_enrollment_service(db)
    enrollment = await service.enroll_student(class_id, student_id)
    response.status_code = status.HTTP_201_CREATED if enrollment.created else status.HTTP_200_OK
    return enrollment


@router.delete(
    "/{class_id}/students/{student_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Withdraw student from class",
)
async def withdraw_student(
    class_id: str,
    student_id: str,
    db: AsyncSession = Depends(get_db),
) -> None:
    """Withdraw a student from a class.

    Raises:
        HTTPException: If the student is not enrolled in the class.
    """
    service = _get_enrollment_service(db)
    if not await service.withdraw_student(class_id, student_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Student is not enrolled in this class",
        )

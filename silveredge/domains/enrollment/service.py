# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment service for managing student class membership.

A student belongs to at most one active class: enrolling sets the
profile's class and adds the membership row. Enrolling twice is a no-op.
"""

from __future__ import annotations

import logging

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from silveredge.domains.errors import ResourceNotFoundError
from silveredge.infrastructure.database.models import (
    Class,
    ClassStudent,
    StudentProfile,
    User,
)
from silveredge.models.classes import EnrollmentResponse
from silveredge.models.common import UserRole

logger = logging.getLogger(__name__)


class EnrollmentServiceError(Exception):
    """Base exception for enrollment service errors."""

    pass


class ClassNotFoundError(EnrollmentServiceError, ResourceNotFoundError):
    """Raised when class is not found."""

    pass


class StudentNotFoundError(EnrollmentServiceError, ResourceNotFoundError):
    """Raised when student is not found."""

    pass


class InvalidStudentTypeError(EnrollmentServiceError, ResourceNotFoundError):
    """Raised when user is not a student type."""

    pass


class EnrollmentService:
    """Service for managing student enrollments.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize enrollment service.

        Args:
            db: Async database session.
        """
        self.db = db

    async def enroll_student(self, class_id: str, student_id: str) -> EnrollmentResponse:
        """Enroll a student in a class.

        Args:
            class_id: Class identifier.
            student_id: Student user identifier.

        Returns:
            Enrollment response; ``created`` is False when the student was
            already enrolled.

        Raises:
            ClassNotFoundError: If class not found.
            StudentNotFoundError: If student not found.
            InvalidStudentTypeError: If user is not a student.
        """
        await self._get_class(class_id)
        await self._get_student(student_id)

        created = False
        if await self._find_enrollment(class_id, student_id) is None:
            try:
                async with self.db.begin_nested():
                    self.db.add(ClassStudent(class_id=class_id, student_id=student_id))
                created = True
            except IntegrityError:
                logger.debug("Concurrent enrollment of %s in %s", student_id, class_id)

        # Leaving the previous class keeps a single active membership.
        await self.db.execute(
            delete(ClassStudent).where(
                ClassStudent.student_id == student_id,
                ClassStudent.class_id != class_id,
            )
        )
        await self.db.execute(
            update(StudentProfile)
            .where(StudentProfile.user_id == student_id)
            .values(class_id=class_id)
            .execution_options(synchronize_session=False)
        )

        enrollment = await self._find_enrollment(class_id, student_id)
        response = EnrollmentResponse(
            class_id=class_id,
            student_id=student_id,
            enrolled_at=enrollment.enrolled_at,
            created=created,
        )
        await self.db.commit()

        if created:
            logger.info("Enrolled student: student=%s, class=%s", student_id, class_id)
        else:
            logger.debug("Student %s already enrolled in class %s", student_id, class_id)
        return response

    async def withdraw_student(self, class_id: str, student_id: str) -> bool:
        """Withdraw a student from a class.

        Args:
            class_id: Class identifier.
            student_id: Student user identifier.

        Returns:
            True if a membership was removed, False if there was none.

        Raises:
            ClassNotFoundError: If class not found.
        """
        await self._get_class(class_id)

        result = await self.db.execute(
            delete(ClassStudent).where(
                ClassStudent.class_id == class_id,
                ClassStudent.student_id == student_id,
            )
        )
        await self.db.execute(
            update(StudentProfile)
            .where(
                StudentProfile.user_id == student_id,
                StudentProfile.class_id == class_id,
            )
            .values(class_id=None)
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()

        removed = result.rowcount > 0
        if removed:
            logger.info("Withdrew student: student=%s, class=%s", student_id, class_id)
        return removed

    async def _get_class(self, class_id: str) -> Class:
        class_ = await self.db.get(Class, class_id)
        if class_ is None:
            raise ClassNotFoundError(f"Class {class_id} not found")
        return class_

    async def _get_student(self, student_id: str) -> User:
        user = await self.db.get(User, student_id)
        if user is None:
            raise StudentNotFoundError(f"Student {student_id} not found")
        if user.role != UserRole.STUDENT.value:
            raise InvalidStudentTypeError(f"User {student_id} is not a student")
        return user

    async def _find_enrollment(self, class_id: str, student_id: str) -> ClassStudent | None:
        result = await self.db.execute(
            select(ClassStudent).where(
                ClassStudent.class_id == class_id,
                ClassStudent.student_id == student_id,
            )
        )
        return result.scalar_one_or_none()

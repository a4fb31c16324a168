# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User lookup for the progress service.

User CRUD lives elsewhere; this service only resolves ids into role-tagged
accounts and student profiles.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from silveredge.domains.errors import ResourceNotFoundError
from silveredge.domains.user.roles import (
    Account,
    StudentAccount,
    StudentProfileView,
    account_adapter,
)
from silveredge.infrastructure.database.models import (
    StudentParent,
    StudentProfile,
    User,
)
from silveredge.models.common import UserRole

logger = logging.getLogger(__name__)


class UserServiceError(Exception):
    """Base exception for user lookup errors."""

    pass


class UserNotFoundError(UserServiceError, ResourceNotFoundError):
    """Raised when a user is not found."""

    pass


class UserLookupService:
    """Resolves user ids to role-tagged accounts.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_user(self, user_id: str) -> User:
        """Get a user row.

        Raises:
            UserNotFoundError: If no such user exists.
        """
        user = await self.db.get(User, user_id)
        if user is None:
            raise UserNotFoundError(f"User not found: {user_id}")
        return user

    async def get_student_profile(self, student_id: str) -> StudentProfile | None:
        """Get a student's profile row, freshly read from the database."""
        result = await self.db.execute(
            select(StudentProfile)
            .where(StudentProfile.user_id == student_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_account(self, user_id: str) -> Account:
        """Get the role-tagged view of a user.

        Args:
            user_id: User identifier.

        Returns:
            StudentAccount, TeacherAccount, ParentAccount or AdminAccount.

        Raises:
            UserNotFoundError: If the user does not exist, or is a student
                without a profile.
        """
        user = await self.get_user(user_id)
        data = {
            "id": user.id,
            "username": user.username,
            "display_name": user.display_name,
            "email": user.email,
            "status": user.status,
            "role": user.role,
        }

        if user.role == UserRole.STUDENT.value:
            profile = await self.get_student_profile(user.id)
            if profile is None:
                raise UserNotFoundError(f"Student profile not found: {user_id}")
            parents = await self.db.scalars(
                select(StudentParent.parent_id).where(StudentParent.student_id == user.id)
            )
            data["profile"] = StudentProfileView.model_validate(profile)
            data["parent_ids"] = list(parents.all())
        elif user.role == UserRole.PARENT.value:
            children = await self.db.scalars(
                select(StudentParent.student_id).where(StudentParent.parent_id == user.id)
            )
            data["child_ids"] = list(children.all())

        return account_adapter.validate_python(data)

    async def get_student(self, student_id: str) -> StudentAccount:
        """Get a student account.

        Raises:
            UserNotFoundError: If the user is missing or not a student.
        """
        account = await self.get_account(student_id)
        if not isinstance(account, StudentAccount):
            raise UserNotFoundError(f"User is not a student: {student_id}")
        return account

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for role-tagged account lookup."""

import pytest

from silveredge.domains.user import (
    AdminAccount,
    ParentAccount,
    StudentAccount,
    TeacherAccount,
    UserLookupService,
    UserNotFoundError,
)

pytestmark = pytest.mark.integration


@pytest.fixture
def service(db_session) -> UserLookupService:
    return UserLookupService(db_session)


class TestGetAccount:
    """Tests for resolving accounts by role."""

    @pytest.mark.asyncio
    async def test_student_with_parents(self, service, seed) -> None:
        student = await seed.student(total_xp=75)
        parent = await seed.user("parent")
        await seed.link_parent(student.id, parent.id)

        account = await service.get_account(student.id)

        assert isinstance(account, StudentAccount)
        assert account.profile.total_xp == 75
        assert account.parent_ids == [parent.id]

    @pytest.mark.asyncio
    async def test_parent_with_children(self, service, seed) -> None:
        student = await seed.student()
        parent = await seed.user("parent")
        await seed.link_parent(student.id, parent.id)

        account = await service.get_account(parent.id)

        assert isinstance(account, ParentAccount)
        assert account.child_ids == [student.id]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role,expected", [("teacher", TeacherAccount), ("admin", AdminAccount)])
    async def test_staff_roles(self, service, seed, role, expected) -> None:
        user = await seed.user(role)

        assert isinstance(await service.get_account(user.id), expected)

    @pytest.mark.asyncio
    async def test_unknown_user(self, service) -> None:
        with pytest.raises(UserNotFoundError):
            await service.get_account("missing")

    @pytest.mark.asyncio
    async def test_student_without_profile(self, service, seed) -> None:
        student = await seed.student(with_profile=False)

        with pytest.raises(UserNotFoundError):
            await service.get_account(student.id)


class TestGetStudent:
    """Tests for student-only lookup."""

    @pytest.mark.asyncio
    async def test_student(self, service, seed) -> None:
        student = await seed.student()

        account = await service.get_student(student.id)

        assert account.id == student.id

    @pytest.mark.asyncio
    async def test_teacher_is_not_a_student(self, service, seed) -> None:
        teacher = await seed.user("teacher")

        with pytest.raises(UserNotFoundError):
            await service.get_student(teacher.id)

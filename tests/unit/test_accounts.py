# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for role-tagged account views."""

import pytest
from pydantic import ValidationError

from silveredge.domains.user import (
    AdminAccount,
    ParentAccount,
    StudentAccount,
    TeacherAccount,
    account_adapter,
)


def _base(role: str) -> dict:
    return {
        "id": "u1",
        "username": "ada",
        "display_name": "Ada",
        "role": role,
    }


class TestAccountUnion:
    """Tests for discriminating accounts on role."""

    def test_student_carries_profile(self) -> None:
        account = account_adapter.validate_python(
            {**_base("student"), "profile": {"total_xp": 40, "current_level": 1}}
        )

        assert isinstance(account, StudentAccount)
        assert account.profile.total_xp == 40
        assert account.parent_ids == []

    def test_student_requires_profile(self) -> None:
        with pytest.raises(ValidationError):
            account_adapter.validate_python(_base("student"))

    def test_parent_lists_children(self) -> None:
        account = account_adapter.validate_python({**_base("parent"), "child_ids": ["s1", "s2"]})

        assert isinstance(account, ParentAccount)
        assert account.child_ids == ["s1", "s2"]

    @pytest.mark.parametrize(("role", "cls"), [("teacher", TeacherAccount), ("admin", AdminAccount)])
    def test_staff_roles(self, role: str, cls: type) -> None:
        assert isinstance(account_adapter.validate_python(_base(role)), cls)

    def test_unknown_role_rejected(self) -> None:
        with pytest.raises(ValidationError):
            account_adapter.validate_python(_base("janitor"))

    def test_serializes_camel_case(self) -> None:
        account = account_adapter.validate_python(
            {**_base("student"), "profile": {"total_xp": 5}}
        )

        data = account.model_dump(by_alias=True)

        assert data["displayName"] == "Ada"
        assert data["profile"]["totalXp"] == 5

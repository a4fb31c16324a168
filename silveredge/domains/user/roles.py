# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Role-tagged account views.

Users share one table; the domain layer sees them as a discriminated
union on ``role`` so that student-only data (the profile) is only
reachable from a StudentAccount.
"""

from datetime import date, datetime
from typing import Annotated, Literal, Union

from pydantic import Field, TypeAdapter

from silveredge.models.common import APIModel, UserStatus


class StudentProfileView(APIModel):
    """Gamification and enrollment state of a student."""

    class_id: str | None = None
    total_xp: int = 0
    current_level: int = 1
    currency_balance: int = 0
    current_streak_days: int = 0
    longest_streak: int = 0
    last_activity_date: datetime | None = None
    last_active_on: date | None = None
    login_count: int = 0
    sandbox_project_count: int = 0


class _AccountBase(APIModel):
    id: str
    username: str
    display_name: str
    email: str | None = None
    status: UserStatus = UserStatus.ACTIVE


class StudentAccount(_AccountBase):
    """A student with their profile."""

    role: Literal["student"] = "student"
    profile: StudentProfileView
    parent_ids: list[str] = Field(default_factory=list)


class TeacherAccount(_AccountBase):
    """A teacher."""

    role: Literal["teacher"] = "teacher"


class ParentAccount(_AccountBase):
    """A parent linked to one or more students."""

    role: Literal["parent"] = "parent"
    child_ids: list[str] = Field(default_factory=list)


class AdminAccount(_AccountBase):
    """A school administrator."""

    role: Literal["admin"] = "admin"


Account = Annotated[
    Union[StudentAccount, TeacherAccount, ParentAccount, AdminAccount],
    Field(discriminator="role"),
]

account_adapter: TypeAdapter[Account] = TypeAdapter(Account)

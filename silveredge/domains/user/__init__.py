# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User domain package: role-tagged accounts and lookups."""

from silveredge.domains.user.roles import (
    Account,
    AdminAccount,
    ParentAccount,
    StudentAccount,
    StudentProfileView,
    TeacherAccount,
    account_adapter,
)
from silveredge.domains.user.service import (
    UserLookupService,
    UserNotFoundError,
    UserServiceError,
)

__all__ = [
    "Account",
    "AdminAccount",
    "ParentAccount",
    "StudentAccount",
    "StudentProfileView",
    "TeacherAccount",
    "UserLookupService",
    "UserNotFoundError",
    "UserServiceError",
    "account_adapter",
]

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment domain package.

This package provides student enrollment management:
- Student enrollment in classes
- Enrollment withdrawal
"""

from silveredge.domains.enrollment.service import (
    ClassNotFoundError,
    EnrollmentService,
    EnrollmentServiceError,
    InvalidStudentTypeError,
    StudentNotFoundError,
)

__all__ = [
    "ClassNotFoundError",
    "EnrollmentService",
    "EnrollmentServiceError",
    "InvalidStudentTypeError",
    "StudentNotFoundError",
]

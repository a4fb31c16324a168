# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Class statistics and enrollment schemas."""

from datetime import datetime

from silveredge.models.common import APIModel

NO_ACTIVITY = "No activity"


class ClassStats(APIModel):
    """Dashboard statistics for a class.

    last_activity is an ISO timestamp or the "No activity" sentinel.
    """

    attendance_rate: int = 0
    avg_progress: int = 0
    last_activity: str = NO_ACTIVITY


class ClassCourseProgress(APIModel):
    """One course assigned to a class with the class average completion."""

    course_id: str
    title: str
    status: str
    total_lessons: int
    progress_percent: int


class EnrollmentResponse(APIModel):
    """Membership of a student in a class."""

    class_id: str
    student_id: str
    enrolled_at: datetime
    created: bool

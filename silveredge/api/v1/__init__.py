# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

Modules:
    lessons: Lesson start, completion and time tracking.
    exercises: Exercise submissions.
    quizzes: Quiz submissions.
    students: Student progress, achievements, XP history and activity.
    classes: Class dashboards and enrollment.
"""

from fastapi import APIRouter

from silveredge.api.v1 import classes, exercises, lessons, quizzes, students

# Create the main v1 router
router = APIRouter(prefix="/api/v1")

router.include_router(lessons.router, prefix="/lessons", tags=["Lessons"])
router.include_router(exercises.router, prefix="/exercises", tags=["Exercises"])
router.include_router(quizzes.router, prefix="/quizzes", tags=["Quizzes"])
router.include_router(students.router, prefix="/students", tags=["Students"])
router.include_router(classes.router, prefix="/classes", tags=["Classes"])

__all__ = ["router"]

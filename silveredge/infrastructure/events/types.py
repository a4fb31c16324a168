# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Centralized event type definitions.

Adding a new event:
1. Add constant to appropriate class here
2. Map it to badge trigger types in the badge evaluator if it should
   award badges
"""


class EventTypes:
    """All event types organized by domain."""

    class Progress:
        """Lesson and submission events."""

        LESSON_STARTED = "progress.lesson.started"
        LESSON_COMPLETED = "progress.lesson.completed"
        EXERCISE_SUBMITTED = "progress.exercise.submitted"
        QUIZ_SUBMITTED = "progress.quiz.submitted"

    class Gamification:
        """XP and badge events."""

        XP_AWARDED = "gamification.xp.awarded"
        BADGE_AWARDED = "gamification.badge.awarded"

    class Student:
        """Student activity outside lessons."""

        LOGGED_IN = "student.logged_in"
        SANDBOX_PROJECT_CREATED = "student.sandbox_project.created"


class EventPatterns:
    """Wildcard patterns for subscribing to multiple events."""

    ALL_PROGRESS = "progress.*"
    ALL_GAMIFICATION = "gamification.*"
    ALL_STUDENT = "student.*"

    ALL_SUBMISSIONS = "progress.*.submitted"

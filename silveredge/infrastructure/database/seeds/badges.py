# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Default badge catalog.

First-time badges carry no trigger value; threshold badges are awarded
once the matching counter reaches trigger_value.
"""

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from silveredge.infrastructure.database.models import Badge

logger = logging.getLogger(__name__)


def _badge(
    name: str,
    description: str,
    icon_name: str,
    gradient: tuple[str, str],
    trigger_type: str,
    trigger_value: int | None = None,
) -> dict[str, Any]:
    return {
        "name": name,
        "description": description,
        "icon_name": icon_name,
        "gradient_from": gradient[0],
        "gradient_to": gradient[1],
        "trigger_type": trigger_type,
        "trigger_value": trigger_value,
    }


DEFAULT_BADGES: list[dict[str, Any]] = [
    # First-time
    _badge("First Steps", "Welcome to Silver Edge Academy!", "footprints", ("#3b82f6", "#8b5cf6"), "first_login"),
    _badge("Code Voyager", "Complete your first lesson", "rocket", ("#10b981", "#06b6d4"), "first_lesson"),
    _badge("Problem Solver", "Pass your first exercise", "puzzle", ("#f59e0b", "#f97316"), "first_exercise"),
    _badge("Quiz Master", "Complete your first quiz", "brain", ("#8b5cf6", "#a855f7"), "first_quiz"),
    _badge("Creative Coder", "Create your first sandbox project", "palette", ("#ec4899", "#f43f5e"), "first_sandbox"),
    # Lessons
    _badge("Learning Streak", "Complete 5 lessons", "book-open", ("#06b6d4", "#3b82f6"), "lessons_completed", 5),
    _badge("Knowledge Seeker", "Complete 10 lessons", "book", ("#3b82f6", "#6366f1"), "lessons_completed", 10),
    _badge("Learning Champion", "Complete 25 lessons", "trophy", ("#f59e0b", "#eab308"), "lessons_completed", 25),
    _badge("Master Student", "Complete 50 lessons", "crown", ("#fbbf24", "#f59e0b"), "lessons_completed", 50),
    # Exercises
    _badge("Code Warrior", "Pass 5 exercises", "sword", ("#10b981", "#14b8a6"), "exercises_passed", 5),
    _badge("Algorithm Expert", "Pass 10 exercises", "terminal", ("#14b8a6", "#06b6d4"), "exercises_passed", 10),
    _badge("Coding Ninja", "Pass 25 exercises", "ninja", ("#1f2937", "#374151"), "exercises_passed", 25),
    # Courses
    _badge("Course Completer", "Finish your first course", "graduation-cap", ("#8b5cf6", "#a855f7"), "courses_finished", 1),
    _badge("Polyglot Programmer", "Finish 2 courses", "code", ("#6366f1", "#8b5cf6"), "courses_finished", 2),
    # Streaks
    _badge("Committed Learner", "7-day login streak", "fire", ("#f97316", "#f59e0b"), "login_streak", 7),
    _badge("Dedicated Student", "14-day login streak", "flame", ("#ef4444", "#f97316"), "login_streak", 14),
    _badge("Unstoppable Force", "30-day login streak", "bolt", ("#dc2626", "#ef4444"), "login_streak", 30),
    # XP
    _badge("XP Hunter", "Earn 500 XP", "star", ("#22c55e", "#10b981"), "xp_earned", 500),
    _badge("XP Master", "Earn 1000 XP", "sparkles", ("#06b6d4", "#0ea5e9"), "xp_earned", 1000),
    _badge("XP Legend", "Earn 2500 XP", "stars", ("#8b5cf6", "#a855f7"), "xp_earned", 2500),
    _badge("XP God", "Earn 5000 XP", "infinity", ("#f59e0b", "#fbbf24"), "xp_earned", 5000),
    # Levels
    _badge("Rising Star", "Reach level 5", "trending-up", ("#10b981", "#14b8a6"), "level_reached", 5),
    _badge("Elite Coder", "Reach level 10", "shield", ("#3b82f6", "#6366f1"), "level_reached", 10),
    _badge("Legendary Programmer", "Reach level 15", "diamond", ("#8b5cf6", "#a855f7"), "level_reached", 15),
    _badge("Coding Deity", "Reach level 20", "gem", ("#f59e0b", "#fbbf24"), "level_reached", 20),
]


async def seed_badges(session: AsyncSession) -> list[Badge]:
    """Seed the default badge catalog.

    Badges whose name already exists are skipped, so the seed can be
    re-run after adding entries.

    Args:
        session: Database session.

    Returns:
        List of created badges.
    """
    existing = set((await session.scalars(select(Badge.name))).all())

    badges = [Badge(**data) for data in DEFAULT_BADGES if data["name"] not in existing]
    session.add_all(badges)
    await session.flush()

    logger.info("Seeded %d badges", len(badges))
    return badges

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student achievements snapshot: badges, XP, level and streaks."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from silveredge.core.config import get_settings
from silveredge.domains.gamification.exceptions import (
    NotAStudentError,
    StudentProfileNotFoundError,
)
from silveredge.domains.gamification.levels import level_progress
from silveredge.domains.gamification.streaks import activity_day, effective_streak
from silveredge.domains.gamification.xp_ledger import XpLedger
from silveredge.infrastructure.database.models import (
    Badge,
    StudentBadge,
    StudentProfile,
    User,
)
from silveredge.models.common import UserRole
from silveredge.models.gamification import (
    AchievementsResponse,
    BadgeResponse,
    EarnedBadgeResponse,
    LevelProgressResponse,
    XpTransactionResponse,
)
from silveredge.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class AchievementsService:
    """Builds the achievements view of a student.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        config = get_settings().gamification
        self.history_limit = config.achievements_history_limit
        self.level_step = config.level_xp_step

    async def get_student_achievements(self, student_id: str) -> AchievementsResponse:
        """Get a student's badges, XP, level and streak snapshot.

        Args:
            student_id: Student user identifier.

        Returns:
            Earned badges newest first, the level derived from total XP
            and the most recent XP grants.

        Raises:
            NotAStudentError: If the user does not exist or is not a student.
            StudentProfileNotFoundError: If the student has no profile.
        """
        user = await self.db.get(User, student_id)
        if user is None or user.role != UserRole.STUDENT.value:
            raise NotAStudentError(f"Student not found: {student_id}")

        result = await self.db.execute(
            select(StudentProfile)
            .where(StudentProfile.user_id == student_id)
            .execution_options(populate_existing=True)
        )
        profile = result.scalar_one_or_none()
        if profile is None:
            raise StudentProfileNotFoundError(f"Student profile not found: {student_id}")

        earned = await self.db.execute(
            select(Badge, StudentBadge.earned_at)
            .join(StudentBadge, StudentBadge.badge_id == Badge.id)
            .where(StudentBadge.student_id == student_id)
            .order_by(StudentBadge.earned_at.desc())
        )
        badges = [
            EarnedBadgeResponse(badge=BadgeResponse.model_validate(badge), earned_at=earned_at)
            for badge, earned_at in earned.all()
        ]

        history = await XpLedger(self.db).get_xp_history(student_id, self.history_limit)
        progress = level_progress(profile.total_xp, self.level_step)

        return AchievementsResponse(
            badges=badges,
            total_xp=profile.total_xp,
            level=progress.level,
            level_progress=LevelProgressResponse.model_validate(progress),
            currency_balance=profile.currency_balance,
            current_streak_days=effective_streak(
                profile.last_active_on,
                profile.current_streak_days,
                activity_day(utc_now()),
            ),
            longest_streak=profile.longest_streak,
            xp_history=[XpTransactionResponse.model_validate(tx) for tx in history],
        )

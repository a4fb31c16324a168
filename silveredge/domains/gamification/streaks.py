# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Consecutive-day activity streaks.

The streak is advanced inside the same UPDATE that overwrites the
student's last activity, with CASE expressions evaluated against the
stored previous day. Two activities racing on the same row therefore both
see a consistent previous value and never double-increment.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Any

from sqlalchemy import case, update
from sqlalchemy.ext.asyncio import AsyncSession

from silveredge.core.config import get_settings
from silveredge.domains.gamification.exceptions import StudentProfileNotFoundError
from silveredge.infrastructure.database.models import StudentProfile
from silveredge.utils.datetime import local_day, utc_now

logger = logging.getLogger(__name__)


def activity_day(moment: datetime | None = None, tz_name: str | None = None) -> date:
    """Calendar day an activity counts towards.

    Args:
        moment: When the activity happened (defaults to now).
        tz_name: IANA timezone; defaults to the configured gamification timezone.
    """
    if tz_name is None:
        tz_name = get_settings().gamification.timezone
    return local_day(moment or utc_now(), tz_name)


def streak_update_values(today: date, moment: datetime) -> dict[str, Any]:
    """Column assignments that record activity on ``today``.

    Same day as the previous activity leaves the streak unchanged, the day
    after extends it by one and any longer gap restarts it at 1. A stored
    day later than ``today`` (clock skew) is treated as same-day.

    Args:
        today: Calendar day of the activity.
        moment: Exact activity time stored as last_activity_date.

    Returns:
        Mapping of StudentProfile column names to SQL expressions, ready
        to be merged into an UPDATE ... VALUES.
    """
    previous = StudentProfile.last_active_on
    yesterday = today - timedelta(days=1)

    new_streak = case(
        (previous >= today, StudentProfile.current_streak_days),
        (previous == yesterday, StudentProfile.current_streak_days + 1),
        else_=1,
    )
    return {
        "current_streak_days": new_streak,
        "longest_streak": case(
            (new_streak > StudentProfile.longest_streak, new_streak),
            else_=StudentProfile.longest_streak,
        ),
        "last_active_on": case((previous > today, previous), else_=today),
        "last_activity_date": moment,
    }


def effective_streak(last_active_on: date | None, current: int, today: date) -> int:
    """Streak to display on ``today``.

    The stored streak is only advanced by activity; once a whole day has
    been missed it is already broken and shows as 0.
    """
    if last_active_on is None:
        return 0
    if (today - last_active_on).days > 1:
        return 0
    return current


class StreakTracker:
    """Records activity for students outside of XP grants.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession, tz_name: str | None = None) -> None:
        """Initialize streak tracker.

        Args:
            db: Async database session.
            tz_name: Timezone for calendar days; defaults to settings.
        """
        self.db = db
        self.tz_name = tz_name or get_settings().gamification.timezone

    async def record_activity(
        self,
        student_id: str,
        moment: datetime | None = None,
        extra_values: dict[str, Any] | None = None,
    ) -> None:
        """Advance the streak and overwrite the last activity time.

        Runs in the caller's transaction.

        Args:
            student_id: Student user identifier.
            moment: Activity time (defaults to now).
            extra_values: Further column assignments to apply in the same
                statement, e.g. counter increments.

        Raises:
            StudentProfileNotFoundError: If the student has no profile.
        """
        moment = moment or utc_now()
        values = streak_update_values(activity_day(moment, self.tz_name), moment)
        if extra_values:
            values.update(extra_values)

        result = await self.db.execute(
            update(StudentProfile)
            .where(StudentProfile.user_id == student_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise StudentProfileNotFoundError(f"Student profile not found: {student_id}")

        logger.debug("Recorded activity for student %s", student_id)

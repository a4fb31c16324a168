# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Gamification domain package.

- XpLedger: append-only XP grants with total and level sync
- Level curve: xp_for_level, level_for_xp, level_progress
- StreakTracker: consecutive-day activity streaks
- BadgeEvaluator: event-driven badge awards
- AchievementsService: badges, XP and streak snapshot
"""

from silveredge.domains.gamification.achievements import AchievementsService
from silveredge.domains.gamification.badges import (
    BadgeEvaluator,
    StudentCounters,
    qualifies,
    register_badge_triggers,
    triggers_for_event,
    unregister_badge_triggers,
)
from silveredge.domains.gamification.exceptions import (
    GamificationServiceError,
    NotAStudentError,
    StudentProfileNotFoundError,
)
from silveredge.domains.gamification.levels import (
    LevelProgress,
    level_for_xp,
    level_progress,
    xp_for_level,
)
from silveredge.domains.gamification.streaks import (
    StreakTracker,
    activity_day,
    effective_streak,
    streak_update_values,
)
from silveredge.domains.gamification.xp_ledger import (
    XpAward,
    XpLedger,
    publish_xp_awarded,
)

__all__ = [
    "AchievementsService",
    "BadgeEvaluator",
    "GamificationServiceError",
    "LevelProgress",
    "NotAStudentError",
    "StreakTracker",
    "StudentCounters",
    "StudentProfileNotFoundError",
    "XpAward",
    "XpLedger",
    "activity_day",
    "effective_streak",
    "level_for_xp",
    "level_progress",
    "publish_xp_awarded",
    "qualifies",
    "register_badge_triggers",
    "streak_update_values",
    "triggers_for_event",
    "unregister_badge_triggers",
    "xp_for_level",
]

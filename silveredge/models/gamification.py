# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""XP, level and badge schemas."""

from datetime import datetime

from pydantic import Field

from silveredge.models.common import APIModel, BadgeTriggerType


class XpTransactionResponse(APIModel):
    """One XP grant."""

    id: int
    amount: int
    source: str
    source_id: str | None = None
    earned_at: datetime


class XpHistoryResponse(APIModel):
    """A page of a student's XP ledger."""

    items: list[XpTransactionResponse]
    total: int
    limit: int
    offset: int


class LevelProgressResponse(APIModel):
    """Position of a student on the level curve."""

    level: int
    xp_into_level: int
    xp_for_next_level: int
    progress_percent: int


class BadgeResponse(APIModel):
    """Badge catalog entry."""

    id: str
    name: str
    description: str
    icon_name: str
    gradient_from: str | None = None
    gradient_to: str | None = None
    trigger_type: BadgeTriggerType
    trigger_value: int | None = None


class EarnedBadgeResponse(APIModel):
    """A badge held by a student."""

    badge: BadgeResponse
    earned_at: datetime


class BadgeCatalogEntry(BadgeResponse):
    """Badge with the student's status towards it.

    progress is the student's current counter, capped at trigger_value
    for threshold badges and 0/1 for first-time badges.
    """

    is_earned: bool = False
    earned_at: datetime | None = None
    progress: int = 0
    target: int = 1


class AchievementsResponse(APIModel):
    """Badges, XP and streak snapshot of a student."""

    badges: list[EarnedBadgeResponse] = Field(default_factory=list)
    total_xp: int
    level: int
    level_progress: LevelProgressResponse
    currency_balance: int
    current_streak_days: int
    longest_streak: int
    xp_history: list[XpTransactionResponse] = Field(default_factory=list)

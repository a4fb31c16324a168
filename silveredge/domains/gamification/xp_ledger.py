# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""XP ledger.

Every XP grant is one row in xp_transactions; the profile's total_xp is a
running sum maintained with an in-place increment, never a read-modify-write.
Grants are never edited or reversed.

Example:
    ledger = XpLedger(db)
    award = await ledger.award_xp(student_id, 10, "Completed Lesson: Loops", lesson_id)
    await db.commit()
    await publish_xp_awarded(event_bus, award)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from silveredge.core.config import get_settings
from silveredge.domains.gamification.exceptions import StudentProfileNotFoundError
from silveredge.domains.gamification.levels import level_for_xp
from silveredge.domains.gamification.streaks import activity_day, streak_update_values
from silveredge.infrastructure.database.models import StudentProfile, XpTransaction
from silveredge.infrastructure.events import EventBus, EventTypes
from silveredge.utils.datetime import utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class XpAward:
    """Outcome of one XP grant."""

    student_id: str
    amount: int
    source: str
    source_id: str | None
    total_xp: int
    level: int
    leveled_up: bool
    earned_at: datetime
    transaction_id: int

    def to_event_payload(self) -> dict[str, Any]:
        """Payload for the XP awarded event."""
        return {
            "student_id": self.student_id,
            "amount": self.amount,
            "source": self.source,
            "source_id": self.source_id,
            "total_xp": self.total_xp,
            "level": self.level,
            "leveled_up": self.leveled_up,
        }


class XpLedger:
    """Appends XP grants and keeps the profile total and level in step.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize the ledger.

        Args:
            db: Async database session. The ledger never commits; grants
                become durable with the caller's transaction.
        """
        self.db = db
        config = get_settings().gamification
        self.level_step = config.level_xp_step
        self.history_limit = config.xp_history_limit
        self.tz_name = config.timezone

    async def award_xp(
        self,
        student_id: str,
        amount: int,
        source: str,
        source_id: str | None = None,
        update_last_activity: bool = True,
    ) -> XpAward | None:
        """Grant XP to a student.

        Args:
            student_id: Student user identifier.
            amount: XP to add. Non-positive amounts are ignored.
            source: Human-readable description of what earned the XP.
            source_id: Identifier of the lesson, exercise or quiz.
            update_last_activity: Also record activity (streak and last
                activity date) in the same statement.

        Returns:
            The award, or None when amount is not positive.

        Raises:
            StudentProfileNotFoundError: If the student has no profile.
        """
        if amount <= 0:
            return None

        moment = utc_now()
        values: dict[str, Any] = {"total_xp": StudentProfile.total_xp + amount}
        if update_last_activity:
            values.update(streak_update_values(activity_day(moment, self.tz_name), moment))

        result = await self.db.execute(
            update(StudentProfile)
            .where(StudentProfile.user_id == student_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise StudentProfileNotFoundError(f"Student profile not found: {student_id}")

        transaction = XpTransaction(
            student_id=student_id,
            amount=amount,
            source=source,
            source_id=source_id,
            earned_at=moment,
        )
        self.db.add(transaction)
        await self.db.flush()

        total_xp = await self.db.scalar(
            select(StudentProfile.total_xp).where(StudentProfile.user_id == student_id)
        )
        level = level_for_xp(total_xp, self.level_step)

        # Only ever raises the level, so concurrent grants can't lower it.
        level_result = await self.db.execute(
            update(StudentProfile)
            .where(
                StudentProfile.user_id == student_id,
                StudentProfile.current_level < level,
            )
            .values(current_level=level)
            .execution_options(synchronize_session=False)
        )
        leveled_up = level_result.rowcount > 0

        logger.info(
            "Awarded %d XP to student %s (%s), total=%d level=%d",
            amount,
            student_id,
            source,
            total_xp,
            level,
        )

        return XpAward(
            student_id=student_id,
            amount=amount,
            source=source,
            source_id=source_id,
            total_xp=total_xp,
            level=level,
            leveled_up=leveled_up,
            earned_at=moment,
            transaction_id=transaction.id,
        )

    async def get_xp_history(
        self,
        student_id: str,
        limit: int | None = None,
    ) -> list[XpTransaction]:
        """Get the newest XP grants of a student, newest first.

        Args:
            student_id: Student user identifier.
            limit: Number of entries; capped at the history limit.

        Returns:
            At most ``xp_history_limit`` transactions.

        Raises:
            StudentProfileNotFoundError: If the student has no profile.
        """
        await self._ensure_profile(student_id)

        if limit is None or limit > self.history_limit:
            limit = self.history_limit

        result = await self.db.execute(
            select(XpTransaction)
            .where(XpTransaction.student_id == student_id)
            .order_by(XpTransaction.id.desc())
            .limit(max(limit, 0))
        )
        return list(result.scalars().all())

    async def list_xp_transactions(
        self,
        student_id: str,
        limit: int = 20,
        offset: int = 0,
        source_prefix: str | None = None,
    ) -> tuple[list[XpTransaction], int]:
        """Page through the full ledger of a student.

        Args:
            student_id: Student user identifier.
            limit: Page size.
            offset: Number of newest entries to skip.
            source_prefix: Only grants whose source starts with this text,
                e.g. "Completed Lesson".

        Returns:
            Tuple of (transactions newest first, total matching count).

        Raises:
            StudentProfileNotFoundError: If the student has no profile.
        """
        await self._ensure_profile(student_id)

        filters = [XpTransaction.student_id == student_id]
        if source_prefix:
            filters.append(XpTransaction.source.startswith(source_prefix, autoescape=True))

        total = await self.db.scalar(
            select(func.count()).select_from(XpTransaction).where(*filters)
        )
        result = await self.db.execute(
            select(XpTransaction)
            .where(*filters)
            .order_by(XpTransaction.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all()), total or 0

    async def _ensure_profile(self, student_id: str) -> None:
        exists = await self.db.scalar(
            select(StudentProfile.id).where(StudentProfile.user_id == student_id)
        )
        if exists is None:
            raise StudentProfileNotFoundError(f"Student profile not found: {student_id}")


async def publish_xp_awarded(event_bus: EventBus, award: XpAward | None) -> None:
    """Publish the XP awarded event for a committed grant."""
    if award is None:
        return
    await event_bus.publish(EventTypes.Gamification.XP_AWARDED, award.to_event_payload())

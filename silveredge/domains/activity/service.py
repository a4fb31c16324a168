# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student activity outside lessons: logins and sandbox projects.

Both count as activity for streaks and feed the first-login and
first-sandbox badges through their events.
"""

from __future__ import annotations

import logging

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from silveredge.domains.gamification.exceptions import StudentProfileNotFoundError
from silveredge.domains.gamification.streaks import StreakTracker
from silveredge.domains.user.roles import StudentProfileView
from silveredge.infrastructure.database.models import SandboxProject, StudentProfile, User
from silveredge.infrastructure.events import EventBus, EventTypes, get_event_bus
from silveredge.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class StudentActivityService:
    """Records logins and sandbox project creation.

    Attributes:
        db: Async database session.
        event_bus: Bus that receives events after each commit.
    """

    def __init__(self, db: AsyncSession, event_bus: EventBus | None = None) -> None:
        self.db = db
        self.event_bus = event_bus or get_event_bus()

    async def record_login(self, student_id: str) -> StudentProfileView:
        """Count a login and advance the streak.

        Raises:
            StudentProfileNotFoundError: If the student has no profile.
        """
        now = utc_now()
        await StreakTracker(self.db).record_activity(
            student_id,
            now,
            extra_values={"login_count": StudentProfile.login_count + 1},
        )
        await self.db.execute(
            update(User)
            .where(User.id == student_id)
            .values(last_login_at=now)
            .execution_options(synchronize_session=False)
        )

        profile = await self._reload_profile(student_id)
        await self.db.commit()

        logger.info("Student %s logged in (login #%d)", student_id, profile.login_count)
        await self.event_bus.publish(
            EventTypes.Student.LOGGED_IN,
            {"student_id": student_id, "login_count": profile.login_count},
        )
        return profile

    async def record_sandbox_project(self, student_id: str, project_id: str) -> StudentProfileView:
        """Count a newly created sandbox project.

        Each project counts once. Reporting a project again returns the
        profile unchanged, without recording activity or publishing.

        Raises:
            StudentProfileNotFoundError: If the student has no profile.
        """
        profile = await self._reload_profile(student_id)
        if not await self._claim_project(student_id, project_id):
            await self.db.commit()
            logger.debug("Sandbox project %s already counted for %s", project_id, student_id)
            return profile

        await StreakTracker(self.db).record_activity(
            student_id,
            extra_values={"sandbox_project_count": StudentProfile.sandbox_project_count + 1},
        )

        profile = await self._reload_profile(student_id)
        await self.db.commit()

        logger.info("Student %s created sandbox project %s", student_id, project_id)
        await self.event_bus.publish(
            EventTypes.Student.SANDBOX_PROJECT_CREATED,
            {"student_id": student_id, "project_id": project_id},
        )
        return profile

    async def _claim_project(self, student_id: str, project_id: str) -> bool:
        """Record the project; False if it was already recorded."""
        try:
            async with self.db.begin_nested():
                self.db.add(SandboxProject(student_id=student_id, project_id=project_id))
        except IntegrityError:
            return False
        return True

    async def _reload_profile(self, student_id: str) -> StudentProfileView:
        result = await self.db.execute(
            select(StudentProfile)
            .where(StudentProfile.user_id == student_id)
            .execution_options(populate_existing=True)
        )
        profile = result.scalar_one_or_none()
        if profile is None:
            raise StudentProfileNotFoundError(f"Student profile not found: {student_id}")
        return StudentProfileView.model_validate(profile)

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

Example:
    @router.get("/students/{student_id}/progress")
    async def get_progress(
        student_id: str,
        db: AsyncSession = Depends(get_db),
    ):
        ...
"""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from silveredge.infrastructure.database import get_session
from silveredge.infrastructure.events import EventBus, get_event_bus


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session for one request.

    Yields:
        AsyncSession committed on success and rolled back on error.
    """
    async with get_session() as session:
        yield session


def get_events() -> EventBus:
    """Get the application event bus."""
    return get_event_bus()

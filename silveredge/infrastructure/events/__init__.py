# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Event infrastructure.

Components:
- EventBus: In-memory pub/sub with pattern matching
- EventTypes: Centralized event type constants

Quick Start:
    from silveredge.infrastructure.events import get_event_bus, EventTypes

    event_bus = get_event_bus()
    event_bus.subscribe(EventTypes.Progress.LESSON_COMPLETED, my_handler)
"""

from silveredge.infrastructure.events.bus import (
    EventBus,
    EventData,
    EventHandler,
    get_event_bus,
    reset_event_bus,
)
from silveredge.infrastructure.events.types import EventPatterns, EventTypes

__all__ = [
    "EventBus",
    "EventData",
    "EventHandler",
    "EventPatterns",
    "EventTypes",
    "get_event_bus",
    "reset_event_bus",
]

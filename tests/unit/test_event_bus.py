# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the in-memory event bus."""

import pytest

from silveredge.infrastructure.events import (
    EventBus,
    EventData,
    EventTypes,
    get_event_bus,
    reset_event_bus,
)


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


class TestEventBus:
    """Tests for subscribe and publish."""

    @pytest.mark.asyncio
    async def test_exact_subscription(self, bus: EventBus) -> None:
        received: list[EventData] = []

        async def handler(event: EventData) -> None:
            received.append(event)

        bus.subscribe(EventTypes.Progress.LESSON_COMPLETED, handler)
        await bus.publish(EventTypes.Progress.LESSON_COMPLETED, {"student_id": "s1"})
        await bus.publish(EventTypes.Progress.LESSON_STARTED, {"student_id": "s1"})

        assert len(received) == 1
        assert received[0].student_id == "s1"
        assert received[0].event_type == "progress.lesson.completed"

    @pytest.mark.asyncio
    async def test_pattern_subscription(self, bus: EventBus) -> None:
        received: list[str] = []

        async def handler(event: EventData) -> None:
            received.append(event.event_type)

        bus.subscribe("progress.*", handler)
        await bus.publish(EventTypes.Progress.QUIZ_SUBMITTED, {})
        await bus.publish(EventTypes.Gamification.XP_AWARDED, {})

        assert received == [EventTypes.Progress.QUIZ_SUBMITTED]

    @pytest.mark.asyncio
    async def test_failing_handler_does_not_stop_others(self, bus: EventBus) -> None:
        received: list[str] = []

        async def broken(event: EventData) -> None:
            raise RuntimeError("boom")

        async def working(event: EventData) -> None:
            received.append(event.event_id)

        bus.subscribe(EventTypes.Student.LOGGED_IN, broken)
        bus.subscribe(EventTypes.Student.LOGGED_IN, working)

        event = await bus.publish(EventTypes.Student.LOGGED_IN, {"student_id": "s1"})

        assert received == [event.event_id]

    @pytest.mark.asyncio
    async def test_unsubscribe(self, bus: EventBus) -> None:
        calls: list[int] = []

        async def handler(event: EventData) -> None:
            calls.append(1)

        bus.subscribe(EventTypes.Student.LOGGED_IN, handler)

        assert bus.unsubscribe(EventTypes.Student.LOGGED_IN, handler) is True
        assert bus.unsubscribe(EventTypes.Student.LOGGED_IN, handler) is False

        await bus.publish(EventTypes.Student.LOGGED_IN, {})
        assert calls == []

    @pytest.mark.asyncio
    async def test_stats(self, bus: EventBus) -> None:
        async def handler(event: EventData) -> None:
            return None

        bus.subscribe(EventTypes.Student.LOGGED_IN, handler)
        bus.subscribe("gamification.*", handler)
        await bus.publish(EventTypes.Student.LOGGED_IN, {})

        stats = bus.get_stats()

        assert stats["total_handlers"] == 2
        assert stats["events_published"] == 1
        assert stats["patterns"] == ["gamification.*"]

    def test_event_to_dict(self) -> None:
        event = EventData(event_type="x.y", payload={"a": 1})

        data = event.to_dict()

        assert data["event_type"] == "x.y"
        assert data["payload"] == {"a": 1}
        assert "T" in data["timestamp"]


class TestEventBusSingleton:
    """Tests for the application bus."""

    def test_singleton(self) -> None:
        assert get_event_bus() is get_event_bus()

    def test_reset(self) -> None:
        first = get_event_bus()
        reset_event_bus()
        assert get_event_bus() is not first

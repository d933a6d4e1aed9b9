"""
Tests for the EventBus: priority, filtering, middleware, fault tolerance.
"""

import asyncio

import pytest

from sceneplay.models.enums import PlaybackMode
from sceneplay.models.events import EventType, PlaybackCompletedEvent, PlaybackStateChangedEvent
from sceneplay.services.event_bus import EventBus


def completed(scene_id="scene", generation=1):
    return PlaybackCompletedEvent(scene_id, generation)


class TestPublish:

    @pytest.mark.asyncio
    async def test_sync_and_async_handlers(self, event_bus):
        received = []

        async def on_async(event):
            received.append(("async", event.scene_id))

        event_bus.subscribe(EventType.PLAYBACK_COMPLETED, on_async)
        event_bus.subscribe(EventType.PLAYBACK_COMPLETED, lambda e: received.append(("sync", e.scene_id)))

        await event_bus.publish(completed("solar_system"))

        assert sorted(received) == [("async", "solar_system"), ("sync", "solar_system")]

    @pytest.mark.asyncio
    async def test_only_matching_type_delivered(self, event_bus):
        received = []
        event_bus.subscribe(EventType.PLAYBACK_TICK, received.append)

        await event_bus.publish(completed())

        assert received == []

    @pytest.mark.asyncio
    async def test_priority_order(self, event_bus):
        order = []
        event_bus.subscribe(EventType.PLAYBACK_COMPLETED, lambda e: order.append("low"), priority=0)
        event_bus.subscribe(EventType.PLAYBACK_COMPLETED, lambda e: order.append("high"), priority=10)

        await event_bus.publish(completed())

        assert order == ["high", "low"]

    @pytest.mark.asyncio
    async def test_filter(self, event_bus):
        received = []
        event_bus.subscribe(
            EventType.PLAYBACK_COMPLETED,
            received.append,
            filter_fn=lambda e: e.generation == 2,
        )

        await event_bus.publish(completed(generation=1))
        await event_bus.publish(completed(generation=2))

        assert [e.generation for e in received] == [2]

    @pytest.mark.asyncio
    async def test_failing_handler_does_not_stop_others(self, event_bus):
        received = []

        def broken(event):
            raise RuntimeError("boom")

        event_bus.subscribe(EventType.PLAYBACK_COMPLETED, broken, priority=5)
        event_bus.subscribe(EventType.PLAYBACK_COMPLETED, received.append)

        await event_bus.publish(completed())

        assert len(received) == 1

    @pytest.mark.asyncio
    async def test_unsubscribe(self, event_bus):
        received = []
        event_bus.subscribe(EventType.PLAYBACK_COMPLETED, received.append)

        assert event_bus.unsubscribe(EventType.PLAYBACK_COMPLETED, received.append)
        assert not event_bus.unsubscribe(EventType.PLAYBACK_COMPLETED, received.append)
        await event_bus.publish(completed())

        assert received == []

    @pytest.mark.asyncio
    async def test_once_handler_removed_after_delivery(self, event_bus):
        received = []
        event_bus.subscribe(EventType.PLAYBACK_COMPLETED, received.append, once=True)

        await event_bus.publish(completed("first"))
        await event_bus.publish(completed("second"))

        assert [e.scene_id for e in received] == ["first"]
        assert event_bus.handler_count(EventType.PLAYBACK_COMPLETED) == 0

    @pytest.mark.asyncio
    async def test_once_handler_kept_until_filter_matches(self, event_bus):
        received = []
        event_bus.subscribe(
            EventType.PLAYBACK_COMPLETED,
            received.append,
            filter_fn=lambda e: e.generation == 2,
            once=True,
        )

        await event_bus.publish(completed(generation=1))
        assert event_bus.handler_count(EventType.PLAYBACK_COMPLETED) == 1

        await event_bus.publish(completed(generation=2))
        assert [e.generation for e in received] == [2]
        assert event_bus.handler_count(EventType.PLAYBACK_COMPLETED) == 0


class TestWaitFor:

    @pytest.mark.asyncio
    async def test_resolves_with_matching_event(self, event_bus):
        waiter = asyncio.ensure_future(
            event_bus.wait_for(EventType.PLAYBACK_COMPLETED, lambda e: e.scene_id == "wanted", timeout=1)
        )
        await asyncio.sleep(0)

        await event_bus.publish(completed("other"))
        await event_bus.publish(completed("wanted"))

        event = await waiter
        assert event.scene_id == "wanted"
        assert event_bus.handler_count(EventType.PLAYBACK_COMPLETED) == 0

    @pytest.mark.asyncio
    async def test_timeout_cleans_up(self, event_bus):
        with pytest.raises(asyncio.TimeoutError):
            await event_bus.wait_for(EventType.PLAYBACK_COMPLETED, timeout=0.01)

        assert event_bus.handler_count(EventType.PLAYBACK_COMPLETED) == 0


class TestMiddleware:

    @pytest.mark.asyncio
    async def test_blocking_middleware(self, event_bus):
        received = []
        event_bus.subscribe(EventType.PLAYBACK_COMPLETED, received.append)
        event_bus.add_middleware(lambda e: None)

        await event_bus.publish(completed())

        assert received == []
        assert event_bus.get_event_history() == []

    @pytest.mark.asyncio
    async def test_middleware_may_replace_event(self, event_bus):
        received = []
        event_bus.subscribe(EventType.PLAYBACK_COMPLETED, received.append)
        event_bus.add_middleware(lambda e: completed("rewritten", e.generation))

        await event_bus.publish(completed("original"))

        assert received[0].scene_id == "rewritten"


class TestHistory:

    @pytest.mark.asyncio
    async def test_history_bounded(self):
        bus = EventBus(history_limit=3)
        for i in range(5):
            await bus.publish(PlaybackStateChangedEvent(PlaybackMode.IDLE, PlaybackMode.PLAYING, float(i)))

        history = bus.get_event_history(limit=10)
        assert [e.cursor_ms for e in history] == [2.0, 3.0, 4.0]

    @pytest.mark.asyncio
    async def test_clear_history(self, event_bus):
        await event_bus.publish(completed())
        event_bus.clear_history()

        assert event_bus.get_event_history() == []

    def test_event_payload(self):
        event = completed("photosynthesis", 4)

        assert event.to_data() == {"scene_id": "photosynthesis", "generation": 4}

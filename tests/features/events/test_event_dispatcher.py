"""Tests for the event dispatcher."""

import asyncio

import pytest

from neo_permissions.features.events.entities import PermissionChangeEvent
from neo_permissions.features.events.services import EventDispatcherService


def _event(user_id: str = "usr_a") -> PermissionChangeEvent:
    return PermissionChangeEvent.role_assigned(user_id, "AUDITOR", "usr_org_admin")


class TestEventDispatcherService:
    """Delivery order, failure isolation and shutdown draining."""

    @pytest.mark.asyncio
    async def test_subscribers_called_in_registration_order(self, dispatcher):
        calls = []

        async def first(event):
            calls.append(("first", event.user_id))

        async def second(event):
            calls.append(("second", event.user_id))

        dispatcher.subscribe(first)
        dispatcher.subscribe(second)

        dispatcher.publish(_event("usr_a"))
        dispatcher.publish(_event("usr_b"))
        await dispatcher.join()

        assert calls == [
            ("first", "usr_a"),
            ("second", "usr_a"),
            ("first", "usr_b"),
            ("second", "usr_b"),
        ]

    @pytest.mark.asyncio
    async def test_failing_subscriber_does_not_block_others(self, dispatcher):
        received = []

        async def broken(event):
            raise RuntimeError("boom")

        async def healthy(event):
            received.append(event)

        dispatcher.subscribe(broken)
        dispatcher.subscribe(healthy)

        dispatcher.publish(_event())
        await dispatcher.join()

        assert len(received) == 1
        assert dispatcher.is_running

    @pytest.mark.asyncio
    async def test_publish_does_not_wait_for_delivery(self):
        dispatcher = EventDispatcherService()
        received = []

        async def handler(event):
            received.append(event)

        dispatcher.subscribe(handler)
        dispatcher.publish(_event())

        assert received == []
        assert dispatcher.pending == 1

        await dispatcher.start()
        await dispatcher.stop()

        assert len(received) == 1

    @pytest.mark.asyncio
    async def test_stop_drains_queue(self):
        dispatcher = EventDispatcherService()
        received = []

        async def slow(event):
            await asyncio.sleep(0.01)
            received.append(event.user_id)

        dispatcher.subscribe(slow)
        await dispatcher.start()
        for user_id in ("usr_1", "usr_2", "usr_3"):
            dispatcher.publish(_event(user_id))

        await dispatcher.stop()

        assert received == ["usr_1", "usr_2", "usr_3"]
        assert not dispatcher.is_running

    @pytest.mark.asyncio
    async def test_full_queue_drops_event(self):
        dispatcher = EventDispatcherService(max_queue_size=1)

        dispatcher.publish(_event("usr_1"))
        dispatcher.publish(_event("usr_2"))

        assert dispatcher.pending == 1

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self, dispatcher):
        await dispatcher.start()

        assert dispatcher.is_running

    @pytest.mark.asyncio
    async def test_stop_without_start(self):
        dispatcher = EventDispatcherService()

        await dispatcher.stop()

        assert not dispatcher.is_running

"""Unit tests for the realtime publish/subscribe hub."""
from __future__ import annotations

import asyncio
import json

from huddle.services.realtime import RealtimeHub


class _FakeSocket:
    def __init__(self, *, fail: bool = False) -> None:
        self.accepted = False
        self.sent: list[str] = []
        self.fail = fail

    async def accept(self) -> None:
        self.accepted = True

    async def send_text(self, data: str) -> None:
        if self.fail:
            raise RuntimeError("connection closed")
        self.sent.append(data)


def test_publish_reaches_sockets_and_subscribers():
    hub = RealtimeHub()
    socket = _FakeSocket()
    received: list[tuple[str, dict]] = []

    async def scenario() -> None:
        await hub.connect("feed", socket)
        hub.subscribe("feed", lambda channel, payload: received.append((channel, payload)))
        await hub.publish("feed", {"type": "post.created", "post_id": "p1"})
        await hub.publish("user:someone-else", {"type": "ignored"})

    asyncio.run(scenario())

    assert socket.accepted is True
    assert [json.loads(item) for item in socket.sent] == [{"type": "post.created", "post_id": "p1"}]
    assert received == [("feed", {"type": "post.created", "post_id": "p1"})]


def test_closed_subscription_stops_delivery():
    hub = RealtimeHub()
    received: list[dict] = []

    async def callback(channel: str, payload: dict) -> None:
        received.append(payload)

    async def scenario() -> None:
        with hub.subscribe("notifications:1", callback) as subscription:
            assert hub.subscriber_count("notifications:1") == 1
            await hub.publish("notifications:1", {"unread_count": 1})
        assert subscription.closed is True
        assert hub.subscriber_count("notifications:1") == 0
        await hub.publish("notifications:1", {"unread_count": 2})
        subscription.close()

    asyncio.run(scenario())
    assert received == [{"unread_count": 1}]


def test_publish_to_many_channels_and_drops_dead_sockets():
    hub = RealtimeHub()
    healthy = _FakeSocket()
    broken = _FakeSocket(fail=True)

    async def scenario() -> None:
        await hub.connect("user:a", healthy)
        await hub.connect("user:b", broken)
        await hub.publish(["user:a", "user:b"], {"type": "conversation.updated"})

    asyncio.run(scenario())

    assert len(healthy.sent) == 1
    assert hub.connection_count("user:a") == 1
    assert hub.connection_count("user:b") == 0


def test_failing_subscriber_does_not_block_others():
    hub = RealtimeHub()
    received: list[dict] = []

    def broken(channel: str, payload: dict) -> None:
        raise RuntimeError("boom")

    hub.subscribe("feed", broken)
    hub.subscribe("feed", lambda channel, payload: received.append(payload))

    asyncio.run(hub.publish("feed", {"type": "post.deleted"}))
    assert received == [{"type": "post.deleted"}]


def test_schedule_publish_without_loop_is_noop():
    hub = RealtimeHub()
    received: list[dict] = []
    hub.subscribe("feed", lambda channel, payload: received.append(payload))

    hub.schedule_publish("feed", {"type": "post.created"})
    assert received == []

    async def scenario() -> None:
        hub.schedule_publish("feed", {"type": "post.created"})
        for _ in range(3):
            await asyncio.sleep(0)

    asyncio.run(scenario())
    assert received == [{"type": "post.created"}]


def test_disconnect_removes_socket():
    hub = RealtimeHub()
    socket = _FakeSocket()

    async def scenario() -> None:
        await hub.connect("conversation:1", socket)
        assert hub.connection_count("conversation:1") == 1
        await hub.disconnect(socket)
        await hub.disconnect(socket)

    asyncio.run(scenario())
    assert hub.connection_count("conversation:1") == 0


def test_scheduled_publish_is_tracked_until_done():
    hub = RealtimeHub()
    received: list[dict] = []
    hub.subscribe("feed", lambda channel, payload: received.append(payload))

    async def scenario() -> None:
        hub.schedule_publish("feed", {"type": "post.engagement"})
        assert len(hub._pending) == 1
        for _ in range(3):
            await asyncio.sleep(0)
        assert hub._pending == set()

    asyncio.run(scenario())
    assert received == [{"type": "post.engagement"}]

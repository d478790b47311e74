"""In-memory publish/subscribe hub backing the realtime WebSocket channels.

Channels are plain strings (``feed``, ``user:<id>``, ``notifications:<id>``,
``conversation:<id>``). A payload published on a channel is delivered to every
WebSocket connected to it and then to every in-process subscriber holding an
open :class:`Subscription`.
"""
from __future__ import annotations

import asyncio
import inspect
import json
import logging
from typing import Any, Awaitable, Callable, Iterable

from fastapi import WebSocket

logger = logging.getLogger(__name__)

Payload = dict[str, Any]
Callback = Callable[[str, Payload], Awaitable[None] | None]


class Subscription:
    """Handle returned by :meth:`RealtimeHub.subscribe`; close it to stop delivery."""

    def __init__(self, hub: "RealtimeHub", channel: str, callback: Callback) -> None:
        self._hub = hub
        self.channel = channel
        self.callback = callback
        self.closed = False

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._hub._remove_subscription(self)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class RealtimeHub:
    """Tracks per-channel WebSocket connections and in-process subscribers."""

    def __init__(self) -> None:
        self._channels: dict[str, set[WebSocket]] = {}
        self._connections: dict[WebSocket, str] = {}
        self._subscriptions: dict[str, list[Subscription]] = {}
        self._lock = asyncio.Lock()
        self._pending: set[asyncio.Task] = set()

    async def connect(self, channel: str, websocket: WebSocket) -> None:
        await websocket.accept()
        async with self._lock:
            group = self._channels.setdefault(channel, set())
            group.add(websocket)
            self._connections[websocket] = channel

    async def disconnect(self, websocket: WebSocket) -> None:
        async with self._lock:
            channel = self._connections.pop(websocket, None)
            if not channel:
                return
            group = self._channels.get(channel)
            if group is None:
                return
            group.discard(websocket)
            if not group:
                self._channels.pop(channel, None)

    def subscribe(self, channel: str, callback: Callback) -> Subscription:
        subscription = Subscription(self, channel, callback)
        self._subscriptions.setdefault(channel, []).append(subscription)
        return subscription

    def _remove_subscription(self, subscription: Subscription) -> None:
        group = self._subscriptions.get(subscription.channel)
        if not group:
            return
        if subscription in group:
            group.remove(subscription)
        if not group:
            self._subscriptions.pop(subscription.channel, None)

    def connection_count(self, channel: str) -> int:
        return len(self._channels.get(channel, ()))

    def subscriber_count(self, channel: str) -> int:
        return len(self._subscriptions.get(channel, ()))

    async def publish(self, channels: str | Iterable[str], payload: Payload) -> None:
        if isinstance(channels, str):
            targets_by_channel = [channels]
        else:
            targets_by_channel = [channel for channel in channels if channel]
        if not targets_by_channel:
            return

        serialized = json.dumps(payload, default=str)
        for channel in targets_by_channel:
            async with self._lock:
                sockets = list(self._channels.get(channel, ()))
            for ws in sockets:
                try:
                    await ws.send_text(serialized)
                except Exception:
                    logger.info("Dropping realtime connection on %s after failed send", channel)
                    await self.disconnect(ws)

            for subscription in list(self._subscriptions.get(channel, ())):
                if subscription.closed:
                    continue
                try:
                    result = subscription.callback(channel, payload)
                    if inspect.isawaitable(result):
                        await result
                except Exception:
                    logger.exception("Realtime subscriber on %s failed", channel)

    def schedule_publish(self, channels: str | Iterable[str], payload: Payload) -> None:
        """Publish from synchronous code when an event loop is running."""

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        task = loop.create_task(self.publish(channels, payload))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)


realtime_hub = RealtimeHub()


__all__ = ["RealtimeHub", "Subscription", "realtime_hub"]

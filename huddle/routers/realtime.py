"""WebSocket endpoint that emits realtime feed events."""
from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from ..constants import FEED_CHANNEL
from ..services.realtime import realtime_hub

router = APIRouter()
logger = logging.getLogger(__name__)


@router.websocket("/ws/feed")
async def feed_updates(websocket: WebSocket) -> None:
    """Maintain a long-lived connection that pushes post and engagement events."""

    await realtime_hub.connect(FEED_CHANNEL, websocket)
    logger.info("Feed socket connected from %s", websocket.client)
    try:
        while True:
            try:
                raw = await websocket.receive_text()
            except WebSocketDisconnect:
                break

            try:
                payload = json.loads(raw)
            except json.JSONDecodeError:
                payload = {"type": raw}
            if not isinstance(payload, dict):
                payload = {}

            message_type = str(payload.get("type") or "").lower()
            if message_type == "ping":
                await websocket.send_text(json.dumps({"type": "pong"}))
            elif message_type == "hello":
                await websocket.send_text(json.dumps({"type": "ready"}))
    finally:
        await realtime_hub.disconnect(websocket)
        logger.info("Feed socket disconnected from %s", websocket.client)


__all__ = ["router"]

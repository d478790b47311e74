"""Notification API routes."""
from __future__ import annotations

import json
import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status
from sqlalchemy.orm import Session

from ..constants import notification_channel
from ..database import get_session, session_scope
from ..models import Profile
from ..schemas import NotificationListResponse, NotificationResponse, NotificationSummaryResponse
from ..services import (
    AuthenticationError,
    count_unread_notifications,
    decode_access_token,
    get_current_user,
    list_notifications,
    mark_all_read,
    mark_read,
)
from ..services.notification_service import serialize_notification
from ..services.realtime import realtime_hub

router = APIRouter(prefix="/notifications", tags=["notifications"])

logger = logging.getLogger(__name__)


@router.get("/", response_model=NotificationListResponse)
async def list_my_notifications(
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> NotificationListResponse:
    records = list_notifications(db, current_user.id)
    return NotificationListResponse(
        items=[NotificationResponse(**serialize_notification(item)) for item in records],
        unread_count=count_unread_notifications(db, current_user.id),
    )


@router.get("/summary", response_model=NotificationSummaryResponse)
async def notification_summary_endpoint(
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> NotificationSummaryResponse:
    unread = count_unread_notifications(db, current_user.id)
    return NotificationSummaryResponse(unread_count=unread)


@router.post("/mark-read", response_model=NotificationSummaryResponse)
async def mark_notifications_read(
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> NotificationSummaryResponse:
    mark_all_read(db, current_user.id)
    return NotificationSummaryResponse(unread_count=count_unread_notifications(db, current_user.id))


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: UUID,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> NotificationResponse:
    record = mark_read(db, recipient_id=current_user.id, notification_id=notification_id)
    return NotificationResponse(**serialize_notification(record))


@router.websocket("/ws")
async def notifications_socket(
    websocket: WebSocket,
    token: str = Query(..., alias="token"),
) -> None:
    try:
        with session_scope() as session:
            user_id = decode_access_token(token, session)
            unread = count_unread_notifications(session, user_id)
    except AuthenticationError:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    channel = notification_channel(user_id)
    await realtime_hub.connect(channel, websocket)
    await websocket.send_text(json.dumps({"type": "ready", "unread_count": unread}))
    try:
        while True:
            try:
                payload = await websocket.receive_text()
            except WebSocketDisconnect:
                break
            if payload.strip().lower() == "ping":
                await websocket.send_text(json.dumps({"type": "pong"}))
    finally:
        await realtime_hub.disconnect(websocket)
        logger.debug("Notification socket for %s closed", user_id)

"""Direct conversation and messaging API routes."""
from __future__ import annotations

import json
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.websockets import WebSocket, WebSocketDisconnect
from sqlalchemy.orm import Session

from ..constants import conversation_channel, user_channel
from ..database import get_session, session_scope
from ..models import Profile
from ..schemas import (
    ConversationListResponse,
    ConversationStartRequest,
    ConversationSummaryResponse,
    ConversationThreadResponse,
    MessageListResponse,
    MessageResponse,
    MessageSendRequest,
    ProfileSearchResponse,
    ProfileSearchResult,
)
from ..services import (
    ServiceError,
    decode_access_token,
    get_current_user,
    list_conversations,
    list_messages,
    open_conversation,
    search_people,
    send_message,
    start_conversation,
)
from ..services.conversation_service import (
    get_conversation_for_participant,
    serialize_conversation,
    serialize_message,
)
from ..services.realtime import realtime_hub

router = APIRouter(prefix="/conversations", tags=["conversations"])


@router.get("/", response_model=ConversationListResponse)
async def list_conversations_endpoint(
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
) -> ConversationListResponse:
    items = list_conversations(db, current_user.id)
    return ConversationListResponse(items=[ConversationSummaryResponse(**item) for item in items])


@router.post("/", response_model=ConversationSummaryResponse, status_code=status.HTTP_201_CREATED)
async def start_conversation_endpoint(
    payload: ConversationStartRequest,
    response: Response,
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
) -> ConversationSummaryResponse:
    """Return the conversation with ``counterpart_id``; 201 when it was just created."""
    conversation, created = start_conversation(
        db,
        initiator_id=current_user.id,
        counterpart_id=payload.counterpart_id,
    )
    if not created:
        response.status_code = status.HTTP_200_OK
    return ConversationSummaryResponse(**serialize_conversation(conversation, current_user.id))


@router.get("/search", response_model=ProfileSearchResponse)
async def search_people_endpoint(
    q: str = Query(..., min_length=1, max_length=100),
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
) -> ProfileSearchResponse:
    results = search_people(db, q, viewer_id=current_user.id)
    return ProfileSearchResponse(items=[ProfileSearchResult(**item) for item in results])


@router.get("/{conversation_id}", response_model=ConversationThreadResponse)
async def open_conversation_endpoint(
    conversation_id: UUID,
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
) -> ConversationThreadResponse:
    thread = open_conversation(db, conversation_id=conversation_id, viewer_id=current_user.id)
    return ConversationThreadResponse(**thread)


@router.get("/{conversation_id}/messages", response_model=MessageListResponse)
async def list_messages_endpoint(
    conversation_id: UUID,
    after: UUID | None = Query(default=None),
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
) -> MessageListResponse:
    messages = list_messages(db, conversation_id=conversation_id, viewer_id=current_user.id, after=after)
    return MessageListResponse(
        conversation_id=conversation_id,
        messages=[MessageResponse(**serialize_message(message)) for message in messages],
    )


@router.post(
    "/{conversation_id}/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def send_message_endpoint(
    conversation_id: UUID,
    payload: MessageSendRequest,
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
) -> MessageResponse:
    message = send_message(
        db,
        conversation_id=conversation_id,
        sender_id=current_user.id,
        content=payload.content,
    )
    serialized = serialize_message(message)
    await realtime_hub.publish(
        conversation_channel(conversation_id),
        {"type": "message.created", "id": str(message.id), "message": serialized},
    )

    conversation = message.conversation
    await realtime_hub.publish(
        [user_channel(participant_id) for participant_id in conversation.participant_ids()],
        {
            "type": "conversation.updated",
            "conversation_id": str(conversation.id),
            "last_message": conversation.last_message,
            "last_message_time": conversation.last_message_time,
        },
    )
    return MessageResponse(**serialized)


@router.websocket("/{conversation_id}/ws")
async def conversation_socket(
    websocket: WebSocket,
    conversation_id: UUID,
    token: str = Query(..., alias="token"),
) -> None:
    try:
        with session_scope() as session:
            user_id = decode_access_token(token, session)
            get_conversation_for_participant(session, conversation_id=conversation_id, viewer_id=user_id)
    except ServiceError:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await realtime_hub.connect(conversation_channel(conversation_id), websocket)
    await websocket.send_text(json.dumps({"type": "ready", "conversation_id": str(conversation_id)}))
    try:
        while True:
            try:
                payload = await websocket.receive_text()
            except WebSocketDisconnect:
                break
            if payload.strip().lower() == "ping":
                await websocket.send_text(json.dumps({"type": "pong", "conversation_id": str(conversation_id)}))
    finally:
        await realtime_hub.disconnect(websocket)

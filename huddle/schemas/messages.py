"""Schemas used by conversation and messaging endpoints."""
from __future__ import annotations

from datetime import datetime
from typing import List
from uuid import UUID

from pydantic import BaseModel, Field

from .profiles import ProfileSummary


class ConversationStartRequest(BaseModel):
    counterpart_id: UUID = Field(..., description="Profile to start or resume a conversation with")


class MessageSendRequest(BaseModel):
    content: str = Field(..., min_length=1)


class MessageResponse(BaseModel):
    id: UUID
    conversation_id: UUID
    sender_id: UUID
    content: str
    created_at: datetime
    sender: ProfileSummary | None = None


class ConversationSummaryResponse(BaseModel):
    id: UUID
    counterpart: ProfileSummary
    last_message: str | None = None
    last_message_time: datetime
    created_at: datetime


class ConversationListResponse(BaseModel):
    items: List[ConversationSummaryResponse]


class ConversationThreadResponse(ConversationSummaryResponse):
    messages: List[MessageResponse]


class MessageListResponse(BaseModel):
    conversation_id: UUID
    messages: List[MessageResponse]


__all__ = [
    "ConversationStartRequest",
    "MessageSendRequest",
    "MessageResponse",
    "ConversationSummaryResponse",
    "ConversationListResponse",
    "ConversationThreadResponse",
    "MessageListResponse",
]

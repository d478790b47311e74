"""Schemas for notifications."""
from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from .profiles import ProfileSummary


class NotificationPostPreview(BaseModel):
    id: UUID
    content: str
    user_id: UUID


class NotificationResponse(BaseModel):
    id: UUID
    recipient_id: UUID
    type: str
    created_at: datetime
    read: bool
    actor: ProfileSummary
    post_id: UUID | None = None
    comment_id: UUID | None = None
    post: NotificationPostPreview | None = None


class NotificationListResponse(BaseModel):
    items: list[NotificationResponse]
    unread_count: int = 0


class NotificationSummaryResponse(BaseModel):
    unread_count: int = 0


__all__ = [
    "NotificationPostPreview",
    "NotificationResponse",
    "NotificationListResponse",
    "NotificationSummaryResponse",
]

"""Pydantic schemas for posts, comments and likes."""
from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class PostCreate(BaseModel):
    """Payload used by API clients when publishing a post."""

    content: str = Field(..., min_length=1)


class PostUpdate(BaseModel):
    content: str = Field(..., min_length=1)


class PostResponse(BaseModel):
    """Serialized representation of a post with its engagement counters."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    content: str
    created_at: datetime
    updated_at: datetime | None = None
    username: str | None = None
    full_name: str | None = None
    avatar_url: str | None = None
    like_count: int = 0
    comment_count: int = 0
    viewer_has_liked: bool = False


class PostFeedResponse(BaseModel):
    """Envelope used when returning a collection of posts."""

    items: list[PostResponse]


class PostEngagementResponse(BaseModel):
    post_id: UUID
    like_count: int
    comment_count: int
    viewer_has_liked: bool


class LikeRequest(BaseModel):
    liked: bool = True


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=500)


class CommentUpdate(BaseModel):
    content: str = Field(..., min_length=1, max_length=500)


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    post_id: UUID
    user_id: UUID
    content: str
    created_at: datetime
    username: str | None = None
    full_name: str | None = None
    avatar_url: str | None = None
    like_count: int = 0
    viewer_has_liked: bool = False


class CommentListResponse(BaseModel):
    items: list[CommentResponse]


class CommentEngagementResponse(BaseModel):
    comment_id: UUID
    like_count: int
    viewer_has_liked: bool


__all__ = [
    "PostCreate",
    "PostUpdate",
    "PostResponse",
    "PostFeedResponse",
    "PostEngagementResponse",
    "LikeRequest",
    "CommentCreate",
    "CommentUpdate",
    "CommentResponse",
    "CommentListResponse",
    "CommentEngagementResponse",
]

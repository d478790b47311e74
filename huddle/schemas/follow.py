"""Schemas supporting follower APIs."""
from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel

from .profiles import ProfileSummary, RelationshipStatus


class FollowStatsResponse(BaseModel):
    user_id: UUID
    followers_count: int
    following_count: int
    relationship: RelationshipStatus


class FollowActionResponse(FollowStatsResponse):
    status: Literal["requested", "unfollowed", "removed", "noop"]


class FollowRequestResponse(BaseModel):
    id: UUID
    status: str
    created_at: datetime
    follower: ProfileSummary


class FollowRequestListResponse(BaseModel):
    items: list[FollowRequestResponse]


class FollowListResponse(BaseModel):
    items: list[ProfileSummary]


__all__ = [
    "FollowStatsResponse",
    "FollowActionResponse",
    "FollowRequestResponse",
    "FollowRequestListResponse",
    "FollowListResponse",
]

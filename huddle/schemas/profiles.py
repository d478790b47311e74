"""Schemas for profile endpoints."""
from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

RelationshipStatus = Literal["none", "pending", "accepted", "rejected", "self"]


class ProfileSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    full_name: str
    avatar_url: str | None = None


class ProfileResponse(ProfileSummary):
    bio: str | None = None
    interests: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class ProfileCardResponse(ProfileResponse):
    followers_count: int = 0
    following_count: int = 0
    post_count: int = 0
    relationship: RelationshipStatus = "none"


class ProfileUpdateRequest(BaseModel):
    full_name: str | None = Field(default=None, max_length=150)
    username: str | None = Field(default=None, min_length=3, max_length=32, pattern=r"^[A-Za-z0-9_.]+$")
    bio: str | None = Field(default=None, max_length=500)
    interests: list[str] | None = None
    avatar_url: str | None = Field(default=None, max_length=1024)


class ProfileSearchResult(ProfileSummary):
    bio: str | None = None
    interests: list[str] = Field(default_factory=list)
    followers_count: int = 0
    relationship: RelationshipStatus = "none"


class ProfileSearchResponse(BaseModel):
    items: list[ProfileSearchResult]


__all__ = [
    "RelationshipStatus",
    "ProfileSummary",
    "ProfileResponse",
    "ProfileCardResponse",
    "ProfileUpdateRequest",
    "ProfileSearchResult",
    "ProfileSearchResponse",
]

"""Pydantic schemas for authentication endpoints."""
from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class SignUpRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    username: str = Field(..., min_length=3, max_length=32, pattern=r"^[A-Za-z0-9_.]+$")
    full_name: str = Field(..., min_length=1, max_length=150)
    interests: list[str] = Field(default_factory=list)
    bio: str | None = Field(default=None, max_length=500)


class SignInRequest(BaseModel):
    email: EmailStr
    password: str


class AuthResponse(BaseModel):
    access_token: str
    user_id: UUID
    username: str
    token_type: str = "bearer"


class InterestCatalogueResponse(BaseModel):
    items: list[str]
    min_selected: int
    max_selected: int


__all__ = ["SignUpRequest", "SignInRequest", "AuthResponse", "InterestCatalogueResponse"]

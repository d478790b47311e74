"""SQLAlchemy ORM models for authentication identities."""
from __future__ import annotations

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from huddle.database import Base
from .base import TimestampMixin


class Account(TimestampMixin, Base):
    __tablename__ = "accounts"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)

    profile = relationship("Profile", back_populates="account", uselist=False, cascade="all, delete-orphan")
    revoked_tokens = relationship("RevokedToken", back_populates="account", cascade="all, delete-orphan")


class RevokedToken(Base):
    """Access tokens invalidated by sign-out before their natural expiry."""

    __tablename__ = "revoked_tokens"

    jti = Column(String(64), primary_key=True)
    account_id = Column(UUID(as_uuid=True), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)

    account = relationship("Account", back_populates="revoked_tokens")


__all__ = ["Account", "RevokedToken"]

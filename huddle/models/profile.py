"""SQLAlchemy ORM model for user-facing profiles."""
from __future__ import annotations

from sqlalchemy import JSON, Column, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import relationship

from huddle.database import Base
from .base import TimestampMixin


class Profile(TimestampMixin, Base):
    __tablename__ = "profiles"

    id = Column(UUID(as_uuid=True), ForeignKey("accounts.id", ondelete="CASCADE"), primary_key=True)
    username = Column(String(150), unique=True, nullable=False, index=True)
    full_name = Column(String(150), nullable=False)
    bio = Column(Text, nullable=True)
    interests = Column(JSON().with_variant(JSONB, "postgresql"), nullable=False, default=list)
    avatar_url = Column(String(1024), nullable=True)

    account = relationship("Account", back_populates="profile")
    posts = relationship("Post", back_populates="author", cascade="all, delete-orphan")
    comments = relationship("Comment", back_populates="author", cascade="all, delete-orphan")
    likes = relationship("Like", back_populates="user", cascade="all, delete-orphan")
    follower_relations = relationship(
        "Follow",
        foreign_keys="Follow.following_id",
        back_populates="following",
        cascade="all, delete-orphan",
    )
    following_relations = relationship(
        "Follow",
        foreign_keys="Follow.follower_id",
        back_populates="follower",
        cascade="all, delete-orphan",
    )
    sent_messages = relationship("Message", back_populates="sender", cascade="all, delete-orphan")
    notifications_received = relationship(
        "Notification",
        foreign_keys="Notification.recipient_id",
        back_populates="recipient",
        cascade="all, delete-orphan",
    )
    notifications_sent = relationship(
        "Notification",
        foreign_keys="Notification.actor_id",
        back_populates="actor",
        cascade="all, delete-orphan",
    )


__all__ = ["Profile"]

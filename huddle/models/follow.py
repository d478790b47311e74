"""SQLAlchemy ORM model for follower relationships."""
from __future__ import annotations

import uuid
from enum import StrEnum

from sqlalchemy import CheckConstraint, Column, ForeignKey, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from huddle.database import Base
from .base import TimestampMixin


class FollowStatus(StrEnum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class Follow(TimestampMixin, Base):
    __tablename__ = "followers"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    follower_id = Column(UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    following_id = Column(UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String(16), nullable=False, default=FollowStatus.PENDING.value, server_default=FollowStatus.PENDING.value)

    follower = relationship("Profile", foreign_keys=[follower_id], back_populates="following_relations")
    following = relationship("Profile", foreign_keys=[following_id], back_populates="follower_relations")

    __table_args__ = (
        UniqueConstraint("follower_id", "following_id", name="uq_followers_pair"),
        CheckConstraint("status IN ('pending', 'accepted', 'rejected')", name="ck_followers_status"),
    )


__all__ = ["Follow", "FollowStatus"]

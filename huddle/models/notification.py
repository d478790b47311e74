"""SQLAlchemy ORM model for notifications."""
from __future__ import annotations

import uuid
from enum import StrEnum

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import expression, func

from huddle.database import Base
from .base import utcnow


class NotificationType(StrEnum):
    LIKE = "like"
    COMMENT = "comment"
    FOLLOW = "follow"
    FOLLOW_REQUEST = "follow_request"


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    recipient_id = Column(
        UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    actor_id = Column(UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(32), nullable=False)
    post_id = Column(UUID(as_uuid=True), ForeignKey("posts.id", ondelete="CASCADE"), nullable=True, index=True)
    comment_id = Column(UUID(as_uuid=True), ForeignKey("comments.id", ondelete="CASCADE"), nullable=True, index=True)
    read = Column(Boolean, nullable=False, server_default=expression.false(), default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), default=utcnow, nullable=False)

    recipient = relationship("Profile", foreign_keys=[recipient_id], back_populates="notifications_received")
    actor = relationship("Profile", foreign_keys=[actor_id], back_populates="notifications_sent")
    post = relationship("Post", back_populates="notifications")
    comment = relationship("Comment", back_populates="notifications")

    __table_args__ = (
        CheckConstraint("type IN ('like', 'comment', 'follow', 'follow_request')", name="ck_notifications_type"),
        CheckConstraint(
            "(type IN ('like', 'comment') AND post_id IS NOT NULL) OR "
            "(type IN ('follow', 'follow_request') AND post_id IS NULL AND comment_id IS NULL)",
            name="ck_notifications_target",
        ),
    )


__all__ = ["Notification", "NotificationType"]

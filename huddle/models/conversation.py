"""SQLAlchemy ORM models for direct conversations and their messages."""
from __future__ import annotations

import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from huddle.database import Base
from .base import TimestampMixin, utcnow


class Conversation(TimestampMixin, Base):
    """Two-party container; participants are stored in canonical order."""

    __tablename__ = "conversations"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    participant1_id = Column(UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    participant2_id = Column(UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    last_message = Column(Text, nullable=True)
    last_message_time = Column(DateTime(timezone=True), server_default=func.now(), default=utcnow, nullable=False)

    participant1 = relationship("Profile", foreign_keys=[participant1_id])
    participant2 = relationship("Profile", foreign_keys=[participant2_id])
    messages = relationship(
        "Message",
        back_populates="conversation",
        cascade="all, delete-orphan",
        order_by="Message.created_at",
    )

    __table_args__ = (
        UniqueConstraint("participant1_id", "participant2_id", name="uq_conversations_pair"),
        CheckConstraint("participant1_id <> participant2_id", name="ck_conversations_distinct"),
    )

    def participant_ids(self) -> tuple[uuid.UUID, uuid.UUID]:
        return self.participant1_id, self.participant2_id

    def counterpart_id(self, viewer_id: uuid.UUID) -> uuid.UUID:
        return self.participant2_id if self.participant1_id == viewer_id else self.participant1_id


class Message(Base):
    __tablename__ = "messages"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    conversation_id = Column(
        UUID(as_uuid=True),
        ForeignKey("conversations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    sender_id = Column(UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), default=utcnow, nullable=False)

    conversation = relationship("Conversation", back_populates="messages")
    sender = relationship("Profile", back_populates="sent_messages")


__all__ = ["Conversation", "Message"]

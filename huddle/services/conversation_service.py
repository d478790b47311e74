"""Direct conversations between two profiles and the messages inside them.

Opening an existing conversation and starting one with another profile are
separate operations with separate identifiers: a conversation id is only ever
resolved against ``conversations`` and a counterpart id only against
``profiles``.
"""
from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from sqlalchemy import and_, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..config import get_settings
from ..models import Conversation, Message, Profile
from .errors import BadRequestError, NotFoundError, PermissionDeniedError, commit_or_raise, raise_database_error
from .post_service import clean_content
from .profile_service import search_profiles

PEOPLE_SEARCH_LIMIT = 10

logger = logging.getLogger(__name__)


def canonical_pair(first: UUID, second: UUID) -> tuple[UUID, UUID]:
    """Order two participant ids so each unordered pair has one stored form."""

    return (first, second) if str(first) <= str(second) else (second, first)


def _find_by_pair(db: Session, first: UUID, second: UUID) -> Conversation | None:
    participant1_id, participant2_id = canonical_pair(first, second)
    return db.scalar(
        select(Conversation).where(
            Conversation.participant1_id == participant1_id,
            Conversation.participant2_id == participant2_id,
        )
    )


def get_conversation_for_participant(db: Session, *, conversation_id: UUID, viewer_id: UUID) -> Conversation:
    conversation = db.get(Conversation, conversation_id)
    if conversation is None:
        raise NotFoundError("Conversation not found")
    if viewer_id not in conversation.participant_ids():
        raise PermissionDeniedError("You are not a participant in this conversation")
    return conversation


def start_conversation(db: Session, *, initiator_id: UUID, counterpart_id: UUID) -> tuple[Conversation, bool]:
    """Return the conversation with ``counterpart_id``, creating it when missing.

    The boolean is ``True`` when a new row was created.
    """

    if initiator_id == counterpart_id:
        raise BadRequestError("Cannot start a conversation with yourself")
    if db.get(Profile, counterpart_id) is None:
        raise NotFoundError("Profile not found")

    existing = _find_by_pair(db, initiator_id, counterpart_id)
    if existing is not None:
        return existing, False

    participant1_id, participant2_id = canonical_pair(initiator_id, counterpart_id)
    conversation = Conversation(participant1_id=participant1_id, participant2_id=participant2_id)
    db.add(conversation)
    try:
        db.commit()
    except IntegrityError:
        # Both participants started the conversation at the same time.
        db.rollback()
        existing = _find_by_pair(db, initiator_id, counterpart_id)
        if existing is None:
            raise
        return existing, False
    except SQLAlchemyError as exc:
        raise_database_error(db, "Unable to start conversation", exc)

    db.refresh(conversation)
    logger.info("Conversation %s started between %s and %s", conversation.id, initiator_id, counterpart_id)
    return conversation, True


def list_conversations(db: Session, viewer_id: UUID) -> list[dict[str, Any]]:
    """Return the viewer's conversations, most recent activity first."""

    stmt = (
        select(Conversation)
        .options(joinedload(Conversation.participant1), joinedload(Conversation.participant2))
        .where(or_(Conversation.participant1_id == viewer_id, Conversation.participant2_id == viewer_id))
        .order_by(Conversation.last_message_time.desc())
    )
    return [serialize_conversation(conversation, viewer_id) for conversation in db.scalars(stmt)]


def list_messages(
    db: Session,
    *,
    conversation_id: UUID,
    viewer_id: UUID,
    after: UUID | None = None,
) -> list[Message]:
    """Return the conversation's messages oldest first, optionally after a known message."""

    get_conversation_for_participant(db, conversation_id=conversation_id, viewer_id=viewer_id)

    stmt = (
        select(Message)
        .options(joinedload(Message.sender))
        .where(Message.conversation_id == conversation_id)
    )
    if after is not None:
        anchor = db.get(Message, after)
        if anchor is None or anchor.conversation_id != conversation_id:
            raise NotFoundError("Message not found in this conversation")
        stmt = stmt.where(
            or_(
                Message.created_at > anchor.created_at,
                and_(Message.created_at == anchor.created_at, Message.id > anchor.id),
            )
        )
    stmt = stmt.order_by(Message.created_at.asc(), Message.id.asc())
    return list(db.scalars(stmt))


def open_conversation(db: Session, *, conversation_id: UUID, viewer_id: UUID) -> dict[str, Any]:
    conversation = get_conversation_for_participant(db, conversation_id=conversation_id, viewer_id=viewer_id)
    payload = serialize_conversation(conversation, viewer_id)
    payload["messages"] = [
        serialize_message(message)
        for message in list_messages(db, conversation_id=conversation_id, viewer_id=viewer_id)
    ]
    return payload


def send_message(db: Session, *, conversation_id: UUID, sender_id: UUID, content: str) -> Message:
    """Append a message and refresh the conversation's last-message cache in one commit."""

    conversation = get_conversation_for_participant(db, conversation_id=conversation_id, viewer_id=sender_id)
    text = clean_content(content, max_length=get_settings().message_max_length, label="Message")

    message = Message(conversation_id=conversation.id, sender_id=sender_id, content=text)
    db.add(message)
    db.flush()
    conversation.last_message = text
    conversation.last_message_time = message.created_at
    commit_or_raise(db, "Failed to send message")
    db.refresh(message)
    return message


def search_people(db: Session, query: str, *, viewer_id: UUID) -> list[dict[str, Any]]:
    """Profiles the viewer can start a conversation with."""

    return search_profiles(db, query, viewer_id=viewer_id, limit=PEOPLE_SEARCH_LIMIT)


def serialize_profile_summary(profile: Profile) -> dict[str, Any]:
    return {
        "id": profile.id,
        "username": profile.username,
        "full_name": profile.full_name,
        "avatar_url": profile.avatar_url,
    }


def serialize_conversation(conversation: Conversation, viewer_id: UUID) -> dict[str, Any]:
    counterpart = (
        conversation.participant2 if conversation.participant1_id == viewer_id else conversation.participant1
    )
    return {
        "id": conversation.id,
        "counterpart": serialize_profile_summary(counterpart),
        "last_message": conversation.last_message,
        "last_message_time": conversation.last_message_time,
        "created_at": conversation.created_at,
    }


def serialize_message(message: Message) -> dict[str, Any]:
    sender = message.sender
    return {
        "id": message.id,
        "conversation_id": message.conversation_id,
        "sender_id": message.sender_id,
        "content": message.content,
        "created_at": message.created_at,
        "sender": serialize_profile_summary(sender) if sender is not None else None,
    }


__all__ = [
    "canonical_pair",
    "get_conversation_for_participant",
    "start_conversation",
    "list_conversations",
    "list_messages",
    "open_conversation",
    "send_message",
    "search_people",
    "serialize_conversation",
    "serialize_message",
    "serialize_profile_summary",
]

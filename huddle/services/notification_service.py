"""Notification helper logic for PostgreSQL-backed storage."""
from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session, joinedload

from ..constants import notification_channel
from ..models import Notification, NotificationType, Profile
from .errors import NotFoundError, commit_or_raise
from .realtime import realtime_hub

logger = logging.getLogger(__name__)

_TARGETED_TYPES = {NotificationType.LIKE, NotificationType.COMMENT}


def validate_notification_target(
    type_: NotificationType | str,
    *,
    post_id: UUID | None,
    comment_id: UUID | None,
) -> NotificationType:
    """Return the parsed type, raising ``ValueError`` when the target does not fit it."""

    try:
        kind = NotificationType(str(type_))
    except ValueError as exc:
        raise ValueError(f"Unknown notification type '{type_}'") from exc

    if kind in _TARGETED_TYPES:
        if post_id is None:
            raise ValueError(f"'{kind}' notifications must reference a post")
    elif post_id is not None or comment_id is not None:
        raise ValueError(f"'{kind}' notifications cannot reference a post or comment")
    return kind


def list_notifications(db: Session, user_id: UUID) -> list[Notification]:
    """Return notifications for the supplied recipient ordered newest first."""

    stmt = (
        select(Notification)
        .options(joinedload(Notification.actor), joinedload(Notification.post))
        .where(Notification.recipient_id == user_id)
        .order_by(Notification.created_at.desc())
    )
    return list(db.scalars(stmt))


def count_unread_notifications(db: Session, user_id: UUID) -> int:
    """Return the unread notification total for the supplied user."""

    stmt = (
        select(func.count())
        .select_from(Notification)
        .where(Notification.recipient_id == user_id, Notification.read.is_(False))
    )
    return int(db.scalar(stmt) or 0)


def add_notification(
    db: Session,
    *,
    recipient_id: UUID,
    actor_id: UUID,
    type_: NotificationType | str,
    post_id: UUID | None = None,
    comment_id: UUID | None = None,
) -> Notification | None:
    """Persist a notification and push it to the recipient's channel.

    Returns ``None`` without writing anything when the actor and recipient are
    the same profile.
    """

    kind = validate_notification_target(type_, post_id=post_id, comment_id=comment_id)
    if recipient_id == actor_id:
        return None

    if db.get(Profile, recipient_id) is None:
        raise ValueError("Recipient does not exist")
    if db.get(Profile, actor_id) is None:
        raise ValueError("Actor does not exist")

    notification = Notification(
        recipient_id=recipient_id,
        actor_id=actor_id,
        type=kind.value,
        post_id=post_id,
        comment_id=comment_id,
    )
    db.add(notification)
    commit_or_raise(db, "Unable to store notification")
    db.refresh(notification)

    _broadcast_notification(db, notification)
    return notification


def mark_read(db: Session, *, recipient_id: UUID, notification_id: UUID) -> Notification:
    """Mark a single notification as read; only its recipient may do so."""

    notification = db.get(Notification, notification_id)
    if notification is None or notification.recipient_id != recipient_id:
        raise NotFoundError("Notification not found")
    if not notification.read:
        notification.read = True
        commit_or_raise(db, "Unable to update notification")
    publish_badge(db, recipient_id)
    return notification


def mark_all_read(db: Session, recipient_id: UUID) -> int:
    """Mark all notifications for the given recipient as read."""

    stmt = (
        update(Notification)
        .where(Notification.recipient_id == recipient_id, Notification.read.is_(False))
        .values(read=True)
    )
    result = db.execute(stmt)
    commit_or_raise(db, "Unable to update notifications")
    publish_badge(db, recipient_id, event_type="notification.read_all")
    return int(result.rowcount or 0)


def serialize_notification(notification: Notification) -> dict[str, Any]:
    actor = notification.actor
    post = notification.post
    return {
        "id": notification.id,
        "recipient_id": notification.recipient_id,
        "type": notification.type,
        "created_at": notification.created_at,
        "read": notification.read,
        "post_id": notification.post_id,
        "comment_id": notification.comment_id,
        "actor": {
            "id": actor.id,
            "username": actor.username,
            "full_name": actor.full_name,
            "avatar_url": actor.avatar_url,
        },
        "post": (
            {"id": post.id, "content": post.content, "user_id": post.user_id}
            if post is not None
            else None
        ),
    }


def publish_badge(db: Session, recipient_id: UUID, *, event_type: str = "notification.badge") -> None:
    payload = {"type": event_type, "unread_count": count_unread_notifications(db, recipient_id)}
    realtime_hub.schedule_publish(notification_channel(recipient_id), payload)


def _broadcast_notification(db: Session, notification: Notification) -> None:
    payload = {
        "type": "notification.created",
        "notification": serialize_notification(notification),
        "unread_count": count_unread_notifications(db, notification.recipient_id),
    }
    logger.debug("Queueing %s notification for %s", notification.type, notification.recipient_id)
    realtime_hub.schedule_publish(notification_channel(notification.recipient_id), payload)


__all__ = [
    "NotificationType",
    "validate_notification_target",
    "list_notifications",
    "count_unread_notifications",
    "add_notification",
    "mark_read",
    "mark_all_read",
    "serialize_notification",
    "publish_badge",
]

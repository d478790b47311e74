"""Business logic for follower relationships and follow requests."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..models import Follow, FollowStatus, NotificationType, Profile
from .errors import (
    BadRequestError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    commit_or_raise,
    raise_database_error,
)
from .notification_service import add_notification
from .profile_service import relationship_status

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class FollowStats:
    user_id: UUID
    followers_count: int
    following_count: int
    relationship: str


def _get_profile_or_404(db: Session, profile_id: UUID) -> Profile:
    profile = db.get(Profile, profile_id)
    if profile is None:
        raise NotFoundError("Profile not found")
    return profile


def _find_edge(db: Session, follower_id: UUID, following_id: UUID) -> Follow | None:
    return db.scalar(select(Follow).where(Follow.follower_id == follower_id, Follow.following_id == following_id))


def request_follow(db: Session, *, follower_id: UUID, target_id: UUID) -> bool:
    """Open a pending follow request; returns ``False`` when nothing changed."""

    if follower_id == target_id:
        raise BadRequestError("Cannot follow yourself")
    _get_profile_or_404(db, target_id)

    existing = _find_edge(db, follower_id, target_id)
    if existing is not None:
        if existing.status != FollowStatus.REJECTED.value:
            return False
        existing.status = FollowStatus.PENDING.value
    else:
        db.add(Follow(follower_id=follower_id, following_id=target_id, status=FollowStatus.PENDING.value))

    try:
        db.commit()
    except IntegrityError:
        # The same request was stored concurrently.
        db.rollback()
        return False
    except SQLAlchemyError as exc:
        raise_database_error(db, "Unable to follow user", exc)

    add_notification(db, recipient_id=target_id, actor_id=follower_id, type_=NotificationType.FOLLOW_REQUEST)
    return True


def _get_incoming_request(db: Session, *, owner_id: UUID, request_id: UUID) -> Follow:
    edge = db.get(Follow, request_id)
    if edge is None:
        raise NotFoundError("Follow request not found")
    if edge.following_id != owner_id:
        raise PermissionDeniedError("Only the requested profile can answer this request")
    if edge.status != FollowStatus.PENDING.value:
        raise ConflictError(f"Follow request is already {edge.status}")
    return edge


def accept_follow_request(db: Session, *, owner_id: UUID, request_id: UUID) -> Follow:
    edge = _get_incoming_request(db, owner_id=owner_id, request_id=request_id)
    edge.status = FollowStatus.ACCEPTED.value
    commit_or_raise(db, "Unable to accept follow request")
    db.refresh(edge)

    add_notification(db, recipient_id=edge.follower_id, actor_id=owner_id, type_=NotificationType.FOLLOW)
    logger.info("Follow %s -> %s accepted", edge.follower_id, edge.following_id)
    return edge


def reject_follow_request(db: Session, *, owner_id: UUID, request_id: UUID) -> Follow:
    edge = _get_incoming_request(db, owner_id=owner_id, request_id=request_id)
    edge.status = FollowStatus.REJECTED.value
    commit_or_raise(db, "Unable to reject follow request")
    db.refresh(edge)
    return edge


def unfollow_user(db: Session, *, follower_id: UUID, target_id: UUID) -> bool:
    if follower_id == target_id:
        return False
    edge = _find_edge(db, follower_id, target_id)
    if edge is None:
        return False
    db.delete(edge)
    commit_or_raise(db, "Unable to unfollow user")
    return True


def remove_follower(db: Session, *, owner_id: UUID, follower_id: UUID) -> bool:
    """Drop the edge from ``follower_id`` to ``owner_id`` whatever its status."""

    edge = _find_edge(db, follower_id, owner_id)
    if edge is None:
        return False
    db.delete(edge)
    commit_or_raise(db, "Unable to remove follower")
    return True


def list_follow_requests(db: Session, owner_id: UUID) -> list[Follow]:
    """Return pending incoming requests newest first with the requester loaded."""

    stmt = (
        select(Follow)
        .options(joinedload(Follow.follower))
        .where(Follow.following_id == owner_id, Follow.status == FollowStatus.PENDING.value)
        .order_by(Follow.created_at.desc())
    )
    return list(db.scalars(stmt))


def list_followers(db: Session, user_id: UUID) -> list[Profile]:
    _get_profile_or_404(db, user_id)
    stmt = (
        select(Profile)
        .join(Follow, Follow.follower_id == Profile.id)
        .where(Follow.following_id == user_id, Follow.status == FollowStatus.ACCEPTED.value)
        .order_by(Follow.created_at.desc())
    )
    return list(db.scalars(stmt))


def list_following(db: Session, user_id: UUID) -> list[Profile]:
    _get_profile_or_404(db, user_id)
    stmt = (
        select(Profile)
        .join(Follow, Follow.following_id == Profile.id)
        .where(Follow.follower_id == user_id, Follow.status == FollowStatus.ACCEPTED.value)
        .order_by(Follow.created_at.desc())
    )
    return list(db.scalars(stmt))


def get_follow_stats(db: Session, *, user_id: UUID, viewer_id: UUID | None = None) -> FollowStats:
    _get_profile_or_404(db, user_id)

    followers_count = db.scalar(
        select(func.count())
        .select_from(Follow)
        .where(Follow.following_id == user_id, Follow.status == FollowStatus.ACCEPTED.value)
    ) or 0
    following_count = db.scalar(
        select(func.count())
        .select_from(Follow)
        .where(Follow.follower_id == user_id, Follow.status == FollowStatus.ACCEPTED.value)
    ) or 0

    return FollowStats(
        user_id=user_id,
        followers_count=int(followers_count),
        following_count=int(following_count),
        relationship=relationship_status(db, viewer_id=viewer_id, target_id=user_id),
    )


__all__ = [
    "FollowStats",
    "request_follow",
    "accept_follow_request",
    "reject_follow_request",
    "unfollow_user",
    "remove_follower",
    "list_follow_requests",
    "list_followers",
    "list_following",
    "get_follow_stats",
]

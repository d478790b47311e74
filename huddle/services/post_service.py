"""Business logic for posts, the feed and post likes."""
from __future__ import annotations

import logging
from typing import Any, Iterable
from uuid import UUID

from sqlalchemy import String, cast, func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import get_settings
from ..constants import INTEREST_CATALOGUE
from ..models import Comment, Follow, FollowStatus, Like, NotificationType, Post, Profile
from .errors import (
    InvalidInputError,
    NotFoundError,
    PermissionDeniedError,
    commit_or_raise,
    raise_database_error,
)
from .notification_service import add_notification

logger = logging.getLogger(__name__)


def clean_content(content: str, *, max_length: int, label: str = "Post") -> str:
    text = (content or "").strip()
    if not text:
        raise InvalidInputError(f"{label} content cannot be empty")
    if len(text) > max_length:
        raise InvalidInputError(f"{label} content exceeds {max_length} characters")
    return text


def get_post_or_404(db: Session, post_id: UUID) -> Post:
    post = db.get(Post, post_id)
    if post is None:
        raise NotFoundError("Post not found")
    return post


def _get_owned_post(db: Session, post_id: UUID, requester_id: UUID) -> Post:
    post = get_post_or_404(db, post_id)
    if post.user_id != requester_id:
        raise PermissionDeniedError("Only the author can change this post")
    return post


def create_post(db: Session, *, user_id: UUID, content: str) -> Post:
    """Create and persist a new post for the given profile."""

    if db.get(Profile, user_id) is None:
        raise NotFoundError("Profile not found")
    text = clean_content(content, max_length=get_settings().post_max_length)

    post = Post(user_id=user_id, content=text)
    db.add(post)
    commit_or_raise(db, "Failed to create post")
    db.refresh(post)
    return post


def update_post(db: Session, *, post_id: UUID, requester_id: UUID, content: str) -> Post:
    post = _get_owned_post(db, post_id, requester_id)
    post.content = clean_content(content, max_length=get_settings().post_max_length)
    commit_or_raise(db, "Failed to update post")
    db.refresh(post)
    return post


def delete_post(db: Session, *, post_id: UUID, requester_id: UUID) -> None:
    post = _get_owned_post(db, post_id, requester_id)
    db.delete(post)
    commit_or_raise(db, "Failed to delete post")
    logger.info("Post %s deleted by %s", post_id, requester_id)


def _interest_clause(interests: Iterable[str]):
    lookup = {item.lower(): item for item in INTEREST_CATALOGUE}
    wanted = [lookup[key] for key in {(value or "").strip().lower() for value in interests} if key in lookup]
    if not wanted:
        return None
    # Interests are catalogue strings, so a quoted match on the serialised list is exact.
    serialized = cast(Profile.interests, String)
    return or_(*[serialized.like(f'%"{interest}"%') for interest in sorted(wanted)])


def list_feed_records(
    db: Session,
    *,
    viewer_id: UUID | None = None,
    author_id: UUID | None = None,
    interests: Iterable[str] | None = None,
    following_only: bool = False,
) -> list[dict[str, Any]]:
    """Return posts newest first with author fields and engagement counters."""

    like_count = select(func.count(Like.id)).where(Like.post_id == Post.id).scalar_subquery()
    comment_count = select(func.count(Comment.id)).where(Comment.post_id == Post.id).scalar_subquery()

    statement = select(
        Post,
        Profile.username,
        Profile.full_name,
        Profile.avatar_url,
        like_count,
        comment_count,
    ).join(Profile, Post.user_id == Profile.id)

    viewer_like_col = None
    if viewer_id is not None:
        viewer_like_col = (
            select(func.count(Like.id))
            .where(Like.post_id == Post.id, Like.user_id == viewer_id)
            .scalar_subquery()
        )
        statement = statement.add_columns(viewer_like_col)

    if author_id is not None:
        statement = statement.where(Post.user_id == author_id)

    if interests:
        clause = _interest_clause(interests)
        if clause is not None:
            statement = statement.where(clause)

    if following_only:
        if viewer_id is None:
            return []
        followed = select(Follow.following_id).where(
            Follow.follower_id == viewer_id,
            Follow.status == FollowStatus.ACCEPTED.value,
        )
        statement = statement.where(or_(Post.user_id == viewer_id, Post.user_id.in_(followed)))

    statement = statement.order_by(Post.created_at.desc())

    records: list[dict[str, Any]] = []
    for row in db.execute(statement).all():
        post = row[0]
        records.append(
            {
                "id": post.id,
                "user_id": post.user_id,
                "content": post.content,
                "created_at": post.created_at,
                "updated_at": post.updated_at,
                "username": row[1],
                "full_name": row[2],
                "avatar_url": row[3],
                "like_count": int(row[4] or 0),
                "comment_count": int(row[5] or 0),
                "viewer_has_liked": bool(row[6]) if viewer_like_col is not None else False,
            }
        )
    return records


def get_post_record(db: Session, *, post_id: UUID, viewer_id: UUID | None) -> dict[str, Any]:
    post = get_post_or_404(db, post_id)
    author = post.author
    snapshot = post_engagement_snapshot(db, post_id, viewer_id)
    return {
        "id": post.id,
        "user_id": post.user_id,
        "content": post.content,
        "created_at": post.created_at,
        "updated_at": post.updated_at,
        "username": author.username if author else None,
        "full_name": author.full_name if author else None,
        "avatar_url": author.avatar_url if author else None,
        "like_count": snapshot["like_count"],
        "comment_count": snapshot["comment_count"],
        "viewer_has_liked": snapshot["viewer_has_liked"],
    }


def post_engagement_snapshot(db: Session, post_id: UUID, viewer_id: UUID | None) -> dict[str, Any]:
    like_count = select(func.count(Like.id)).where(Like.post_id == post_id).scalar_subquery()
    comment_count = select(func.count(Comment.id)).where(Comment.post_id == post_id).scalar_subquery()
    columns = [like_count, comment_count]
    if viewer_id is not None:
        columns.append(
            select(func.count(Like.id)).where(Like.post_id == post_id, Like.user_id == viewer_id).scalar_subquery()
        )
    row = db.execute(select(*columns)).one()
    return {
        "post_id": post_id,
        "like_count": int(row[0] or 0),
        "comment_count": int(row[1] or 0),
        "viewer_has_liked": bool(row[2]) if viewer_id is not None else False,
    }


def set_post_like_state(
    db: Session,
    *,
    post_id: UUID,
    user_id: UUID,
    should_like: bool,
) -> dict[str, Any]:
    """Like or unlike a post; repeated calls with the same intent change nothing."""

    post = get_post_or_404(db, post_id)
    existing = db.scalar(select(Like).where(Like.post_id == post_id, Like.user_id == user_id))

    created = False
    if should_like and existing is None:
        db.add(Like(post_id=post_id, user_id=user_id))
        created = True
    elif not should_like and existing is not None:
        db.delete(existing)

    try:
        db.commit()
    except IntegrityError:
        # A concurrent request stored the same like first.
        db.rollback()
        created = False
    except SQLAlchemyError as exc:
        raise_database_error(db, "Failed to update like", exc)

    if created:
        add_notification(
            db,
            recipient_id=post.user_id,
            actor_id=user_id,
            type_=NotificationType.LIKE,
            post_id=post_id,
        )

    return post_engagement_snapshot(db, post_id, user_id)


__all__ = [
    "clean_content",
    "get_post_or_404",
    "create_post",
    "update_post",
    "delete_post",
    "list_feed_records",
    "get_post_record",
    "post_engagement_snapshot",
    "set_post_like_state",
]

"""Business logic for post comments and comment likes."""
from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import Comment, Like, NotificationType, Profile
from .errors import NotFoundError, PermissionDeniedError, commit_or_raise, raise_database_error
from .notification_service import add_notification
from .post_service import clean_content, get_post_or_404

COMMENT_MAX_LENGTH = 500


def _get_comment_or_404(db: Session, comment_id: UUID) -> Comment:
    comment = db.get(Comment, comment_id)
    if comment is None:
        raise NotFoundError("Comment not found")
    return comment


def _get_owned_comment(db: Session, comment_id: UUID, requester_id: UUID) -> Comment:
    comment = _get_comment_or_404(db, comment_id)
    if comment.user_id != requester_id:
        raise PermissionDeniedError("Only the author can change this comment")
    return comment


def list_comments(db: Session, *, post_id: UUID, viewer_id: UUID | None) -> list[dict[str, Any]]:
    """Return a post's comments oldest first with author fields and like counters."""

    get_post_or_404(db, post_id)

    like_count = select(func.count(Like.id)).where(Like.comment_id == Comment.id).scalar_subquery()
    statement = select(
        Comment,
        Profile.username,
        Profile.full_name,
        Profile.avatar_url,
        like_count,
    ).join(Profile, Comment.user_id == Profile.id)
    if viewer_id is not None:
        statement = statement.add_columns(
            select(func.count(Like.id))
            .where(Like.comment_id == Comment.id, Like.user_id == viewer_id)
            .scalar_subquery()
        )
    statement = statement.where(Comment.post_id == post_id).order_by(Comment.created_at.asc())

    items: list[dict[str, Any]] = []
    for row in db.execute(statement).all():
        comment = row[0]
        items.append(
            {
                "id": comment.id,
                "post_id": comment.post_id,
                "user_id": comment.user_id,
                "content": comment.content,
                "created_at": comment.created_at,
                "username": row[1],
                "full_name": row[2],
                "avatar_url": row[3],
                "like_count": int(row[4] or 0),
                "viewer_has_liked": bool(row[5]) if viewer_id is not None else False,
            }
        )
    return items


def serialize_comment(comment: Comment, *, like_count: int = 0, viewer_has_liked: bool = False) -> dict[str, Any]:
    author = comment.author
    return {
        "id": comment.id,
        "post_id": comment.post_id,
        "user_id": comment.user_id,
        "content": comment.content,
        "created_at": comment.created_at,
        "username": author.username if author else None,
        "full_name": author.full_name if author else None,
        "avatar_url": author.avatar_url if author else None,
        "like_count": like_count,
        "viewer_has_liked": viewer_has_liked,
    }


def create_comment(db: Session, *, post_id: UUID, user_id: UUID, content: str) -> Comment:
    """Attach a comment to a post and notify the post's author."""

    post = get_post_or_404(db, post_id)
    text = clean_content(content, max_length=COMMENT_MAX_LENGTH, label="Comment")

    comment = Comment(post_id=post_id, user_id=user_id, content=text)
    db.add(comment)
    commit_or_raise(db, "Failed to add comment")
    db.refresh(comment)

    add_notification(
        db,
        recipient_id=post.user_id,
        actor_id=user_id,
        type_=NotificationType.COMMENT,
        post_id=post_id,
        comment_id=comment.id,
    )
    return comment


def update_comment(db: Session, *, comment_id: UUID, requester_id: UUID, content: str) -> Comment:
    comment = _get_owned_comment(db, comment_id, requester_id)
    comment.content = clean_content(content, max_length=COMMENT_MAX_LENGTH, label="Comment")
    commit_or_raise(db, "Failed to update comment")
    db.refresh(comment)
    return comment


def delete_comment(db: Session, *, comment_id: UUID, requester_id: UUID) -> UUID:
    comment = _get_owned_comment(db, comment_id, requester_id)
    post_id = comment.post_id
    db.delete(comment)
    commit_or_raise(db, "Failed to delete comment")
    return post_id


def comment_engagement_snapshot(db: Session, comment_id: UUID, viewer_id: UUID | None) -> dict[str, Any]:
    like_count = db.scalar(select(func.count(Like.id)).where(Like.comment_id == comment_id)) or 0
    viewer_has_liked = False
    if viewer_id is not None:
        viewer_has_liked = (
            db.scalar(select(Like.id).where(Like.comment_id == comment_id, Like.user_id == viewer_id).limit(1))
            is not None
        )
    return {"comment_id": comment_id, "like_count": int(like_count), "viewer_has_liked": viewer_has_liked}


def set_comment_like_state(
    db: Session,
    *,
    comment_id: UUID,
    user_id: UUID,
    should_like: bool,
) -> dict[str, Any]:
    """Like or unlike a comment; a new like notifies the comment's author."""

    comment = _get_comment_or_404(db, comment_id)
    existing = db.scalar(select(Like).where(Like.comment_id == comment_id, Like.user_id == user_id))

    created = False
    if should_like and existing is None:
        db.add(Like(comment_id=comment_id, user_id=user_id))
        created = True
    elif not should_like and existing is not None:
        db.delete(existing)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        created = False
    except SQLAlchemyError as exc:
        raise_database_error(db, "Failed to update like", exc)

    if created:
        # The notification points at the comment's post so the target rule for likes holds.
        add_notification(
            db,
            recipient_id=comment.user_id,
            actor_id=user_id,
            type_=NotificationType.LIKE,
            post_id=comment.post_id,
            comment_id=comment_id,
        )

    return comment_engagement_snapshot(db, comment_id, user_id)


__all__ = [
    "COMMENT_MAX_LENGTH",
    "list_comments",
    "serialize_comment",
    "create_comment",
    "update_comment",
    "delete_comment",
    "comment_engagement_snapshot",
    "set_comment_like_state",
]

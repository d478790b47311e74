"""Post, comment and like API routes backed by PostgreSQL."""
from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..constants import FEED_CHANNEL
from ..database import get_session
from ..models import Profile
from ..schemas import (
    CommentCreate,
    CommentEngagementResponse,
    CommentListResponse,
    CommentResponse,
    CommentUpdate,
    LikeRequest,
    PostCreate,
    PostEngagementResponse,
    PostFeedResponse,
    PostResponse,
    PostUpdate,
)
from ..services import (
    create_comment,
    create_post,
    delete_comment,
    delete_post,
    get_current_user,
    get_optional_user,
    get_profile,
    list_comments,
    list_feed_records,
    set_comment_like_state,
    set_post_like_state,
    update_comment,
    update_post,
)
from ..services.comment_service import serialize_comment
from ..services.post_service import get_post_record, post_engagement_snapshot
from ..services.realtime import realtime_hub

router = APIRouter(prefix="/posts", tags=["posts"])

logger = logging.getLogger(__name__)


async def _safe_feed_broadcast(message: dict[str, Any]) -> None:
    if not message:
        return
    try:
        await realtime_hub.publish(FEED_CHANNEL, message)
    except Exception:  # pragma: no cover - best effort logging
        logger.exception("Failed to broadcast feed update")


async def _broadcast_engagement_snapshot(snapshot: dict[str, Any]) -> None:
    post_id = snapshot.get("post_id")
    if not post_id:
        return
    await _safe_feed_broadcast(
        {
            "type": "post.engagement",
            "post_id": str(post_id),
            "like_count": int(snapshot.get("like_count") or 0),
            "comment_count": int(snapshot.get("comment_count") or 0),
        }
    )


# ---------------------------------------------------------------------------
# Posts
# ---------------------------------------------------------------------------
@router.post("/", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post_endpoint(
    payload: PostCreate,
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
) -> PostResponse:
    post = create_post(db, user_id=current_user.id, content=payload.content)
    record = get_post_record(db, post_id=post.id, viewer_id=current_user.id)

    await _safe_feed_broadcast(
        {
            "type": "post.created",
            "post_id": str(post.id),
            "user_id": str(current_user.id),
            "created_at": post.created_at.isoformat() if post.created_at else None,
        }
    )
    return PostResponse(**record)


@router.get("/feed", response_model=PostFeedResponse)
async def feed_endpoint(
    interests: list[str] | None = Query(default=None),
    following_only: bool = Query(default=False),
    db: Session = Depends(get_session),
    current_user: Profile | None = Depends(get_optional_user),
) -> PostFeedResponse:
    viewer_id = current_user.id if current_user else None
    records = list_feed_records(
        db,
        viewer_id=viewer_id,
        interests=interests,
        following_only=following_only,
    )
    return PostFeedResponse(items=[PostResponse(**item) for item in records])


@router.get("/by-user/{username}", response_model=PostFeedResponse)
async def posts_by_user_endpoint(
    username: str,
    db: Session = Depends(get_session),
    current_user: Profile | None = Depends(get_optional_user),
) -> PostFeedResponse:
    author = get_profile(db, username)
    viewer_id = current_user.id if current_user else None
    records = list_feed_records(db, viewer_id=viewer_id, author_id=author.id)
    return PostFeedResponse(items=[PostResponse(**item) for item in records])


# ---------------------------------------------------------------------------
# Comments by id (declared before /{post_id} routes)
# ---------------------------------------------------------------------------
@router.patch("/comments/{comment_id}", response_model=CommentResponse)
async def update_comment_endpoint(
    comment_id: UUID,
    payload: CommentUpdate,
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
) -> CommentResponse:
    comment = update_comment(db, comment_id=comment_id, requester_id=current_user.id, content=payload.content)
    return CommentResponse(**serialize_comment(comment))


@router.delete("/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment_endpoint(
    comment_id: UUID,
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
) -> None:
    post_id = delete_comment(db, comment_id=comment_id, requester_id=current_user.id)
    await _broadcast_engagement_snapshot(post_engagement_snapshot(db, post_id, current_user.id))


@router.put("/comments/{comment_id}/like", response_model=CommentEngagementResponse)
async def like_comment_endpoint(
    comment_id: UUID,
    payload: LikeRequest,
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
) -> CommentEngagementResponse:
    snapshot = set_comment_like_state(db, comment_id=comment_id, user_id=current_user.id, should_like=payload.liked)
    return CommentEngagementResponse(**snapshot)


# ---------------------------------------------------------------------------
# Single post
# ---------------------------------------------------------------------------
@router.get("/{post_id}", response_model=PostResponse)
async def get_post_endpoint(
    post_id: UUID,
    db: Session = Depends(get_session),
    current_user: Profile | None = Depends(get_optional_user),
) -> PostResponse:
    viewer_id = current_user.id if current_user else None
    return PostResponse(**get_post_record(db, post_id=post_id, viewer_id=viewer_id))


@router.patch("/{post_id}", response_model=PostResponse)
async def update_post_endpoint(
    post_id: UUID,
    payload: PostUpdate,
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
) -> PostResponse:
    post = update_post(db, post_id=post_id, requester_id=current_user.id, content=payload.content)
    return PostResponse(**get_post_record(db, post_id=post.id, viewer_id=current_user.id))


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post_endpoint(
    post_id: UUID,
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
) -> None:
    delete_post(db, post_id=post_id, requester_id=current_user.id)
    await _safe_feed_broadcast({"type": "post.deleted", "post_id": str(post_id)})


@router.put("/{post_id}/like", response_model=PostEngagementResponse)
async def like_post_endpoint(
    post_id: UUID,
    payload: LikeRequest,
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
) -> PostEngagementResponse:
    snapshot = set_post_like_state(db, post_id=post_id, user_id=current_user.id, should_like=payload.liked)
    await _broadcast_engagement_snapshot(snapshot)
    return PostEngagementResponse(**snapshot)


@router.get("/{post_id}/comments", response_model=CommentListResponse)
async def list_comments_endpoint(
    post_id: UUID,
    db: Session = Depends(get_session),
    current_user: Profile | None = Depends(get_optional_user),
) -> CommentListResponse:
    viewer_id = current_user.id if current_user else None
    items = list_comments(db, post_id=post_id, viewer_id=viewer_id)
    return CommentListResponse(items=[CommentResponse(**item) for item in items])


@router.post("/{post_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment_endpoint(
    post_id: UUID,
    payload: CommentCreate,
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
) -> CommentResponse:
    comment = create_comment(db, post_id=post_id, user_id=current_user.id, content=payload.content)
    serialized = serialize_comment(comment)

    snapshot = post_engagement_snapshot(db, post_id, current_user.id)
    await _safe_feed_broadcast(
        {
            "type": "post.comment_created",
            "post_id": str(post_id),
            "comment": serialized,
        }
    )
    await _broadcast_engagement_snapshot(snapshot)
    return CommentResponse(**serialized)

"""Follow management API routes."""
from __future__ import annotations

from dataclasses import asdict
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import Profile
from ..schemas import (
    FollowActionResponse,
    FollowListResponse,
    FollowRequestListResponse,
    FollowRequestResponse,
    FollowStatsResponse,
    ProfileSummary,
)
from ..services import (
    accept_follow_request,
    get_current_user,
    get_follow_stats,
    get_optional_user,
    list_follow_requests,
    list_followers,
    list_following,
    reject_follow_request,
    remove_follower,
    request_follow,
    unfollow_user,
)

router = APIRouter(prefix="/follows", tags=["follows"])


def _to_request_response(edge) -> FollowRequestResponse:
    return FollowRequestResponse(
        id=edge.id,
        status=edge.status,
        created_at=edge.created_at,
        follower=ProfileSummary.model_validate(edge.follower),
    )


@router.get("/requests", response_model=FollowRequestListResponse)
async def follow_requests_endpoint(
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
) -> FollowRequestListResponse:
    edges = list_follow_requests(db, current_user.id)
    return FollowRequestListResponse(items=[_to_request_response(edge) for edge in edges])


@router.post("/requests/{request_id}/accept", response_model=FollowRequestResponse)
async def accept_follow_request_endpoint(
    request_id: UUID,
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
) -> FollowRequestResponse:
    edge = accept_follow_request(db, owner_id=current_user.id, request_id=request_id)
    return _to_request_response(edge)


@router.post("/requests/{request_id}/reject", response_model=FollowRequestResponse)
async def reject_follow_request_endpoint(
    request_id: UUID,
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
) -> FollowRequestResponse:
    edge = reject_follow_request(db, owner_id=current_user.id, request_id=request_id)
    return _to_request_response(edge)


@router.delete("/followers/{follower_id}", response_model=FollowActionResponse)
async def remove_follower_endpoint(
    follower_id: UUID,
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
) -> FollowActionResponse:
    changed = remove_follower(db, owner_id=current_user.id, follower_id=follower_id)
    payload = asdict(get_follow_stats(db, user_id=current_user.id, viewer_id=current_user.id))
    payload["status"] = "removed" if changed else "noop"
    return FollowActionResponse(**payload)


@router.get("/stats/{user_id}", response_model=FollowStatsResponse)
async def follow_stats_endpoint(
    user_id: UUID,
    db: Session = Depends(get_session),
    viewer: Profile | None = Depends(get_optional_user),
) -> FollowStatsResponse:
    viewer_id = viewer.id if viewer else None
    stats = get_follow_stats(db, user_id=user_id, viewer_id=viewer_id)
    return FollowStatsResponse(**asdict(stats))


@router.get("/{user_id}/followers", response_model=FollowListResponse)
async def followers_endpoint(
    user_id: UUID,
    db: Session = Depends(get_session),
) -> FollowListResponse:
    return FollowListResponse(items=[ProfileSummary.model_validate(item) for item in list_followers(db, user_id)])


@router.get("/{user_id}/following", response_model=FollowListResponse)
async def following_endpoint(
    user_id: UUID,
    db: Session = Depends(get_session),
) -> FollowListResponse:
    return FollowListResponse(items=[ProfileSummary.model_validate(item) for item in list_following(db, user_id)])


@router.post("/{target_id}", response_model=FollowActionResponse, status_code=status.HTTP_201_CREATED)
async def follow_user_endpoint(
    target_id: UUID,
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
) -> FollowActionResponse:
    changed = request_follow(db, follower_id=current_user.id, target_id=target_id)
    payload = asdict(get_follow_stats(db, user_id=target_id, viewer_id=current_user.id))
    payload["status"] = "requested" if changed else "noop"
    return FollowActionResponse(**payload)


@router.delete("/{target_id}", response_model=FollowActionResponse)
async def unfollow_user_endpoint(
    target_id: UUID,
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
) -> FollowActionResponse:
    changed = unfollow_user(db, follower_id=current_user.id, target_id=target_id)
    payload = asdict(get_follow_stats(db, user_id=target_id, viewer_id=current_user.id))
    payload["status"] = "unfollowed" if changed else "noop"
    return FollowActionResponse(**payload)

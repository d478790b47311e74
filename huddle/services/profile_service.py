"""Profile lookups, updates and people search."""
from __future__ import annotations

from typing import Any, Iterable, Sequence
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from ..config import get_settings
from ..constants import INTEREST_CATALOGUE, MAX_INTERESTS, MIN_INTERESTS
from ..models import Follow, FollowStatus, Post, Profile
from ..schemas import ProfileUpdateRequest
from .errors import ConflictError, InvalidInputError, NotFoundError, commit_or_raise

_CATALOGUE_LOOKUP = {item.lower(): item for item in INTEREST_CATALOGUE}


def normalize_interests(values: Iterable[str]) -> list[str]:
    """Return catalogue-cased, de-duplicated interests or raise when out of bounds."""

    selected: list[str] = []
    for raw in values:
        key = (raw or "").strip().lower()
        if not key:
            continue
        canonical = _CATALOGUE_LOOKUP.get(key)
        if canonical is None:
            raise InvalidInputError(f"Unknown interest '{raw}'")
        if canonical not in selected:
            selected.append(canonical)
    if len(selected) < MIN_INTERESTS:
        raise InvalidInputError(f"Please select at least {MIN_INTERESTS} interests")
    if len(selected) > MAX_INTERESTS:
        raise InvalidInputError(f"You can select up to {MAX_INTERESTS} interests")
    return selected


def get_profile(db: Session, username: str) -> Profile:
    profile = db.scalar(select(Profile).where(Profile.username == username))
    if profile is None:
        raise NotFoundError("Profile not found")
    return profile


def get_profile_by_id(db: Session, profile_id: UUID) -> Profile:
    profile = db.get(Profile, profile_id)
    if profile is None:
        raise NotFoundError("Profile not found")
    return profile


def relationship_status(db: Session, *, viewer_id: UUID | None, target_id: UUID) -> str:
    """Describe the viewer's follow edge towards ``target_id``."""

    if viewer_id is None:
        return "none"
    if viewer_id == target_id:
        return "self"
    status_value = db.scalar(
        select(Follow.status).where(Follow.follower_id == viewer_id, Follow.following_id == target_id)
    )
    return status_value or "none"


def build_profile_card(db: Session, profile: Profile, *, viewer_id: UUID | None) -> dict[str, Any]:
    """Return the profile with its accepted follow counts and post total."""

    followers_count = (
        select(func.count(Follow.id))
        .where(Follow.following_id == profile.id, Follow.status == FollowStatus.ACCEPTED.value)
        .scalar_subquery()
    )
    following_count = (
        select(func.count(Follow.id))
        .where(Follow.follower_id == profile.id, Follow.status == FollowStatus.ACCEPTED.value)
        .scalar_subquery()
    )
    post_count = select(func.count(Post.id)).where(Post.user_id == profile.id).scalar_subquery()
    row = db.execute(select(followers_count, following_count, post_count)).one()

    return {
        "id": profile.id,
        "username": profile.username,
        "full_name": profile.full_name,
        "avatar_url": profile.avatar_url,
        "bio": profile.bio,
        "interests": list(profile.interests or []),
        "created_at": profile.created_at,
        "updated_at": profile.updated_at,
        "followers_count": int(row[0] or 0),
        "following_count": int(row[1] or 0),
        "post_count": int(row[2] or 0),
        "relationship": relationship_status(db, viewer_id=viewer_id, target_id=profile.id),
    }


def update_profile(db: Session, *, user_id: UUID, payload: ProfileUpdateRequest) -> Profile:
    """Apply profile updates for the supplied ``user_id``."""

    profile = get_profile_by_id(db, user_id)

    # Only update fields that were actually sent by the client
    update_data = payload.model_dump(exclude_unset=True)

    for required in ("full_name", "username"):
        if required in update_data:
            value = (update_data[required] or "").strip()
            if not value:
                raise InvalidInputError(f"{required.replace('_', ' ').capitalize()} cannot be empty")
            update_data[required] = value

    if "username" in update_data and update_data["username"] != profile.username:
        taken = db.scalar(
            select(Profile.id).where(Profile.username == update_data["username"], Profile.id != profile.id)
        )
        if taken is not None:
            raise ConflictError("Username is already taken")

    if "interests" in update_data:
        update_data["interests"] = normalize_interests(update_data["interests"] or [])

    if "bio" in update_data:
        bio = (update_data["bio"] or "").strip()
        update_data["bio"] = bio or None

    if "avatar_url" in update_data:
        avatar = (update_data["avatar_url"] or "").strip()
        update_data["avatar_url"] = avatar or None

    for field, value in update_data.items():
        setattr(profile, field, value)

    commit_or_raise(db, "Failed to update profile")
    db.refresh(profile)
    return profile


def follower_counts(db: Session, profile_ids: Sequence[UUID]) -> dict[UUID, int]:
    """Return accepted follower totals for many profiles in one query."""

    if not profile_ids:
        return {}
    stmt = (
        select(Follow.following_id, func.count(Follow.id))
        .where(Follow.following_id.in_(profile_ids), Follow.status == FollowStatus.ACCEPTED.value)
        .group_by(Follow.following_id)
    )
    return {row[0]: int(row[1]) for row in db.execute(stmt)}


def viewer_statuses(db: Session, viewer_id: UUID | None, profile_ids: Sequence[UUID]) -> dict[UUID, str]:
    """Return the viewer's follow status towards each of ``profile_ids``."""

    if viewer_id is None or not profile_ids:
        return {}
    stmt = select(Follow.following_id, Follow.status).where(
        Follow.follower_id == viewer_id,
        Follow.following_id.in_(profile_ids),
    )
    return {row[0]: row[1] for row in db.execute(stmt)}


def search_profiles(
    db: Session,
    query: str,
    *,
    viewer_id: UUID | None,
    limit: int | None = None,
) -> list[dict[str, Any]]:
    """Case-insensitive match on username or full name, excluding the viewer."""

    term = query.strip()
    if not term:
        return []
    limit = limit or get_settings().search_limit
    pattern = f"%{term}%"
    stmt = select(Profile).where(or_(Profile.username.ilike(pattern), Profile.full_name.ilike(pattern)))
    if viewer_id is not None:
        stmt = stmt.where(Profile.id != viewer_id)
    stmt = stmt.order_by(Profile.username.asc()).limit(limit)
    profiles = list(db.scalars(stmt))

    ids = [profile.id for profile in profiles]
    counts = follower_counts(db, ids)
    statuses = viewer_statuses(db, viewer_id, ids)
    return [
        {
            "id": profile.id,
            "username": profile.username,
            "full_name": profile.full_name,
            "avatar_url": profile.avatar_url,
            "bio": profile.bio,
            "interests": list(profile.interests or []),
            "followers_count": counts.get(profile.id, 0),
            "relationship": statuses.get(profile.id, "none"),
        }
        for profile in profiles
    ]


__all__ = [
    "normalize_interests",
    "get_profile",
    "get_profile_by_id",
    "relationship_status",
    "build_profile_card",
    "update_profile",
    "follower_counts",
    "viewer_statuses",
    "search_profiles",
]

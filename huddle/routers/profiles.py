"""Profile API routes backed by PostgreSQL."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import Profile
from ..schemas import (
    ProfileCardResponse,
    ProfileResponse,
    ProfileSearchResponse,
    ProfileSearchResult,
    ProfileUpdateRequest,
)
from ..services import get_current_user, get_optional_user, get_profile, get_profile_by_id, search_profiles, update_profile
from ..services.profile_service import build_profile_card

router = APIRouter(prefix="/profiles", tags=["profiles"])


# ---------------------------------------------------------------------------
# People search (declared before /{username} so "search" is not a username)
# ---------------------------------------------------------------------------
@router.get("/search", response_model=ProfileSearchResponse)
async def search_profiles_endpoint(
    q: str = Query(..., min_length=1, max_length=100),
    db: Session = Depends(get_session),
    current_user: Profile | None = Depends(get_optional_user),
) -> ProfileSearchResponse:
    viewer_id = current_user.id if current_user else None
    results = search_profiles(db, q, viewer_id=viewer_id)
    return ProfileSearchResponse(items=[ProfileSearchResult(**item) for item in results])


# ---------------------------------------------------------------------------
# Update the signed-in profile
# ---------------------------------------------------------------------------
@router.put("/me", response_model=ProfileResponse)
async def update_my_profile(
    payload: ProfileUpdateRequest,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> ProfileResponse:
    updated = update_profile(db, user_id=current_user.id, payload=payload)
    return ProfileResponse.model_validate(updated)


# ---------------------------------------------------------------------------
# Retrieve profile card by UUID
# ---------------------------------------------------------------------------
@router.get("/by-id/{user_id}", response_model=ProfileCardResponse)
async def retrieve_profile_by_id(
    user_id: UUID,
    db: Session = Depends(get_session),
    current_user: Profile | None = Depends(get_optional_user),
) -> ProfileCardResponse:
    profile = get_profile_by_id(db, user_id)
    viewer_id = current_user.id if current_user else None
    return ProfileCardResponse(**build_profile_card(db, profile, viewer_id=viewer_id))


# ---------------------------------------------------------------------------
# Retrieve profile card by username
# ---------------------------------------------------------------------------
@router.get("/{username}", response_model=ProfileCardResponse)
async def retrieve_profile(
    username: str,
    db: Session = Depends(get_session),
    current_user: Profile | None = Depends(get_optional_user),
) -> ProfileCardResponse:
    """Fetch a profile page with follow counts and the viewer's relationship."""
    profile = get_profile(db, username)
    viewer_id = current_user.id if current_user else None
    return ProfileCardResponse(**build_profile_card(db, profile, viewer_id=viewer_id))

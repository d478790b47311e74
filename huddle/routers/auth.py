"""Authentication related API routes backed by PostgreSQL."""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..constants import INTEREST_CATALOGUE, MAX_INTERESTS, MIN_INTERESTS
from ..database import get_session
from ..models import Profile
from ..schemas import AuthResponse, InterestCatalogueResponse, ProfileResponse, SignInRequest, SignUpRequest
from ..services import get_current_user, sign_in, sign_out, sign_up
from ..services.auth_service import get_current_token

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/sign-up", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def sign_up_endpoint(
    payload: SignUpRequest,
    db: Session = Depends(get_session),
) -> AuthResponse:
    profile, token = sign_up(db, payload)
    return AuthResponse(access_token=token, user_id=profile.id, username=profile.username)


@router.post("/sign-in", response_model=AuthResponse)
async def sign_in_endpoint(
    payload: SignInRequest,
    db: Session = Depends(get_session),
) -> AuthResponse:
    profile, token = sign_in(db, str(payload.email), payload.password)
    return AuthResponse(access_token=token, user_id=profile.id, username=profile.username)


@router.post("/sign-out", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out_endpoint(
    token: str = Depends(get_current_token),
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> None:
    sign_out(db, token)


@router.get("/me", response_model=ProfileResponse)
async def me_endpoint(current_user: Profile = Depends(get_current_user)) -> ProfileResponse:
    return ProfileResponse.model_validate(current_user)


@router.get("/interests", response_model=InterestCatalogueResponse)
async def interests_endpoint() -> InterestCatalogueResponse:
    return InterestCatalogueResponse(
        items=list(INTEREST_CATALOGUE),
        min_selected=MIN_INTERESTS,
        max_selected=MAX_INTERESTS,
    )

"""Business logic for authentication and sessions backed by PostgreSQL."""
from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import get_settings
from ..constants import user_channel
from ..database import get_session
from ..models import Account, Profile, RevokedToken
from ..schemas import SignUpRequest
from ..security import JWT_SECRET_ENV, MissingSecretError, require_secret
from .errors import AuthenticationError, ConflictError, InvalidInputError, commit_or_raise, raise_database_error
from .profile_service import normalize_interests
from .realtime import realtime_hub

logger = logging.getLogger(__name__)

_security = HTTPBearer(auto_error=False)
_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

_USERNAME_STRIP = re.compile(r"[^a-z0-9_.]")


@dataclass(slots=True)
class TokenClaims:
    subject: UUID
    jti: str
    expires_at: datetime


@lru_cache(maxsize=1)
def _get_jwt_secret() -> str:
    try:
        return require_secret(JWT_SECRET_ENV)
    except MissingSecretError as exc:
        raise RuntimeError(str(exc)) from exc


def hash_password(password: str) -> str:
    """Hash a plain-text password using bcrypt."""

    return _pwd_context.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    """Verify that ``password`` matches ``hashed_password``."""

    try:
        return _pwd_context.verify(password, hashed_password)
    except ValueError:
        logger.warning("Stored password hash could not be parsed")
        return False


def create_access_token(subject: UUID, *, expires_minutes: Optional[int] = None) -> str:
    """Create a signed JWT holding the provided ``subject`` and a unique ``jti``."""

    settings = get_settings()
    expire_delta = timedelta(minutes=expires_minutes or settings.jwt_expires_minutes)
    now = datetime.now(timezone.utc)
    payload = {"sub": str(subject), "jti": uuid.uuid4().hex, "exp": now + expire_delta, "iat": now}
    return jwt.encode(payload, _get_jwt_secret(), algorithm=settings.jwt_algorithm)


def decode_token_claims(token: str) -> TokenClaims:
    """Decode and validate a JWT, returning its subject, id and expiry."""

    settings = get_settings()
    try:
        payload = jwt.decode(token, _get_jwt_secret(), algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise AuthenticationError("Invalid token") from exc

    subject = payload.get("sub")
    jti = payload.get("jti")
    exp = payload.get("exp")
    if not subject or not jti or exp is None:
        raise AuthenticationError("Invalid token payload")
    try:
        subject_id = UUID(subject)
    except ValueError as exc:
        raise AuthenticationError("Invalid token payload") from exc
    return TokenClaims(subject=subject_id, jti=str(jti), expires_at=datetime.fromtimestamp(int(exp), tz=timezone.utc))


def is_token_revoked(db: Session, jti: str) -> bool:
    return db.get(RevokedToken, jti) is not None


def decode_access_token(token: str, db: Session | None = None) -> UUID:
    """Return the subject of a valid, unrevoked token."""

    claims = decode_token_claims(token)
    if db is not None and is_token_revoked(db, claims.jti):
        raise AuthenticationError("Session has been signed out")
    return claims.subject


def _unique_username(db: Session, base: str) -> str:
    candidate = _USERNAME_STRIP.sub("", base.lower())[:28] or "user"
    if len(candidate) < 3:
        candidate = f"{candidate}_user"
    if db.scalar(select(Profile.id).where(Profile.username == candidate)) is None:
        return candidate
    taken = db.scalar(
        select(func.count()).select_from(Profile).where(Profile.username.like(f"{candidate}%"))
    ) or 0
    suffix = int(taken) + 1
    while db.scalar(select(Profile.id).where(Profile.username == f"{candidate}{suffix}")) is not None:
        suffix += 1
    return f"{candidate}{suffix}"


def sign_up(db: Session, payload: SignUpRequest) -> tuple[Profile, str]:
    """Create an account and its profile in one transaction and open a session."""

    email = str(payload.email).lower()
    if db.scalar(select(Account.id).where(Account.email == email)) is not None:
        raise ConflictError("Email already registered")
    username = payload.username.strip()
    if db.scalar(select(Profile.id).where(Profile.username == username)) is not None:
        raise ConflictError("Username is already taken")

    full_name = payload.full_name.strip()
    if not full_name:
        raise InvalidInputError("Full name cannot be empty")
    interests = normalize_interests(payload.interests)

    account = Account(email=email, hashed_password=hash_password(payload.password))
    profile = Profile(
        username=username,
        full_name=full_name,
        bio=payload.bio.strip() if payload.bio else None,
        interests=interests,
    )
    account.profile = profile

    try:
        db.add(account)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("Email or username already in use") from exc
    except SQLAlchemyError as exc:
        raise_database_error(db, "Unable to register user", exc)

    db.refresh(profile)
    logger.info("Registered account %s as @%s", account.id, profile.username)
    return profile, create_access_token(account.id)


def ensure_profile_exists(db: Session, account: Account) -> Profile:
    """Return the account's profile, creating a default one for legacy accounts."""

    profile = db.get(Profile, account.id)
    if profile is not None:
        return profile

    local_part = account.email.split("@", 1)[0]
    profile = Profile(id=account.id, username=_unique_username(db, local_part), full_name="User", interests=[])
    db.add(profile)
    commit_or_raise(db, "Unable to create profile")
    db.refresh(profile)
    logger.info("Created default profile @%s for account %s", profile.username, account.id)
    return profile


def sign_in(db: Session, email: str, password: str) -> tuple[Profile, str]:
    """Authenticate by email and password and open a session."""

    account = db.scalar(select(Account).where(Account.email == email.lower()))
    if account is None or not verify_password(password, account.hashed_password):
        raise AuthenticationError("Invalid credentials")
    profile = ensure_profile_exists(db, account)
    return profile, create_access_token(account.id)


def sign_out(db: Session, token: str) -> UUID:
    """Revoke ``token`` until it expires and announce the session change."""

    claims = decode_token_claims(token)
    if not is_token_revoked(db, claims.jti):
        db.add(RevokedToken(jti=claims.jti, account_id=claims.subject, expires_at=claims.expires_at))
        commit_or_raise(db, "Unable to sign out")
    realtime_hub.schedule_publish(user_channel(claims.subject), {"type": "auth.signed_out"})
    return claims.subject


def purge_expired_revocations(db: Session) -> int:
    """Delete revocation rows whose tokens can no longer be presented anyway."""

    stmt = delete(RevokedToken).where(RevokedToken.expires_at < datetime.now(timezone.utc))
    result = db.execute(stmt)
    commit_or_raise(db, "Unable to purge revoked tokens")
    return int(result.rowcount or 0)


async def get_current_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(_security),
) -> str:
    if not credentials or credentials.scheme.lower() != "bearer":
        raise AuthenticationError("Missing bearer token")
    return credentials.credentials


async def get_current_user(
    token: str = Depends(get_current_token),
    db: Session = Depends(get_session),
) -> Profile:
    """Resolve the authenticated profile from the provided bearer token."""

    profile_id = decode_access_token(token, db)
    profile = db.get(Profile, profile_id)
    if profile is None:
        account = db.get(Account, profile_id)
        if account is None:
            raise AuthenticationError("Invalid token")
        profile = ensure_profile_exists(db, account)
    return profile


async def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_security),
    db: Session = Depends(get_session),
) -> Profile | None:
    """Return the authenticated profile when a valid bearer token is provided."""

    if not credentials or credentials.scheme.lower() != "bearer":
        return None

    try:
        profile_id = decode_access_token(credentials.credentials, db)
    except AuthenticationError:
        return None

    return db.get(Profile, profile_id)


__all__ = [
    "TokenClaims",
    "hash_password",
    "verify_password",
    "create_access_token",
    "decode_token_claims",
    "decode_access_token",
    "is_token_revoked",
    "sign_up",
    "sign_in",
    "sign_out",
    "ensure_profile_exists",
    "purge_expired_revocations",
    "get_current_token",
    "get_current_user",
    "get_optional_user",
]

"""Reading signing secrets from the environment without echoing them."""
from __future__ import annotations

import os
from typing import Final

__all__ = ["MissingSecretError", "require_secret", "is_placeholder", "JWT_SECRET_ENV"]

JWT_SECRET_ENV: Final[str] = "JWT_SECRET_KEY"

# Values copied verbatim from .env.example or tutorials.
_PLACEHOLDER_VALUES: Final[frozenset[str]] = frozenset(
    {
        "changeme",
        "change-me",
        "secret",
        "placeholder",
        "replace-with-a-long-random-string",
        "your-jwt-secret",
    }
)


class MissingSecretError(RuntimeError):
    """A required secret is unset, blank, too short or still a placeholder."""


def is_placeholder(value: str | None) -> bool:
    normalized = (value or "").strip().lower()
    return not normalized or normalized in _PLACEHOLDER_VALUES


def require_secret(name: str = JWT_SECRET_ENV, *, min_length: int = 8) -> str:
    """Return the trimmed value of ``name``; the error message never includes the value."""

    value = os.getenv(name)
    if is_placeholder(value):
        raise MissingSecretError(f"{name} must be set to a non-placeholder value")
    secret = value.strip()
    if len(secret) < min_length:
        raise MissingSecretError(f"{name} must be at least {min_length} characters long")
    return secret

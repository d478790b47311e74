"""Security helpers shared by the service layer."""
from .secrets import JWT_SECRET_ENV, MissingSecretError, is_placeholder, require_secret

__all__ = ["JWT_SECRET_ENV", "MissingSecretError", "is_placeholder", "require_secret"]

"""Typed failures raised by the service layer.

Every service function reports problems by raising one of these classes; the
application registers a single handler that renders them as JSON responses
with the carried status code.
"""
from __future__ import annotations

import logging
from typing import NoReturn

from fastapi import status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base class for failures that map onto an HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class BadRequestError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED


class PermissionDeniedError(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(ServiceError):
    status_code = status.HTTP_409_CONFLICT


class InvalidInputError(ServiceError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


def commit_or_raise(db: Session, detail: str) -> None:
    """Commit the session, translating database failures into :class:`ServiceError`."""

    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(detail)
        raise ServiceError(detail) from exc


def raise_database_error(db: Session, detail: str, exc: SQLAlchemyError) -> NoReturn:
    db.rollback()
    logger.exception(detail)
    raise ServiceError(detail) from exc


__all__ = [
    "ServiceError",
    "BadRequestError",
    "AuthenticationError",
    "PermissionDeniedError",
    "NotFoundError",
    "ConflictError",
    "InvalidInputError",
    "commit_or_raise",
    "raise_database_error",
]

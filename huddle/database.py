"""Database layer utilities for SQLAlchemy-backed persistence."""
from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Generator, Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from .config import get_settings

settings = get_settings()


def _engine_options(database_url: str) -> dict[str, Any]:
    options: dict[str, Any] = {"pool_pre_ping": True, "future": True}
    if make_url(database_url).get_backend_name() == "sqlite":
        # Sessions are opened from the event loop thread and from test threads.
        options["connect_args"] = {"check_same_thread": False}
    return options


engine: Engine = create_engine(settings.database_url, **_engine_options(settings.database_url))

SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    future=True,
    expire_on_commit=False,
)

Base = declarative_base()


def get_engine() -> Engine:
    """Return the configured SQLAlchemy engine."""
    return engine


def get_session() -> Generator[Session, None, None]:
    """FastAPI dependency that yields a SQLAlchemy session per request."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@contextmanager
def session_scope() -> Iterator[Session]:
    """Session for work outside a request: WebSocket handshakes and startup tasks.

    Pending changes are committed on success and rolled back on error.
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db() -> None:
    """Create any missing tables for the registered models."""
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=engine)


__all__ = [
    "Base",
    "engine",
    "SessionLocal",
    "get_engine",
    "get_session",
    "session_scope",
    "init_db",
]

"""Shared fixtures for the API integration tests."""
from __future__ import annotations

import os
from typing import Callable, Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import delete

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///./test_huddle.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from huddle.database import Base, SessionLocal, engine  # noqa: E402
from huddle.main import app  # noqa: E402
from huddle.models import (  # noqa: E402
    Account,
    Comment,
    Conversation,
    Follow,
    Like,
    Message,
    Notification,
    Post,
    Profile,
    RevokedToken,
)

DEFAULT_INTERESTS = ["Music", "Coding", "Travel"]


@pytest.fixture(scope="session", autouse=True)
def _create_schema() -> Iterator[None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def _clean_database() -> Iterator[None]:
    with SessionLocal() as session:
        for model in (Notification, Message, Conversation, Like, Comment, Post, Follow, RevokedToken, Profile, Account):
            session.execute(delete(model))
        session.commit()
    yield


@pytest.fixture
def client() -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


def sign_up(
    client: TestClient,
    username: str,
    *,
    interests: list[str] | None = None,
    full_name: str | None = None,
    password: str = "password123",
) -> dict:
    response = client.post(
        "/auth/sign-up",
        json={
            "email": f"{username}@example.com",
            "password": password,
            "username": username,
            "full_name": full_name or username.title(),
            "interests": interests or DEFAULT_INTERESTS,
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


def auth_headers(session: dict) -> dict[str, str]:
    return {"Authorization": f"Bearer {session['access_token']}"}


@pytest.fixture
def signed_up(client: TestClient) -> Callable[..., dict]:
    """Sign up a profile and return its session payload with ready-made headers."""

    def _factory(username: str, **kwargs) -> dict:
        session = sign_up(client, username, **kwargs)
        session["headers"] = auth_headers(session)
        return session

    return _factory

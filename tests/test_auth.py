"""Integration tests covering sign-up, sign-in and sign-out."""
from __future__ import annotations

from uuid import UUID

from huddle.database import SessionLocal
from huddle.models import Account, Profile, RevokedToken
from huddle.services.auth_service import hash_password


def test_sign_up_creates_account_and_profile(client, signed_up):
    session = signed_up("alice", interests=["music", "Coding", "TRAVEL", "Music"])
    user_id = UUID(session["user_id"])
    assert session["username"] == "alice"
    assert session["token_type"] == "bearer"

    with SessionLocal() as db:
        account = db.get(Account, user_id)
        profile = db.get(Profile, user_id)
        assert account is not None and account.email == "alice@example.com"
        assert account.hashed_password != "password123"
        assert profile is not None
        assert profile.interests == ["Music", "Coding", "Travel"]

    me = client.get("/auth/me", headers=session["headers"])
    assert me.status_code == 200
    assert me.json()["username"] == "alice"


def test_sign_up_rejects_duplicate_email_and_username(client, signed_up):
    signed_up("alice")

    duplicate_email = client.post(
        "/auth/sign-up",
        json={
            "email": "alice@example.com",
            "password": "password123",
            "username": "alice2",
            "full_name": "Alice Two",
            "interests": ["Art", "Dance", "Music"],
        },
    )
    assert duplicate_email.status_code == 409

    duplicate_username = client.post(
        "/auth/sign-up",
        json={
            "email": "other@example.com",
            "password": "password123",
            "username": "alice",
            "full_name": "Other",
            "interests": ["Art", "Dance", "Music"],
        },
    )
    assert duplicate_username.status_code == 409


def test_sign_up_enforces_interest_bounds(client):
    base = {"password": "password123", "full_name": "Bob"}

    too_few = client.post(
        "/auth/sign-up",
        json={**base, "email": "bob@example.com", "username": "bob", "interests": ["Art", "Music"]},
    )
    assert too_few.status_code == 422

    too_many = client.post(
        "/auth/sign-up",
        json={
            **base,
            "email": "bob@example.com",
            "username": "bob",
            "interests": ["Art", "Music", "Dance", "Tech", "Travel", "Poetry"],
        },
    )
    assert too_many.status_code == 422

    unknown = client.post(
        "/auth/sign-up",
        json={**base, "email": "bob@example.com", "username": "bob", "interests": ["Art", "Music", "Knitting"]},
    )
    assert unknown.status_code == 422
    assert "Knitting" in unknown.json()["detail"]


def test_sign_in_and_bad_credentials(client, signed_up):
    signed_up("carol")

    ok = client.post("/auth/sign-in", json={"email": "CAROL@example.com", "password": "password123"})
    assert ok.status_code == 200
    assert ok.json()["username"] == "carol"

    bad = client.post("/auth/sign-in", json={"email": "carol@example.com", "password": "wrong-password"})
    assert bad.status_code == 401
    assert bad.json() == {"detail": "Invalid credentials"}

    missing = client.post("/auth/sign-in", json={"email": "nobody@example.com", "password": "password123"})
    assert missing.status_code == 401


def test_sign_in_creates_missing_profile(client):
    with SessionLocal() as db:
        db.add(Account(email="legacy.user@example.com", hashed_password=hash_password("password123")))
        db.commit()

    response = client.post("/auth/sign-in", json={"email": "legacy.user@example.com", "password": "password123"})
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["username"] == "legacy.user"

    with SessionLocal() as db:
        profile = db.get(Profile, UUID(body["user_id"]))
        assert profile is not None
        assert profile.full_name == "User"
        assert profile.interests == []


def test_sign_out_revokes_token(client, signed_up):
    session = signed_up("dave")

    response = client.post("/auth/sign-out", headers=session["headers"])
    assert response.status_code == 204

    with SessionLocal() as db:
        assert db.query(RevokedToken).count() == 1

    after = client.get("/auth/me", headers=session["headers"])
    assert after.status_code == 401

    fresh = client.post("/auth/sign-in", json={"email": "dave@example.com", "password": "password123"})
    me = client.get("/auth/me", headers={"Authorization": f"Bearer {fresh.json()['access_token']}"})
    assert me.status_code == 200


def test_me_requires_token(client):
    assert client.get("/auth/me").status_code == 401
    assert client.get("/auth/me", headers={"Authorization": "Bearer not-a-token"}).status_code == 401


def test_interest_catalogue(client):
    response = client.get("/auth/interests")
    assert response.status_code == 200
    body = response.json()
    assert len(body["items"]) == 24
    assert "Photography" in body["items"]
    assert body["min_selected"] == 3
    assert body["max_selected"] == 5


def test_sign_up_rejects_blank_full_name(client):
    response = client.post(
        "/auth/sign-up",
        json={
            "email": "blank@example.com",
            "password": "password123",
            "username": "blank",
            "full_name": "   ",
            "interests": ["Music", "Coding", "Travel"],
        },
    )
    assert response.status_code == 422
    assert response.json()["detail"] == "Full name cannot be empty"

    with SessionLocal() as db:
        assert db.query(Account).count() == 0
        assert db.query(Profile).count() == 0

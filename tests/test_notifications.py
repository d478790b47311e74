"""Integration tests for notifications, badges and the notification socket."""
from __future__ import annotations

import pytest
from starlette.websockets import WebSocketDisconnect

from huddle.database import SessionLocal
from huddle.models import NotificationType, Profile
from huddle.services.notification_service import add_notification, validate_notification_target


def _like(client, liker, post_id):
    response = client.put(f"/posts/{post_id}/like", json={"liked": True}, headers=liker["headers"])
    assert response.status_code == 200


def test_list_notifications_with_actor_and_post_preview(client, signed_up):
    alice = signed_up("alice")
    bob = signed_up("bob")
    carol = signed_up("carol")
    post = client.post("/posts/", json={"content": "look at this"}, headers=alice["headers"]).json()

    _like(client, bob, post["id"])
    client.post(f"/follows/{alice['user_id']}", headers=carol["headers"])

    body = client.get("/notifications/", headers=alice["headers"]).json()
    assert body["unread_count"] == 2
    newest, oldest = body["items"]
    assert newest["type"] == "follow_request"
    assert newest["actor"]["username"] == "carol"
    assert newest["post"] is None
    assert oldest["type"] == "like"
    assert oldest["actor"]["username"] == "bob"
    assert oldest["post"]["content"] == "look at this"

    assert client.get("/notifications/", headers=bob["headers"]).json()["items"] == []


def test_mark_read_and_mark_all(client, signed_up):
    alice = signed_up("alice")
    bob = signed_up("bob")
    carol = signed_up("carol")
    post = client.post("/posts/", json={"content": "p"}, headers=alice["headers"]).json()
    _like(client, bob, post["id"])
    _like(client, carol, post["id"])

    items = client.get("/notifications/", headers=alice["headers"]).json()["items"]

    foreign = client.post(f"/notifications/{items[0]['id']}/read", headers=bob["headers"])
    assert foreign.status_code == 404

    single = client.post(f"/notifications/{items[0]['id']}/read", headers=alice["headers"])
    assert single.status_code == 200
    assert single.json()["read"] is True
    assert client.get("/notifications/summary", headers=alice["headers"]).json() == {"unread_count": 1}

    everything = client.post("/notifications/mark-read", headers=alice["headers"])
    assert everything.json() == {"unread_count": 0}


def test_add_notification_rules(client, signed_up):
    alice = signed_up("alice")
    signed_up("bob")

    with pytest.raises(ValueError):
        validate_notification_target("like", post_id=None, comment_id=None)
    with pytest.raises(ValueError):
        validate_notification_target("follow", post_id=alice["user_id"], comment_id=None)
    with pytest.raises(ValueError):
        validate_notification_target("poke", post_id=None, comment_id=None)

    with SessionLocal() as db:
        alice_profile = db.query(Profile).filter_by(username="alice").one()
        bob_profile = db.query(Profile).filter_by(username="bob").one()

        skipped = add_notification(
            db, recipient_id=alice_profile.id, actor_id=alice_profile.id, type_=NotificationType.FOLLOW
        )
        assert skipped is None

        stored = add_notification(
            db, recipient_id=alice_profile.id, actor_id=bob_profile.id, type_=NotificationType.FOLLOW
        )
        assert stored is not None
        assert stored.read is False

    assert client.get("/notifications/summary", headers=alice["headers"]).json()["unread_count"] == 1


def test_notification_socket_receives_badges(client, signed_up):
    alice = signed_up("alice")
    bob = signed_up("bob")
    post = client.post("/posts/", json={"content": "watch me"}, headers=alice["headers"]).json()

    with client.websocket_connect(f"/notifications/ws?token={alice['access_token']}") as websocket:
        assert websocket.receive_json() == {"type": "ready", "unread_count": 0}

        websocket.send_text("ping")
        assert websocket.receive_json() == {"type": "pong"}

        _like(client, bob, post["id"])
        created = websocket.receive_json()
        assert created["type"] == "notification.created"
        assert created["unread_count"] == 1
        assert created["notification"]["actor"]["username"] == "bob"

        client.post("/notifications/mark-read", headers=alice["headers"])
        cleared = websocket.receive_json()
        assert cleared == {"type": "notification.read_all", "unread_count": 0}


def test_notification_socket_rejects_bad_token(client):
    with pytest.raises(WebSocketDisconnect) as excinfo:
        with client.websocket_connect("/notifications/ws?token=garbage") as websocket:
            websocket.receive_json()
    assert excinfo.value.code == 1008

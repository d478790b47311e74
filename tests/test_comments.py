"""Integration tests for comments and comment likes."""
from __future__ import annotations

from uuid import UUID

from huddle.database import SessionLocal
from huddle.models import Notification, NotificationType


def _post(client, session, content="a post"):
    return client.post("/posts/", json={"content": content}, headers=session["headers"]).json()


def test_comment_lifecycle(client, signed_up):
    alice = signed_up("alice")
    bob = signed_up("bob")
    post = _post(client, alice)

    first = client.post(f"/posts/{post['id']}/comments", json={"content": " first! "}, headers=bob["headers"])
    assert first.status_code == 201, first.text
    assert first.json()["content"] == "first!"
    assert first.json()["username"] == "bob"
    client.post(f"/posts/{post['id']}/comments", json={"content": "second"}, headers=alice["headers"])

    listing = client.get(f"/posts/{post['id']}/comments").json()["items"]
    assert [item["content"] for item in listing] == ["first!", "second"]

    comment_id = first.json()["id"]
    forbidden = client.patch(f"/posts/comments/{comment_id}", json={"content": "nope"}, headers=alice["headers"])
    assert forbidden.status_code == 403

    edited = client.patch(f"/posts/comments/{comment_id}", json={"content": "edited"}, headers=bob["headers"])
    assert edited.status_code == 200
    assert edited.json()["content"] == "edited"

    assert client.delete(f"/posts/comments/{comment_id}", headers=alice["headers"]).status_code == 403
    assert client.delete(f"/posts/comments/{comment_id}", headers=bob["headers"]).status_code == 204
    assert len(client.get(f"/posts/{post['id']}/comments").json()["items"]) == 1


def test_comment_validation(client, signed_up):
    alice = signed_up("alice")
    post = _post(client, alice)

    blank = client.post(f"/posts/{post['id']}/comments", json={"content": "   "}, headers=alice["headers"])
    assert blank.status_code == 422

    missing = client.post(
        "/posts/00000000-0000-0000-0000-000000000000/comments",
        json={"content": "hello"},
        headers=alice["headers"],
    )
    assert missing.status_code == 404


def test_comment_notifies_post_author_only_for_others(client, signed_up):
    alice = signed_up("alice")
    bob = signed_up("bob")
    post = _post(client, alice)

    client.post(f"/posts/{post['id']}/comments", json={"content": "mine"}, headers=alice["headers"])
    reply = client.post(f"/posts/{post['id']}/comments", json={"content": "yours"}, headers=bob["headers"]).json()

    with SessionLocal() as db:
        notifications = db.query(Notification).all()
        assert len(notifications) == 1
        assert notifications[0].type == NotificationType.COMMENT
        assert notifications[0].recipient_id == UUID(alice["user_id"])
        assert notifications[0].actor_id == UUID(bob["user_id"])
        assert str(notifications[0].post_id) == post["id"]
        assert str(notifications[0].comment_id) == reply["id"]


def test_comment_like_carries_post_and_comment(client, signed_up):
    alice = signed_up("alice")
    bob = signed_up("bob")
    post = _post(client, alice)
    comment = client.post(
        f"/posts/{post['id']}/comments", json={"content": "great"}, headers=bob["headers"]
    ).json()

    liked = client.put(f"/posts/comments/{comment['id']}/like", json={"liked": True}, headers=alice["headers"])
    assert liked.status_code == 200
    assert liked.json() == {"comment_id": comment["id"], "like_count": 1, "viewer_has_liked": True}

    again = client.put(f"/posts/comments/{comment['id']}/like", json={"liked": True}, headers=alice["headers"])
    assert again.json()["like_count"] == 1

    listing = client.get(f"/posts/{post['id']}/comments", headers=alice["headers"]).json()["items"]
    assert listing[0]["like_count"] == 1
    assert listing[0]["viewer_has_liked"] is True

    with SessionLocal() as db:
        like_notifications = db.query(Notification).filter(Notification.type == "like").all()
        assert len(like_notifications) == 1
        assert like_notifications[0].recipient_id == UUID(bob["user_id"])
        assert str(like_notifications[0].post_id) == post["id"]
        assert str(like_notifications[0].comment_id) == comment["id"]

    unliked = client.put(f"/posts/comments/{comment['id']}/like", json={"liked": False}, headers=alice["headers"])
    assert unliked.json()["like_count"] == 0

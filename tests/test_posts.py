"""Integration tests for posts, the feed and post likes."""
from __future__ import annotations

from huddle.database import SessionLocal
from huddle.models import Comment, Like, Notification, Post


def _create_post(client, session, content="hello world"):
    response = client.post("/posts/", json={"content": content}, headers=session["headers"])
    assert response.status_code == 201, response.text
    return response.json()


def test_create_post_trims_and_validates(client, signed_up):
    alice = signed_up("alice")

    post = _create_post(client, alice, "  first post  ")
    assert post["content"] == "first post"
    assert post["username"] == "alice"
    assert post["like_count"] == 0
    assert post["comment_count"] == 0

    blank = client.post("/posts/", json={"content": "    "}, headers=alice["headers"])
    assert blank.status_code == 422

    too_long = client.post("/posts/", json={"content": "x" * 2001}, headers=alice["headers"])
    assert too_long.status_code == 422

    anonymous = client.post("/posts/", json={"content": "hi"})
    assert anonymous.status_code == 401


def test_only_author_can_edit_or_delete(client, signed_up):
    alice = signed_up("alice")
    bob = signed_up("bob")
    post = _create_post(client, alice)

    forbidden = client.patch(f"/posts/{post['id']}", json={"content": "hacked"}, headers=bob["headers"])
    assert forbidden.status_code == 403
    assert client.delete(f"/posts/{post['id']}", headers=bob["headers"]).status_code == 403

    edited = client.patch(f"/posts/{post['id']}", json={"content": "edited"}, headers=alice["headers"])
    assert edited.status_code == 200
    assert edited.json()["content"] == "edited"

    assert client.delete(f"/posts/{post['id']}", headers=alice["headers"]).status_code == 204
    assert client.get(f"/posts/{post['id']}").status_code == 404
    assert client.patch(f"/posts/{post['id']}", json={"content": "x"}, headers=alice["headers"]).status_code == 404


def test_delete_post_removes_comments_likes_and_notifications(client, signed_up):
    alice = signed_up("alice")
    bob = signed_up("bob")
    post = _create_post(client, alice)
    comment = client.post(
        f"/posts/{post['id']}/comments", json={"content": "nice"}, headers=bob["headers"]
    ).json()
    client.put(f"/posts/{post['id']}/like", json={"liked": True}, headers=bob["headers"])
    client.put(f"/posts/comments/{comment['id']}/like", json={"liked": True}, headers=alice["headers"])

    with SessionLocal() as db:
        assert db.query(Comment).count() == 1
        assert db.query(Like).count() == 2
        assert db.query(Notification).count() == 3

    assert client.delete(f"/posts/{post['id']}", headers=alice["headers"]).status_code == 204

    with SessionLocal() as db:
        assert db.query(Post).count() == 0
        assert db.query(Comment).count() == 0
        assert db.query(Like).count() == 0
        assert db.query(Notification).count() == 0


def test_feed_is_newest_first_with_counters(client, signed_up):
    alice = signed_up("alice")
    bob = signed_up("bob")
    first = _create_post(client, alice, "first")
    second = _create_post(client, bob, "second")

    client.put(f"/posts/{first['id']}/like", json={"liked": True}, headers=bob["headers"])
    client.post(f"/posts/{first['id']}/comments", json={"content": "nice"}, headers=bob["headers"])

    feed = client.get("/posts/feed", headers=bob["headers"]).json()["items"]
    assert [item["id"] for item in feed] == [second["id"], first["id"]]
    assert feed[1]["like_count"] == 1
    assert feed[1]["comment_count"] == 1
    assert feed[1]["viewer_has_liked"] is True
    assert feed[0]["viewer_has_liked"] is False

    anonymous = client.get("/posts/feed").json()["items"]
    assert all(item["viewer_has_liked"] is False for item in anonymous)


def test_feed_interest_filter(client, signed_up):
    music = signed_up("melody", interests=["Music", "Singing", "Dance"])
    coder = signed_up("coder", interests=["Coding", "Tech", "Gaming"])
    _create_post(client, music, "la la la")
    _create_post(client, coder, "print('hi')")

    response = client.get("/posts/feed", params={"interests": ["music"]})
    assert [item["username"] for item in response.json()["items"]] == ["melody"]

    both = client.get("/posts/feed", params=[("interests", "Tech"), ("interests", "Dance")]).json()["items"]
    assert {item["username"] for item in both} == {"melody", "coder"}

    unknown_only = client.get("/posts/feed", params={"interests": ["Knitting"]}).json()["items"]
    assert len(unknown_only) == 2


def test_following_only_feed(client, signed_up):
    alice = signed_up("alice")
    bob = signed_up("bob")
    carol = signed_up("carol")
    _create_post(client, alice, "from alice")
    _create_post(client, bob, "from bob")
    _create_post(client, carol, "from carol")

    client.post(f"/follows/{bob['user_id']}", headers=alice["headers"])
    client.post(f"/follows/{carol['user_id']}", headers=alice["headers"])
    request_id = client.get("/follows/requests", headers=bob["headers"]).json()["items"][0]["id"]
    client.post(f"/follows/requests/{request_id}/accept", headers=bob["headers"])

    feed = client.get("/posts/feed", params={"following_only": True}, headers=alice["headers"]).json()["items"]
    assert {item["content"] for item in feed} == {"from alice", "from bob"}

    anonymous = client.get("/posts/feed", params={"following_only": True})
    assert anonymous.status_code == 200
    assert anonymous.json()["items"] == []


def test_posts_by_user(client, signed_up):
    alice = signed_up("alice")
    bob = signed_up("bob")
    _create_post(client, alice, "one")
    _create_post(client, bob, "two")

    response = client.get("/posts/by-user/alice")
    assert [item["content"] for item in response.json()["items"]] == ["one"]
    assert client.get("/posts/by-user/nobody").status_code == 404


def test_like_is_idempotent_and_notifies_author(client, signed_up):
    alice = signed_up("alice")
    bob = signed_up("bob")
    post = _create_post(client, alice)

    for _ in range(2):
        liked = client.put(f"/posts/{post['id']}/like", json={"liked": True}, headers=bob["headers"])
        assert liked.status_code == 200
        assert liked.json()["like_count"] == 1
        assert liked.json()["viewer_has_liked"] is True

    client.put(f"/posts/{post['id']}/like", json={"liked": True}, headers=alice["headers"])

    with SessionLocal() as db:
        notifications = db.query(Notification).all()
        assert len(notifications) == 1
        assert notifications[0].type == "like"
        assert str(notifications[0].post_id) == post["id"]

    unliked = client.put(f"/posts/{post['id']}/like", json={"liked": False}, headers=bob["headers"])
    assert unliked.json()["like_count"] == 1
    assert unliked.json()["viewer_has_liked"] is False

    missing = client.put(
        "/posts/00000000-0000-0000-0000-000000000000/like",
        json={"liked": True},
        headers=bob["headers"],
    )
    assert missing.status_code == 404


def test_feed_socket_announces_posts_and_engagement(client, signed_up):
    alice = signed_up("alice")
    bob = signed_up("bob")

    with client.websocket_connect("/ws/feed") as websocket:
        websocket.send_text('{"type": "hello"}')
        assert websocket.receive_json() == {"type": "ready"}

        post = _create_post(client, alice, "broadcast me")
        created = websocket.receive_json()
        assert created["type"] == "post.created"
        assert created["post_id"] == post["id"]

        client.put(f"/posts/{post['id']}/like", json={"liked": True}, headers=bob["headers"])
        engagement = websocket.receive_json()
        assert engagement == {
            "type": "post.engagement",
            "post_id": post["id"],
            "like_count": 1,
            "comment_count": 0,
        }

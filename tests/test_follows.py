"""Integration tests for follow requests and follower lists."""
from __future__ import annotations

from uuid import UUID

from huddle.database import SessionLocal
from huddle.models import Follow, Notification


def _incoming(client, session):
    return client.get("/follows/requests", headers=session["headers"]).json()["items"]


def test_follow_request_accept_flow(client, signed_up):
    alice = signed_up("alice")
    bob = signed_up("bob")

    requested = client.post(f"/follows/{alice['user_id']}", headers=bob["headers"])
    assert requested.status_code == 201
    assert requested.json()["status"] == "requested"
    assert requested.json()["relationship"] == "pending"
    assert requested.json()["followers_count"] == 0

    repeat = client.post(f"/follows/{alice['user_id']}", headers=bob["headers"])
    assert repeat.json()["status"] == "noop"

    requests = _incoming(client, alice)
    assert len(requests) == 1
    assert requests[0]["follower"]["username"] == "bob"

    accepted = client.post(f"/follows/requests/{requests[0]['id']}/accept", headers=alice["headers"])
    assert accepted.status_code == 200
    assert accepted.json()["status"] == "accepted"

    twice = client.post(f"/follows/requests/{requests[0]['id']}/accept", headers=alice["headers"])
    assert twice.status_code == 409

    stats = client.get(f"/follows/stats/{alice['user_id']}", headers=bob["headers"]).json()
    assert stats["followers_count"] == 1
    assert stats["relationship"] == "accepted"

    followers = client.get(f"/follows/{alice['user_id']}/followers").json()["items"]
    assert [item["username"] for item in followers] == ["bob"]
    following = client.get(f"/follows/{bob['user_id']}/following").json()["items"]
    assert [item["username"] for item in following] == ["alice"]

    with SessionLocal() as db:
        kinds = sorted((n.type, str(n.recipient_id)) for n in db.query(Notification).all())
        assert kinds == sorted([("follow_request", alice["user_id"]), ("follow", bob["user_id"])])


def test_only_target_can_answer_request(client, signed_up):
    alice = signed_up("alice")
    bob = signed_up("bob")
    carol = signed_up("carol")

    client.post(f"/follows/{alice['user_id']}", headers=bob["headers"])
    request_id = _incoming(client, alice)[0]["id"]

    assert client.post(f"/follows/requests/{request_id}/accept", headers=carol["headers"]).status_code == 403
    assert client.post(f"/follows/requests/{request_id}/reject", headers=bob["headers"]).status_code == 403
    missing = client.post("/follows/requests/00000000-0000-0000-0000-000000000000/accept", headers=alice["headers"])
    assert missing.status_code == 404


def test_rejected_request_can_be_renewed(client, signed_up):
    alice = signed_up("alice")
    bob = signed_up("bob")

    client.post(f"/follows/{alice['user_id']}", headers=bob["headers"])
    request_id = _incoming(client, alice)[0]["id"]
    rejected = client.post(f"/follows/requests/{request_id}/reject", headers=alice["headers"])
    assert rejected.json()["status"] == "rejected"
    assert _incoming(client, alice) == []

    card = client.get("/profiles/alice", headers=bob["headers"]).json()
    assert card["relationship"] == "rejected"

    renewed = client.post(f"/follows/{alice['user_id']}", headers=bob["headers"])
    assert renewed.json()["status"] == "requested"
    assert len(_incoming(client, alice)) == 1

    with SessionLocal() as db:
        assert db.query(Follow).count() == 1
        assert db.query(Notification).filter(Notification.type == "follow_request").count() == 2


def test_follow_validation(client, signed_up):
    alice = signed_up("alice")

    assert client.post(f"/follows/{alice['user_id']}", headers=alice["headers"]).status_code == 400
    missing = client.post("/follows/00000000-0000-0000-0000-000000000000", headers=alice["headers"])
    assert missing.status_code == 404


def test_unfollow_and_remove_follower(client, signed_up):
    alice = signed_up("alice")
    bob = signed_up("bob")
    carol = signed_up("carol")

    for session in (bob, carol):
        client.post(f"/follows/{alice['user_id']}", headers=session["headers"])
    for request in _incoming(client, alice):
        client.post(f"/follows/requests/{request['id']}/accept", headers=alice["headers"])

    unfollowed = client.delete(f"/follows/{alice['user_id']}", headers=bob["headers"])
    assert unfollowed.status_code == 200
    assert unfollowed.json()["status"] == "unfollowed"
    assert unfollowed.json()["relationship"] == "none"

    again = client.delete(f"/follows/{alice['user_id']}", headers=bob["headers"])
    assert again.json()["status"] == "noop"

    removed = client.delete(f"/follows/followers/{carol['user_id']}", headers=alice["headers"])
    assert removed.json()["status"] == "removed"
    assert removed.json()["followers_count"] == 0

    with SessionLocal() as db:
        assert db.query(Follow).filter(Follow.following_id == UUID(alice["user_id"])).count() == 0

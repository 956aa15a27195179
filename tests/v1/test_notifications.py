# tests/v1/test_notifications.py
"""Tests for the notification inbox and comment fan-out over HTTP."""

from datetime import timedelta

from fastapi import status

from nurture_forum.db.time import utcnow
from nurture_forum.models import Notification

API = "/api/v1/forum"


def _inbox(client, headers):
    response = client.get(f"{API}/notifications", headers=headers)
    assert response.status_code == status.HTTP_200_OK
    return response.json()["notifications"]


def _comment(client, post, headers, parent_id=None):
    response = client.post(
        f"{API}/posts/{post.id}/comments",
        json={"content": "Following", "parent_id": parent_id},
        headers=headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()


def test_comment_notifies_post_author(client, post, viewer, author_headers, viewer_headers) -> None:
    comment = _comment(client, post, viewer_headers)

    inbox = _inbox(client, author_headers)
    assert len(inbox) == 1
    item = inbox[0]
    assert item["type"] == "reply"
    assert item["post_id"] == post.id
    assert item["comment_id"] == comment["id"]
    assert item["trigger_user_id"] == viewer.forum_uid
    assert item["trigger_username"] == "bilal"
    assert item["read"] is False
    assert item["post"] == {"title": post.title, "category": post.category}


def test_reply_notifies_parent_and_post_author(
    client, post, neighbour_headers, viewer_headers, author_headers
) -> None:
    parent = _comment(client, post, neighbour_headers)
    _comment(client, post, viewer_headers, parent_id=parent["id"])

    neighbour_inbox = _inbox(client, neighbour_headers)
    assert [n["type"] for n in neighbour_inbox] == ["comment_reply"]
    assert neighbour_inbox[0]["message"] == "replied to your comment"

    author_types = [n["type"] for n in _inbox(client, author_headers)]
    assert author_types == ["reply", "reply"]


def test_post_author_replying_to_own_comment_is_silent(
    client, db_session, post, author_headers
) -> None:
    parent = _comment(client, post, author_headers)
    _comment(client, post, author_headers, parent_id=parent["id"])
    assert db_session.query(Notification).count() == 0


def test_reply_to_post_author_comment_notifies_once(
    client, post, author_headers, viewer_headers
) -> None:
    parent = _comment(client, post, author_headers)
    _comment(client, post, viewer_headers, parent_id=parent["id"])

    inbox = _inbox(client, author_headers)
    assert [n["type"] for n in inbox] == ["comment_reply"]


def test_inbox_is_newest_first(client, db_session, author, viewer, author_headers) -> None:
    now = utcnow()
    db_session.add_all([
        Notification(
            user_id=author.forum_uid,
            type="comment_like",
            trigger_user_id=viewer.forum_uid,
            created_at=now - timedelta(hours=1),
        ),
        Notification(
            user_id=author.forum_uid,
            type="comment_like",
            trigger_user_id="uid-ghost",
            created_at=now,
        ),
        Notification(
            user_id=viewer.forum_uid,
            type="comment_like",
            trigger_user_id=author.forum_uid,
            created_at=now,
        ),
    ])
    db_session.flush()

    inbox = _inbox(client, author_headers)
    assert [n["trigger_user_id"] for n in inbox] == ["uid-ghost", viewer.forum_uid]
    assert inbox[0]["trigger_username"] == "Unknown"
    assert inbox[0]["post"] is None


def test_reaction_message_follows_current_reaction(
    client, post, author_headers, viewer_headers
) -> None:
    url = f"{API}/posts/{post.id}/react"
    client.post(url, json={"reaction": "like"}, headers=viewer_headers)
    assert [n["message"] for n in _inbox(client, author_headers)] == ["like"]

    client.post(url, json={"reaction": "celebrate"}, headers=viewer_headers)
    assert [n["message"] for n in _inbox(client, author_headers)] == ["celebrate", "celebrate"]

    client.post(url, json={"reaction": None}, headers=viewer_headers)
    assert [n["message"] for n in _inbox(client, author_headers)] == [None, None]


def test_mark_all_read(client, db_session, post, author_headers, viewer_headers) -> None:
    _comment(client, post, viewer_headers)
    client.post(f"{API}/posts/{post.id}/react", json={"reaction": "like"}, headers=viewer_headers)

    response = client.patch(f"{API}/notifications/read", headers=author_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"success": True, "updated": 2}
    assert all(n["read"] for n in _inbox(client, author_headers))

    again = client.patch(f"{API}/notifications/read", headers=author_headers)
    assert again.json()["updated"] == 0


def test_mark_read_only_touches_viewer(client, post, viewer_headers, author_headers) -> None:
    _comment(client, post, viewer_headers)
    client.patch(f"{API}/notifications/read", headers=viewer_headers)

    assert [n["read"] for n in _inbox(client, author_headers)] == [False]

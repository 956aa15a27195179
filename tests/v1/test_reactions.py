# tests/v1/test_reactions.py
"""Tests for reacting to posts."""

import pytest
from fastapi import status

from nurture_forum.models import Notification, PostReaction

API = "/api/v1/forum"


def _react(client, post, headers, reaction):
    return client.post(
        f"{API}/posts/{post.id}/react",
        json={"reaction": reaction},
        headers=headers,
    )


def _rows(db_session, post):
    return db_session.query(PostReaction).filter(PostReaction.post_id == post.id).all()


def test_add_reaction(client, db_session, post, viewer_headers) -> None:
    response = _react(client, post, viewer_headers, "support")
    assert response.status_code == status.HTTP_200_OK

    data = response.json()
    assert data["reacted"] is True
    assert data["reaction"] == "support"
    assert data["my_reaction"] == "support"
    assert data["total"] == 1
    assert data["counts"] == {
        "like": 0,
        "support": 1,
        "celebrate": 0,
        "love": 0,
        "insightful": 0,
    }


def test_same_reaction_twice_restores_baseline(client, db_session, post, viewer_headers) -> None:
    _react(client, post, viewer_headers, "like")
    response = _react(client, post, viewer_headers, "like")

    data = response.json()
    assert data["reacted"] is False
    assert data["my_reaction"] is None
    assert data["total"] == 0
    assert _rows(db_session, post) == []


def test_switching_reaction_keeps_one_row(client, db_session, post, viewer_headers) -> None:
    _react(client, post, viewer_headers, "like")
    response = _react(client, post, viewer_headers, "celebrate")

    data = response.json()
    assert data["my_reaction"] == "celebrate"
    assert data["counts"]["like"] == 0
    assert data["counts"]["celebrate"] == 1
    rows = _rows(db_session, post)
    assert [row.reaction_type for row in rows] == ["celebrate"]


@pytest.mark.parametrize("alias", ["heart", "care", "HEART"])
def test_legacy_names_map_to_love(client, post, viewer_headers, alias) -> None:
    data = _react(client, post, viewer_headers, alias).json()
    assert data["reaction"] == "love"
    assert data["my_reaction"] == "love"


def test_heart_after_love_toggles_off(client, post, viewer_headers) -> None:
    _react(client, post, viewer_headers, "love")
    data = _react(client, post, viewer_headers, "heart").json()
    assert data["reacted"] is False
    assert data["total"] == 0


@pytest.mark.parametrize("empty", [None, ""])
def test_empty_reaction_removes(client, db_session, post, viewer_headers, empty) -> None:
    _react(client, post, viewer_headers, "insightful")
    data = _react(client, post, viewer_headers, empty).json()
    assert data["reacted"] is False
    assert data["reaction"] is None
    assert _rows(db_session, post) == []


def test_empty_reaction_without_existing_is_noop(client, db_session, post, viewer_headers) -> None:
    data = _react(client, post, viewer_headers, None).json()
    assert data["reacted"] is False
    assert data["total"] == 0


def test_unknown_reaction_is_rejected(client, db_session, post, viewer_headers) -> None:
    response = _react(client, post, viewer_headers, "angry")
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Invalid reaction"
    assert _rows(db_session, post) == []


def test_react_to_missing_post(client, viewer_headers) -> None:
    response = client.post(
        f"{API}/posts/99999/react",
        json={"reaction": "like"},
        headers=viewer_headers,
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_counts_across_users(client, post, viewer_headers, neighbour_headers, author_headers) -> None:
    _react(client, post, viewer_headers, "like")
    _react(client, post, neighbour_headers, "like")
    _react(client, post, author_headers, "love")

    response = client.get(f"{API}/posts/{post.id}/reactions", headers=viewer_headers)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["counts"]["like"] == 2
    assert data["counts"]["love"] == 1
    assert data["total"] == 3
    assert data["my_reactions"] == ["like"]


class TestReactionNotifications:
    """Reaction changes and the notifications they produce."""

    def _notifications(self, db_session, recipient):
        return (
            db_session.query(Notification)
            .filter(Notification.user_id == recipient.forum_uid)
            .all()
        )

    def test_new_reaction_notifies_author(
        self, client, db_session, post, author, viewer, viewer_headers
    ) -> None:
        _react(client, post, viewer_headers, "like")
        notifications = self._notifications(db_session, author)
        assert len(notifications) == 1
        assert notifications[0].type == "reaction"
        assert notifications[0].post_id == post.id
        assert notifications[0].trigger_user_id == viewer.forum_uid

    def test_changing_reaction_notifies_again(
        self, client, db_session, post, author, viewer_headers
    ) -> None:
        _react(client, post, viewer_headers, "like")
        _react(client, post, viewer_headers, "love")
        assert len(self._notifications(db_session, author)) == 2

    def test_removing_reaction_does_not_notify(
        self, client, db_session, post, author, viewer_headers
    ) -> None:
        _react(client, post, viewer_headers, "like")
        _react(client, post, viewer_headers, "like")
        assert len(self._notifications(db_session, author)) == 1

    def test_reacting_to_own_post_does_not_notify(
        self, client, db_session, post, author, author_headers
    ) -> None:
        _react(client, post, author_headers, "celebrate")
        assert self._notifications(db_session, author) == []

    def test_failed_notification_keeps_reaction(
        self, client, db_session, monkeypatch, caplog, post, author, viewer_headers
    ) -> None:
        from nurture_forum.services import notifications

        # Violates the notification type constraint, so the insert fails.
        monkeypatch.setattr(notifications, "NOTIFICATION_REACTION", "shout")

        response = _react(client, post, viewer_headers, "like")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["my_reaction"] == "like"
        assert len(_rows(db_session, post)) == 1
        assert self._notifications(db_session, author) == []
        assert "Failed to insert shout notification" in caplog.text


class TestConcurrentReactions:
    """A concurrent request from the same user stores a reaction first."""

    def _race(self, db_session, monkeypatch, post, viewer, stored_kind):
        from sqlalchemy import insert

        from nurture_forum.services.reactions import ReactionService

        db_session.execute(
            insert(PostReaction).values(
                post_id=post.id, user_id=viewer.forum_uid, reaction_type=stored_kind
            )
        )
        # Our read happened before the other request's insert landed.
        monkeypatch.setattr(
            ReactionService, "_stored_reaction", lambda self, post_id, viewer_id: None
        )
        return ReactionService(db_session)

    def test_same_kind_is_already_in_place(
        self, db_session, monkeypatch, post, author, viewer
    ) -> None:
        service = self._race(db_session, monkeypatch, post, viewer, "like")

        outcome = service.react(post, viewer.forum_uid, "like")
        assert outcome.reacted is True
        assert outcome.my_reaction == outcome.reaction == "like"
        assert outcome.total == 1
        assert db_session.query(Notification).count() == 0

    def test_other_kind_is_replaced(self, db_session, monkeypatch, post, author, viewer) -> None:
        service = self._race(db_session, monkeypatch, post, viewer, "love")

        outcome = service.react(post, viewer.forum_uid, "like")
        assert outcome.my_reaction == outcome.reaction == "like"
        assert outcome.counts["love"] == 0
        assert outcome.counts["like"] == 1
        assert [row.reaction_type for row in _rows(db_session, post)] == ["like"]
        notifications = db_session.query(Notification).all()
        assert [n.user_id for n in notifications] == [author.forum_uid]

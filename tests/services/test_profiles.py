# tests/services/test_profiles.py
"""Tests for resolving author ids into display identities."""

from nurture_forum.models import Profile, User
from nurture_forum.services.profiles import (
    DisplayIdentity,
    ProfileResolver,
    post_author_display,
)


def test_profiles_take_precedence(db_session, author, profiles) -> None:
    profile = db_session.get(Profile, author.forum_uid)
    profile.username = "amina (profile)"
    db_session.flush()

    resolved = ProfileResolver(db_session).resolve([author.forum_uid])
    assert resolved[author.forum_uid].username == "amina (profile)"


def test_missing_profiles_fall_back_to_accounts(db_session, author, viewer) -> None:
    db_session.add(Profile(id=viewer.forum_uid, username="bilal", current_city="Karachi"))
    db_session.flush()

    resolved = ProfileResolver(db_session).resolve(
        [author.forum_uid, viewer.forum_uid, "uid-nobody", None, author.forum_uid]
    )
    assert resolved == {
        author.forum_uid: DisplayIdentity("amina", "Lahore"),
        viewer.forum_uid: DisplayIdentity("bilal", "Karachi"),
    }


def test_resolve_nothing(db_session) -> None:
    assert ProfileResolver(db_session).resolve([]) == {}


def test_sync_creates_and_updates_profile(db_session, author) -> None:
    resolver = ProfileResolver(db_session)
    resolver.sync(author)
    assert db_session.get(Profile, author.forum_uid).username == "amina"

    author.current_city = " Quetta "
    db_session.flush()
    resolver.sync(author)
    assert db_session.get(Profile, author.forum_uid).current_city == "Quetta"


def test_sync_gives_nameless_account_a_default(db_session) -> None:
    user = User(username=None, current_city=None, forum_uid="uid-nameless")
    db_session.add(user)
    db_session.flush()

    ProfileResolver(db_session).sync(user)
    assert db_session.get(Profile, "uid-nameless").username == "Anonymous User"


class TestPostAuthorDisplay:
    def test_anonymous(self):
        identity = DisplayIdentity("amina", "Lahore")
        assert post_author_display(identity, is_anonymous=True, post_city="Lahore") == (
            "Anonymous",
            None,
        )

    def test_post_city_wins(self):
        identity = DisplayIdentity("amina", "Lahore")
        assert post_author_display(identity, is_anonymous=False, post_city="Karachi") == (
            "amina",
            "Karachi",
        )

    def test_unknown(self):
        assert post_author_display(None, is_anonymous=False, post_city=None) == ("Unknown", None)

# src/nurture_forum/services/profiles.py
"""Resolution of forum author ids into display identities."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from nurture_forum.models import Profile, User

logger = logging.getLogger(__name__)

ANONYMOUS_NAME = "Anonymous"
UNKNOWN_NAME = "Unknown"
DEFAULT_PROFILE_NAME = "Anonymous User"


@dataclass(frozen=True)
class DisplayIdentity:
    """Username and city shown next to forum content."""

    username: str | None = None
    city: str | None = None


class ProfileResolver:
    """Batch lookup of display identities for one request.

    Nothing is cached between requests: each resolver is built for a single
    session and discarded with it.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def resolve(self, user_ids: Iterable[str | None]) -> dict[str, DisplayIdentity]:
        """Map each distinct author id to its display identity.

        Profiles are the primary source. Authors missing from the profile table
        fall back to the account record linked through ``forum_uid``. Ids found
        in neither are absent from the result.
        """
        wanted = {user_id for user_id in user_ids if user_id}
        if not wanted:
            return {}

        identities: dict[str, DisplayIdentity] = {}
        for profile in self.db.query(Profile).filter(Profile.id.in_(wanted)).all():
            identities[profile.id] = DisplayIdentity(profile.username, profile.current_city)

        missing = wanted - identities.keys()
        if missing:
            logger.debug("Falling back to account records for %d authors", len(missing))
            for user in self.db.query(User).filter(User.forum_uid.in_(missing)).all():
                identities[user.forum_uid] = DisplayIdentity(user.username, user.city)

        return identities

    def sync(self, user: User) -> None:
        """Copy the account's username and city onto its forum profile.

        Best-effort: a failure is logged and the request carries on with
        whatever profile is already stored.
        """
        if not user.forum_uid:
            return
        try:
            with self.db.begin_nested():
                profile = self.db.get(Profile, user.forum_uid)
                if profile is None:
                    profile = Profile(id=user.forum_uid)
                    self.db.add(profile)
                profile.username = user.username or DEFAULT_PROFILE_NAME
                profile.current_city = user.city
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.warning("Profile sync failed for %s", user.forum_uid, exc_info=True)


def post_author_display(
    identity: DisplayIdentity | None,
    *,
    is_anonymous: bool,
    post_city: str | None,
) -> tuple[str, str | None]:
    """Return the (username, city) pair shown on a post."""
    if is_anonymous:
        return ANONYMOUS_NAME, None
    identity = identity or DisplayIdentity()
    return identity.username or UNKNOWN_NAME, post_city or identity.city

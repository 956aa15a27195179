# src/nurture_forum/models/user.py
"""Models for account records and their public forum profiles."""

from __future__ import annotations

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from nurture_forum.db.session import Base


class User(Base):
    """Authoritative account record owned by the account service.

    The forum only reads it, except for assigning ``forum_uid`` the first time
    an account touches the forum.
    """

    __tablename__ = "app_user"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str | None] = mapped_column(Text, nullable=True)
    current_city: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Identifier under which the account authors forum content; links to Profile.id.
    forum_uid: Mapped[str | None] = mapped_column(String(36), unique=True, nullable=True)

    @property
    def city(self) -> str | None:
        """Return the declared city with surrounding whitespace removed."""
        if self.current_city is None:
            return None
        return self.current_city.strip() or None


class Profile(Base):
    """Public display identity keyed by forum uid."""

    __tablename__ = "profile"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    username: Mapped[str | None] = mapped_column(Text, nullable=True)
    current_city: Mapped[str | None] = mapped_column(Text, nullable=True)

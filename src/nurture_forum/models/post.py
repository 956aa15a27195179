# src/nurture_forum/models/post.py
"""SQLAlchemy models for posts and bookmarks."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from nurture_forum.db.session import Base
from nurture_forum.db.time import utcnow

POST_TYPES = ("query", "insight")
FEED_GLOBAL = "global"
FEED_CITY = "city"
FEED_TYPES = (FEED_GLOBAL, FEED_CITY)

DELETED_TITLE = "[This post was deleted]"
DELETED_CONTENT = "[This post was removed by the author]"


class Post(Base):
    """A forum post, visible either forum-wide or to one city."""

    __tablename__ = "post"
    __table_args__ = (
        CheckConstraint("feed_type IN ('global', 'city')", name="ck_post_feed_type"),
        # City is set exactly when the post is scoped to a city feed.
        CheckConstraint(
            "(feed_type = 'city' AND city IS NOT NULL) OR (feed_type = 'global' AND city IS NULL)",
            name="ck_post_city_scope",
        ),
        Index("ix_post_feed_created", "feed_type", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    # Comma separated tags; the first-class filter value for feeds.
    category: Mapped[str] = mapped_column(Text, nullable=False, default="")
    media_urls: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    is_anonymous: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    post_type: Mapped[str | None] = mapped_column(String(16), nullable=True)
    feed_type: Mapped[str] = mapped_column(String(16), nullable=False, default=FEED_GLOBAL)
    city: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class SavedPost(Base):
    """Bookmark of a post by a user."""

    __tablename__ = "saved_post"

    # Composite primary key keeps one bookmark per user per post.
    post_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("post.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

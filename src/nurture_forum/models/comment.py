# src/nurture_forum/models/comment.py
"""Models for threaded comments and comment likes."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from nurture_forum.db.session import Base
from nurture_forum.db.time import utcnow


class Comment(Base):
    """Comment on a post, optionally replying to another comment of the same post."""

    __tablename__ = "comment"
    __table_args__ = (Index("ix_comment_post_created", "post_id", "created_at"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("post.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[str] = mapped_column(String(36), nullable=False)
    # Replies whose parent is removed surface as top-level comments.
    parent_id: Mapped[int | None] = mapped_column(
        BigInteger,
        ForeignKey("comment.id", ondelete="SET NULL"),
        nullable=True,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class CommentLike(Base):
    """Per-user like on a comment; the row existing means liked."""

    __tablename__ = "comment_like"
    __table_args__ = (Index("ix_comment_like_comment_id", "comment_id"),)

    comment_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("comment.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

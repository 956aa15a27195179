# src/nurture_forum/models/notification.py
"""Notification records produced by forum activity."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
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

NOTIFICATION_REACTION = "reaction"
NOTIFICATION_COMMENT_REPLY = "comment_reply"
NOTIFICATION_REPLY = "reply"
NOTIFICATION_COMMENT_LIKE = "comment_like"


class Notification(Base):
    """Pull-only notification addressed to one recipient."""

    __tablename__ = "notification"
    __table_args__ = (
        CheckConstraint(
            "type IN ('reaction', 'comment_reply', 'reply', 'comment_like')",
            name="ck_notification_type",
        ),
        Index("ix_notification_recipient_created", "user_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Recipient.
    user_id: Mapped[str] = mapped_column(String(36), nullable=False)
    type: Mapped[str] = mapped_column(String(16), nullable=False)
    post_id: Mapped[int | None] = mapped_column(
        BigInteger,
        ForeignKey("post.id", ondelete="SET NULL"),
        nullable=True,
    )
    comment_id: Mapped[int | None] = mapped_column(
        BigInteger,
        ForeignKey("comment.id", ondelete="SET NULL"),
        nullable=True,
    )
    trigger_user_id: Mapped[str] = mapped_column(String(36), nullable=False)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

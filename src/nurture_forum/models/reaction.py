# src/nurture_forum/models/reaction.py
"""Models capturing reactions on posts."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, CheckConstraint, DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from nurture_forum.db.session import Base
from nurture_forum.db.time import utcnow

REACTION_TYPES = ("like", "support", "celebrate", "love", "insightful")

# Older clients still send these names.
REACTION_ALIASES = {"heart": "love", "care": "love"}


class PostReaction(Base):
    """Per-user reaction on a post."""

    __tablename__ = "post_reaction"
    __table_args__ = (
        CheckConstraint(
            "reaction_type IN ('like', 'support', 'celebrate', 'love', 'insightful')",
            name="ck_post_reaction_type",
        ),
        Index("ix_post_reaction_post_id", "post_id"),
    )

    # Composite primary key prevents a second reaction from the same user.
    post_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("post.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[str] = mapped_column(String(36), primary_key=True)

    reaction_type: Mapped[str] = mapped_column(String(16), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

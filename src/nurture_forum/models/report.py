# src/nurture_forum/models/report.py
"""Models recording user reports against posts and comments."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, CheckConstraint, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from nurture_forum.db.session import Base
from nurture_forum.db.time import utcnow

REPORT_TARGET_POST = "post"
REPORT_TARGET_COMMENT = "comment"
REPORT_TARGET_TYPES = (REPORT_TARGET_POST, REPORT_TARGET_COMMENT)


class Report(Base):
    """A single report; repeated reports by the same user are kept as separate rows."""

    __tablename__ = "report"
    __table_args__ = (
        CheckConstraint("target_type IN ('post', 'comment')", name="ck_report_target_type"),
        Index("ix_report_target", "target_type", "target_id"),
        Index("ix_report_reporter", "reporter_id", "target_type"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    target_type: Mapped[str] = mapped_column(String(16), nullable=False)
    # No foreign key: the target may already have been removed.
    target_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    reporter_id: Mapped[str] = mapped_column(String(36), nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

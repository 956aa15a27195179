# src/nurture_forum/services/moderation.py
"""Report intake and the automatic removal threshold."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from nurture_forum.core.errors import ForumValidationError
from nurture_forum.core.settings import settings
from nurture_forum.models import Report
from nurture_forum.models.report import REPORT_TARGET_POST, REPORT_TARGET_TYPES
from nurture_forum.schemas.report import ReportCreate
from nurture_forum.services.comments import purge_comment
from nurture_forum.services.posts import purge_post

logger = logging.getLogger(__name__)

INVALID_REPORT_MESSAGE = "Invalid report: need target_type (post/comment), target_id, reason"


@dataclass
class ReportOutcome:
    """A stored report with the report count of its target."""

    report: Report
    total_reports: int
    deleted: bool


class ModerationService:
    """Records reports and removes targets that reach the threshold.

    Removal is a hard delete and is not transactional with the report insert:
    two reports racing past the threshold both attempt the delete, and the
    second one simply finds nothing to remove.
    """

    def __init__(self, db: Session, *, threshold: int | None = None) -> None:
        self.db = db
        self.threshold = threshold if threshold is not None else settings.report_delete_threshold

    @staticmethod
    def validate(report_data: ReportCreate) -> tuple[str, int, str]:
        """Return ``(target_type, target_id, reason)`` or raise ForumValidationError."""
        reason = (report_data.reason or "").strip()
        if (
            report_data.target_type not in REPORT_TARGET_TYPES
            or not report_data.target_id
            or not reason
        ):
            raise ForumValidationError(INVALID_REPORT_MESSAGE)
        return report_data.target_type, report_data.target_id, reason

    def submit(self, reporter_id: str, report_data: ReportCreate) -> ReportOutcome:
        """Store a report and apply the removal threshold to its target."""
        target_type, target_id, reason = self.validate(report_data)

        report = Report(
            target_type=target_type,
            target_id=target_id,
            reporter_id=reporter_id,
            reason=reason,
        )
        self.db.add(report)
        self.db.commit()
        self.db.refresh(report)

        total = self.count_reports(target_type, target_id)
        deleted = False
        if total >= self.threshold:
            deleted = self.remove_target(target_type, target_id)
        return ReportOutcome(report=report, total_reports=total, deleted=deleted)

    def count_reports(self, target_type: str, target_id: int) -> int:
        return (
            self.db.query(func.count(Report.id))
            .filter(Report.target_type == target_type, Report.target_id == target_id)
            .scalar()
            or 0
        )

    def remove_target(self, target_type: str, target_id: int) -> bool:
        """Hard-delete a reported post or comment.

        Returns False if the delete failed; the failure is logged only.
        """
        try:
            if target_type == REPORT_TARGET_POST:
                removed = purge_post(self.db, target_id)
            else:
                removed = purge_comment(self.db, target_id)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Auto-delete failed for reported %s %s", target_type, target_id)
            return False

        if removed:
            logger.warning("Removed %s %s after reaching the report threshold", target_type, target_id)
        else:
            logger.info("Reported %s %s was already removed", target_type, target_id)
        return True

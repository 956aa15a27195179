# src/nurture_forum/api/v1/endpoints/reports.py
"""Reporting endpoint for posts and comments."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from nurture_forum.api.v1.dependencies import CurrentUserDep, ModerationServiceDep
from nurture_forum.core.errors import ForumValidationError
from nurture_forum.schemas.report import ReportCreate, ReportResponse

router = APIRouter(prefix="/reports", tags=["moderation"])


@router.post("", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
async def create_report(
    report_data: ReportCreate,
    current_user: CurrentUserDep,
    moderation: ModerationServiceDep,
) -> ReportResponse:
    """Report a post or comment.

    Once a target collects enough reports it is removed permanently; the
    response says whether that happened on this report.
    """
    try:
        outcome = moderation.submit(current_user.forum_uid, report_data)
    except ForumValidationError as err:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err)) from err

    report = outcome.report
    return ReportResponse(
        id=report.id,
        target_type=report.target_type,
        target_id=report.target_id,
        reporter_id=report.reporter_id,
        reason=report.reason,
        created_at=report.created_at,
        total_reports=outcome.total_reports,
        deleted=outcome.deleted,
    )

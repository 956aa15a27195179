# src/nurture_forum/schemas/report.py
"""Report-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class ReportCreate(BaseModel):
    """Schema for reporting a post or a comment.

    Fields are optional here; the moderation service rejects incomplete reports
    with a single descriptive message.
    """

    target_type: str | None = None
    target_id: int | None = None
    reason: str | None = None


class ReportResponse(BaseModel):
    """Stored report plus the moderation outcome for its target."""

    id: int
    target_type: str
    target_id: int
    reporter_id: str
    reason: str
    created_at: datetime
    total_reports: int
    deleted: bool

    model_config = ConfigDict(from_attributes=True)

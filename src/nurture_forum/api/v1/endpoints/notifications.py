# src/nurture_forum/api/v1/endpoints/notifications.py
"""Notification inbox endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from nurture_forum.api.v1.dependencies import CurrentUserDep, NotificationInboxDep
from nurture_forum.schemas.notification import MarkReadResponse, NotificationList

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationList)
async def list_notifications(
    current_user: CurrentUserDep,
    inbox: NotificationInboxDep,
) -> NotificationList:
    """Return the caller's notifications, newest first."""
    return NotificationList(notifications=inbox.list_for(current_user.forum_uid))


@router.patch("/read", response_model=MarkReadResponse)
async def mark_notifications_read(
    current_user: CurrentUserDep,
    inbox: NotificationInboxDep,
) -> MarkReadResponse:
    """Mark all of the caller's notifications as read."""
    return MarkReadResponse(updated=inbox.mark_all_read(current_user.forum_uid))

# src/nurture_forum/schemas/notification.py
"""Notification-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel


class NotificationPost(BaseModel):
    """Post summary attached to a notification."""

    title: str
    category: str


class NotificationResponse(BaseModel):
    """A notification as listed for its recipient."""

    id: int
    type: str
    post_id: int | None
    comment_id: int | None
    trigger_user_id: str
    trigger_username: str
    read: bool
    created_at: datetime
    message: str | None = None
    post: NotificationPost | None = None


class NotificationList(BaseModel):
    """All notifications of the viewer, newest first."""

    notifications: list[NotificationResponse]


class MarkReadResponse(BaseModel):
    """Result of marking the viewer's notifications as read."""

    success: bool = True
    updated: int = 0

# src/nurture_forum/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .comments import router as comments_router
from .feed import router as feed_router
from .notifications import router as notifications_router
from .posts import router as posts_router
from .reports import router as reports_router

__all__ = [
    "comments_router",
    "feed_router",
    "notifications_router",
    "posts_router",
    "reports_router",
]

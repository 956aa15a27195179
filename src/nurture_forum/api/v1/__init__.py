"""Version 1 API endpoints, mounted under the forum namespace."""

from fastapi import APIRouter

from .endpoints import (
    comments_router,
    feed_router,
    notifications_router,
    posts_router,
    reports_router,
)

forum_router = APIRouter(prefix="/forum")
forum_router.include_router(posts_router)
forum_router.include_router(feed_router)
forum_router.include_router(comments_router)
forum_router.include_router(reports_router)
forum_router.include_router(notifications_router)

__all__ = [
    "forum_router",
    "comments_router",
    "feed_router",
    "notifications_router",
    "posts_router",
    "reports_router",
]

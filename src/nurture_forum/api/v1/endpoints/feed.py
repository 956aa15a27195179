# src/nurture_forum/api/v1/endpoints/feed.py
"""Feed endpoints for listing posts."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, status

from nurture_forum.api.v1.dependencies import CurrentUserDep, FeedServiceDep
from nurture_forum.schemas.post import FeedPage
from nurture_forum.services.feed import Page

router = APIRouter(tags=["feed"])


def _to_response(page: Page) -> FeedPage:
    return FeedPage(posts=page.posts, has_more=page.has_more, total=page.total, page=page.page)


@router.get("/feed/global", response_model=FeedPage)
async def get_global_feed(
    current_user: CurrentUserDep,
    feed: FeedServiceDep,
    page: int = Query(1, ge=1, description="1-based page number"),
    category: str | None = Query(None, description='Category filter; "all" disables it'),
) -> FeedPage:
    """Return forum-wide posts, newest first, minus posts the caller reported."""
    return _to_response(feed.global_feed(current_user.forum_uid, page=page, category=category))


@router.get("/feed/city", response_model=FeedPage)
async def get_city_feed(
    current_user: CurrentUserDep,
    feed: FeedServiceDep,
    page: int = Query(1, ge=1, description="1-based page number"),
    category: str | None = Query(None, description='Category filter; "all" disables it'),
) -> FeedPage:
    """Return posts from the caller's city, newest first.

    Raises:
        HTTPException: 400 if the caller has not set a city.
    """
    city = current_user.city
    if not city:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please set your city in profile first",
        )
    return _to_response(
        feed.city_feed(current_user.forum_uid, city, page=page, category=category)
    )


@router.get("/saved-posts", response_model=FeedPage)
async def get_saved_posts(
    current_user: CurrentUserDep,
    feed: FeedServiceDep,
    page: int = Query(1, ge=1, description="1-based page number"),
) -> FeedPage:
    """Return the caller's saved posts, most recently saved first."""
    return _to_response(feed.saved_posts(current_user.forum_uid, page=page))

# src/nurture_forum/services/feed.py
"""Paginated feeds and bookmarks."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from nurture_forum.core.settings import settings
from nurture_forum.models import Post, Report, SavedPost
from nurture_forum.models.post import FEED_CITY, FEED_GLOBAL
from nurture_forum.models.report import REPORT_TARGET_POST
from nurture_forum.schemas.post import EnrichedPost
from nurture_forum.services.enrichment import EnrichmentPipeline

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "all"


@dataclass
class Page:
    """A page of enriched posts."""

    posts: list[EnrichedPost]
    has_more: bool
    total: int
    page: int


class FeedService:
    """Builds the global feed, the city feed and the bookmark list.

    Pages are 1-based with a fixed size. A page is considered to have more
    entries after it when it came back full.
    """

    def __init__(
        self,
        db: Session,
        pipeline: EnrichmentPipeline | None = None,
        *,
        page_size: int | None = None,
    ) -> None:
        self.db = db
        self.pipeline = pipeline or EnrichmentPipeline(db)
        self.page_size = page_size if page_size is not None else settings.feed_page_size

    def global_feed(self, viewer_id: str, *, page: int = 1, category: str | None = None) -> Page:
        query = self._feed_query(viewer_id, category).filter(Post.feed_type == FEED_GLOBAL)
        return self._paginate(query, viewer_id, page)

    def city_feed(
        self,
        viewer_id: str,
        city: str,
        *,
        page: int = 1,
        category: str | None = None,
    ) -> Page:
        query = self._feed_query(viewer_id, category).filter(
            Post.feed_type == FEED_CITY,
            Post.city == city,
        )
        return self._paginate(query, viewer_id, page)

    def saved_posts(self, viewer_id: str, *, page: int = 1) -> Page:
        """Return the viewer's bookmarks, most recently saved first."""
        saved_query = self.db.query(SavedPost).filter(SavedPost.user_id == viewer_id)
        total = saved_query.count()
        saved = (
            saved_query.order_by(SavedPost.created_at.desc(), SavedPost.post_id.desc())
            .offset(self._offset(page))
            .limit(self.page_size)
            .all()
        )
        if not saved:
            return Page(posts=[], has_more=False, total=total, page=page)

        saved_at = {entry.post_id: entry.created_at for entry in saved}
        posts = (
            self.db.query(Post)
            .filter(Post.id.in_(saved_at.keys()), Post.is_deleted.is_(False))
            .all()
        )
        by_id = {post.id: post for post in posts}
        ordered = [by_id[entry.post_id] for entry in saved if entry.post_id in by_id]
        enriched = self.pipeline.enrich(ordered, viewer_id, saved_at=saved_at)
        return Page(
            posts=enriched,
            has_more=len(saved) == self.page_size,
            total=total,
            page=page,
        )

    def toggle_bookmark(self, post_id: int, viewer_id: str) -> bool:
        """Save the post for the viewer, or unsave it if already saved.

        Returns whether the post is saved afterwards.
        """
        existing = self.db.get(SavedPost, (post_id, viewer_id))
        if existing is not None:
            self.db.delete(existing)
            self.db.commit()
            return False

        try:
            with self.db.begin_nested():
                self.db.add(SavedPost(post_id=post_id, user_id=viewer_id))
        except IntegrityError:
            logger.info("Bookmark of post %s by %s already stored", post_id, viewer_id)
        self.db.commit()
        return True

    def _feed_query(self, viewer_id: str, category: str | None) -> Query[Post]:
        reported = select(Report.target_id).where(
            Report.reporter_id == viewer_id,
            Report.target_type == REPORT_TARGET_POST,
        )
        query = self.db.query(Post).filter(
            Post.is_deleted.is_(False),
            Post.id.not_in(reported),
        )
        if category and category != ALL_CATEGORIES:
            query = query.filter(Post.category == category)
        return query

    def _paginate(self, query: Query[Post], viewer_id: str, page: int) -> Page:
        total = query.count()
        posts = (
            query.order_by(Post.created_at.desc(), Post.id.desc())
            .offset(self._offset(page))
            .limit(self.page_size)
            .all()
        )
        return Page(
            posts=self.pipeline.enrich(posts, viewer_id),
            has_more=len(posts) == self.page_size,
            total=total,
            page=page,
        )

    def _offset(self, page: int) -> int:
        return (max(page, 1) - 1) * self.page_size

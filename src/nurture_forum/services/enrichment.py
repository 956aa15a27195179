# src/nurture_forum/services/enrichment.py
"""Attach per-viewer social state to a page of posts."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime, timedelta

from sqlalchemy import func
from sqlalchemy.orm import Session

from nurture_forum.core.settings import settings
from nurture_forum.db.time import ensure_aware, utcnow
from nurture_forum.models import Comment, Post, PostReaction
from nurture_forum.models.reaction import REACTION_TYPES
from nurture_forum.schemas.post import EnrichedPost, PostResponse
from nurture_forum.services.profiles import ProfileResolver, post_author_display


def empty_reaction_counts() -> dict[str, int]:
    """Return a tally with every reaction kind at zero."""
    return {kind: 0 for kind in REACTION_TYPES}


def remaining_edit_window(
    created_at: datetime,
    *,
    now: datetime,
    window: timedelta,
) -> timedelta:
    """Return how much of the edit window is left, never negative."""
    elapsed = now - ensure_aware(created_at)
    return max(timedelta(0), window - elapsed)


class EnrichmentPipeline:
    """Decorates raw posts with reactions, comment counts and ownership.

    All lookups for a page are batched: one query for profiles (plus the
    fallback), one for reaction tallies, one for the viewer's reactions and one
    for comment counts. Store errors propagate so that a page is either fully
    enriched or not returned at all.
    """

    def __init__(
        self,
        db: Session,
        profiles: ProfileResolver | None = None,
        *,
        clock: Callable[[], datetime] = utcnow,
        edit_window: timedelta | None = None,
    ) -> None:
        self.db = db
        self.profiles = profiles or ProfileResolver(db)
        self.clock = clock
        self.edit_window = (
            edit_window
            if edit_window is not None
            else timedelta(minutes=settings.edit_window_minutes)
        )

    def enrich(
        self,
        posts: Sequence[Post],
        viewer_id: str,
        *,
        saved_at: dict[int, datetime] | None = None,
    ) -> list[EnrichedPost]:
        """Return ``posts`` enriched for ``viewer_id``, in the same order."""
        if not posts:
            return []

        post_ids = [post.id for post in posts]
        identities = self.profiles.resolve(post.user_id for post in posts)
        tallies = self._reaction_tallies(post_ids)
        mine = self._viewer_reactions(post_ids, viewer_id)
        comment_counts = self._comment_counts(post_ids)
        now = self.clock()
        saved_at = saved_at or {}

        enriched: list[EnrichedPost] = []
        for post in posts:
            username, city = post_author_display(
                identities.get(post.user_id),
                is_anonymous=post.is_anonymous,
                post_city=post.city,
            )
            counts = tallies.get(post.id, empty_reaction_counts())
            is_own = post.user_id == viewer_id
            remaining = (
                remaining_edit_window(post.created_at, now=now, window=self.edit_window)
                if is_own
                else timedelta(0)
            )

            data = PostResponse.model_validate(post).model_dump()
            data.update(
                city=city,
                username=username,
                reaction_counts=counts,
                total_reactions=sum(counts.values()),
                my_reactions=mine.get(post.id, []),
                comment_count=comment_counts.get(post.id, 0),
                is_own_post=is_own,
                time_remaining=int(remaining.total_seconds() * 1000),
                can_edit_undo_delete=is_own and remaining > timedelta(0),
                saved_at=saved_at.get(post.id),
            )
            enriched.append(EnrichedPost(**data))
        return enriched

    def _reaction_tallies(self, post_ids: list[int]) -> dict[int, dict[str, int]]:
        rows = (
            self.db.query(PostReaction.post_id, PostReaction.reaction_type, func.count())
            .filter(PostReaction.post_id.in_(post_ids))
            .group_by(PostReaction.post_id, PostReaction.reaction_type)
            .all()
        )
        tallies: dict[int, dict[str, int]] = {}
        for post_id, kind, count in rows:
            counts = tallies.setdefault(post_id, empty_reaction_counts())
            if kind in counts:
                counts[kind] = count
        return tallies

    def _viewer_reactions(self, post_ids: list[int], viewer_id: str) -> dict[int, list[str]]:
        rows = (
            self.db.query(PostReaction.post_id, PostReaction.reaction_type)
            .filter(
                PostReaction.post_id.in_(post_ids),
                PostReaction.user_id == viewer_id,
            )
            .all()
        )
        mine: dict[int, list[str]] = {}
        for post_id, kind in rows:
            mine.setdefault(post_id, []).append(kind)
        return mine

    def _comment_counts(self, post_ids: list[int]) -> dict[int, int]:
        rows = (
            self.db.query(Comment.post_id, func.count(Comment.id))
            .filter(Comment.post_id.in_(post_ids))
            .group_by(Comment.post_id)
            .all()
        )
        return {post_id: count for post_id, count in rows}

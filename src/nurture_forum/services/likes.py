# src/nurture_forum/services/likes.py
"""Binary likes on comments."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from nurture_forum.models import Comment, CommentLike
from nurture_forum.services.notifications import NotificationFanout

logger = logging.getLogger(__name__)


@dataclass
class LikeState:
    """Like count of a comment and whether the viewer likes it."""

    liked: bool
    total_likes: int

    @property
    def is_liked_by_me(self) -> bool:
        return self.liked


class LikeService:
    """Like, unlike and toggle a comment for one viewer.

    Counts in every result come from a fresh count after the write.
    """

    def __init__(self, db: Session, fanout: NotificationFanout | None = None) -> None:
        self.db = db
        self.fanout = fanout or NotificationFanout(db)

    def toggle(self, comment: Comment, viewer_id: str) -> LikeState:
        """Unlike if the viewer already likes the comment, like it otherwise."""
        if self._has_liked(comment.id, viewer_id):
            return self.unlike(comment, viewer_id)
        return self.like(comment, viewer_id)

    def like(self, comment: Comment, viewer_id: str) -> LikeState:
        """Like the comment; the author is notified only when a like is stored."""
        inserted = False
        if not self._has_liked(comment.id, viewer_id):
            try:
                with self.db.begin_nested():
                    self.db.add(CommentLike(comment_id=comment.id, user_id=viewer_id))
                inserted = True
            except IntegrityError:
                logger.info(
                    "Like on comment %s by %s already stored by a concurrent request",
                    comment.id,
                    viewer_id,
                )
            self.db.commit()

        if inserted:
            self.fanout.comment_liked(
                comment_id=comment.id,
                comment_author_id=comment.user_id,
                liker_id=viewer_id,
            )
        return LikeState(liked=True, total_likes=self.count(comment.id))

    def unlike(self, comment: Comment, viewer_id: str) -> LikeState:
        """Remove the viewer's like; a no-op if there is none."""
        existing = self.db.get(CommentLike, (comment.id, viewer_id))
        if existing is not None:
            self.db.delete(existing)
            self.db.commit()
        return LikeState(liked=False, total_likes=self.count(comment.id))

    def summary(self, comment_id: int, viewer_id: str) -> LikeState:
        return LikeState(
            liked=self._has_liked(comment_id, viewer_id),
            total_likes=self.count(comment_id),
        )

    def count(self, comment_id: int) -> int:
        return self.db.query(CommentLike).filter(CommentLike.comment_id == comment_id).count()

    def _has_liked(self, comment_id: int, viewer_id: str) -> bool:
        return (
            self.db.query(CommentLike.comment_id)
            .filter(CommentLike.comment_id == comment_id, CommentLike.user_id == viewer_id)
            .first()
            is not None
        )

# src/nurture_forum/services/comments.py
"""Comment creation, removal and thread assembly."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from nurture_forum.core.errors import ForumNotFoundError, ForumValidationError
from nurture_forum.models import Comment, CommentLike, Post
from nurture_forum.services.content_filter import check_content
from nurture_forum.services.notifications import NotificationFanout
from nurture_forum.services.profiles import ANONYMOUS_NAME, ProfileResolver

logger = logging.getLogger(__name__)


@dataclass
class CommentNode:
    """A comment within a thread; ``replies`` holds its direct children."""

    id: int
    parent_id: int | None
    content: str
    author: str
    timestamp: datetime
    total_likes: int = 0
    is_liked_by_me: bool = False
    is_own_comment: bool = False
    replies: list[CommentNode] = field(default_factory=list)


def build_comment_forest(
    comments: Sequence[Comment],
    *,
    viewer_id: str,
    authors: Mapping[str, str],
    like_counts: Mapping[int, int],
    liked_by_viewer: set[int],
) -> list[CommentNode]:
    """Assemble comments, ordered by creation, into a list of root nodes.

    Nodes are created first and linked afterwards. A comment is attached to
    its parent only if the parent was created before it; comments whose parent
    is missing (for instance removed) become roots instead of disappearing.
    """
    nodes: dict[int, CommentNode] = {}
    position: dict[int, int] = {}
    for index, comment in enumerate(comments):
        nodes[comment.id] = CommentNode(
            id=comment.id,
            parent_id=comment.parent_id,
            content=comment.content,
            author=authors.get(comment.user_id) or ANONYMOUS_NAME,
            timestamp=comment.created_at,
            total_likes=like_counts.get(comment.id, 0),
            is_liked_by_me=comment.id in liked_by_viewer,
            is_own_comment=comment.user_id == viewer_id,
        )
        position[comment.id] = index

    roots: list[CommentNode] = []
    for comment in comments:
        node = nodes[comment.id]
        parent_id = comment.parent_id
        if parent_id is not None and position.get(parent_id, len(comments)) < position[comment.id]:
            nodes[parent_id].replies.append(node)
        else:
            roots.append(node)
    return roots


class CommentService:
    """Creates, deletes and lists comments of a post."""

    def __init__(
        self,
        db: Session,
        profiles: ProfileResolver | None = None,
        fanout: NotificationFanout | None = None,
    ) -> None:
        self.db = db
        self.profiles = profiles or ProfileResolver(db)
        self.fanout = fanout or NotificationFanout(db)

    def thread(self, post_id: int, viewer_id: str) -> list[CommentNode]:
        """Return the comment forest of a post as seen by ``viewer_id``."""
        comments = (
            self.db.query(Comment)
            .filter(Comment.post_id == post_id)
            .order_by(Comment.created_at.asc(), Comment.id.asc())
            .all()
        )
        if not comments:
            return []

        identities = self.profiles.resolve(c.user_id for c in comments)
        authors = {uid: ident.username for uid, ident in identities.items() if ident.username}

        comment_ids = [c.id for c in comments]
        like_counts = dict(
            self.db.query(CommentLike.comment_id, func.count())
            .filter(CommentLike.comment_id.in_(comment_ids))
            .group_by(CommentLike.comment_id)
            .all()
        )
        liked = {
            comment_id
            for (comment_id,) in self.db.query(CommentLike.comment_id).filter(
                CommentLike.comment_id.in_(comment_ids),
                CommentLike.user_id == viewer_id,
            )
        }
        return build_comment_forest(
            comments,
            viewer_id=viewer_id,
            authors=authors,
            like_counts=like_counts,
            liked_by_viewer=liked,
        )

    def create(
        self,
        post: Post,
        viewer_id: str,
        content: str,
        parent_id: int | None = None,
    ) -> Comment:
        """Store a comment and notify the people it concerns.

        Raises:
            ForumValidationError: If the content is blocked or the parent
                comment does not belong to ``post``.
        """
        check = check_content(content)
        if check.blocked:
            raise ForumValidationError(f"Comment blocked: {check.reason}")

        parent: Comment | None = None
        if parent_id is not None:
            parent = self.db.get(Comment, parent_id)
            if parent is None or parent.post_id != post.id:
                raise ForumValidationError("Parent comment does not belong to this post")

        comment = Comment(
            post_id=post.id,
            user_id=viewer_id,
            parent_id=parent.id if parent else None,
            content=content,
        )
        self.db.add(comment)
        self.db.commit()
        self.db.refresh(comment)
        logger.info("Comment %s created on post %s", comment.id, post.id)

        self.fanout.comment_created(
            post_id=post.id,
            comment_id=comment.id,
            commenter_id=viewer_id,
            post_author_id=post.user_id,
            parent_author_id=parent.user_id if parent else None,
        )
        return comment

    def delete_own(self, comment_id: int, viewer_id: str) -> bool:
        """Remove the viewer's comment; returns False if it is missing or foreign."""
        comment = self.db.get(Comment, comment_id)
        if comment is None or comment.user_id != viewer_id:
            return False
        purge_comment(self.db, comment_id)
        self.db.commit()
        return True


def get_comment_or_raise(db: Session, comment_id: int) -> Comment:
    comment = db.get(Comment, comment_id)
    if comment is None:
        raise ForumNotFoundError("Comment not found")
    return comment


def purge_comment(db: Session, comment_id: int) -> int:
    """Hard-delete a comment and its likes. Returns the number of comments removed."""
    db.query(CommentLike).filter(CommentLike.comment_id == comment_id).delete(
        synchronize_session="fetch"
    )
    # Replies stay and are shown as top-level comments.
    db.query(Comment).filter(Comment.parent_id == comment_id).update(
        {Comment.parent_id: None}, synchronize_session="fetch"
    )
    removed = db.query(Comment).filter(Comment.id == comment_id).delete(
        synchronize_session="fetch"
    )
    return removed

# src/nurture_forum/services/posts.py
"""Service-level helpers for creating and removing posts."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from nurture_forum.core.errors import ForumNotFoundError, ForumValidationError
from nurture_forum.db.time import utcnow
from nurture_forum.models import Comment, CommentLike, Post, PostReaction, SavedPost, User
from nurture_forum.models.post import (
    DELETED_CONTENT,
    DELETED_TITLE,
    FEED_CITY,
    FEED_TYPES,
    POST_TYPES,
)
from nurture_forum.schemas.post import PostCreate
from nurture_forum.services.content_filter import check_content

logger = logging.getLogger(__name__)


def create_post(db: Session, author: User, post_data: PostCreate) -> Post:
    """Validate and store a new post for ``author``.

    Args:
        db: Database session.
        author: Account creating the post; must already carry a forum uid.
        post_data: Submitted post fields.

    Returns:
        The stored post.

    Raises:
        ForumValidationError: If the post type or feed type is invalid, a city
            post is made without a city on the profile, or the text is blocked.
    """
    if post_data.post_type and post_data.post_type not in POST_TYPES:
        raise ForumValidationError('Invalid post_type. Must be "query" or "insight"')
    if post_data.feed_type not in FEED_TYPES:
        raise ForumValidationError('Invalid feed_type. Must be "global" or "city"')

    city = author.city
    if post_data.feed_type == FEED_CITY and not city:
        raise ForumValidationError("City required for city feed posts. Set your city in profile.")

    for text in (post_data.title, post_data.content):
        check = check_content(text)
        if check.blocked:
            raise ForumValidationError(f"Post blocked: {check.reason}")

    post = Post(
        user_id=author.forum_uid,
        title=post_data.title,
        content=post_data.content,
        category=post_data.tag_string(),
        media_urls=list(post_data.media_urls),
        is_anonymous=post_data.is_anonymous,
        post_type=post_data.post_type,
        feed_type=post_data.feed_type,
        city=city if post_data.feed_type == FEED_CITY else None,
    )
    db.add(post)
    db.commit()
    db.refresh(post)
    logger.info("Post %s created in %s feed", post.id, post.feed_type)
    return post


def get_live_post(db: Session, post_id: int) -> Post:
    """Return a post that has not been deleted.

    Raises:
        ForumNotFoundError: If the post is missing or soft-deleted.
    """
    post = db.query(Post).filter(Post.id == post_id, Post.is_deleted.is_(False)).first()
    if post is None:
        raise ForumNotFoundError("Post not found")
    return post


def soft_delete_post(db: Session, post_id: int, viewer_id: str) -> bool:
    """Redact the viewer's own post and hide it from feeds.

    The edit/undo window is not checked here; it is only reported to clients.

    Returns:
        False if the post does not exist, is already deleted or belongs to
        someone else.
    """
    post = (
        db.query(Post)
        .filter(Post.id == post_id, Post.user_id == viewer_id, Post.is_deleted.is_(False))
        .first()
    )
    if post is None:
        return False

    post.is_deleted = True
    post.deleted_at = utcnow()
    post.title = DELETED_TITLE
    post.content = DELETED_CONTENT
    post.media_urls = []
    db.commit()
    logger.info("Post %s deleted by its author", post_id)
    return True


def purge_post(db: Session, post_id: int) -> int:
    """Hard-delete a post with its comments, likes, reactions and bookmarks.

    Returns the number of posts removed; zero if it was already gone.
    """
    comment_ids = select(Comment.id).where(Comment.post_id == post_id)
    db.query(CommentLike).filter(CommentLike.comment_id.in_(comment_ids)).delete(
        synchronize_session="fetch"
    )
    db.query(Comment).filter(Comment.post_id == post_id).update(
        {Comment.parent_id: None}, synchronize_session="fetch"
    )
    db.query(Comment).filter(Comment.post_id == post_id).delete(synchronize_session="fetch")
    db.query(PostReaction).filter(PostReaction.post_id == post_id).delete(
        synchronize_session="fetch"
    )
    db.query(SavedPost).filter(SavedPost.post_id == post_id).delete(synchronize_session="fetch")
    return db.query(Post).filter(Post.id == post_id).delete(synchronize_session="fetch")

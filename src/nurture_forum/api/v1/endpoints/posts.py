# src/nurture_forum/api/v1/endpoints/posts.py
"""Post-related endpoints: creation, reactions, comments and bookmarks."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status
from sqlalchemy.orm import Session

from nurture_forum.api.v1.dependencies import (
    CommentServiceDep,
    CurrentUserDep,
    FeedServiceDep,
    ReactionServiceDep,
    SessionDep,
)
from nurture_forum.core.errors import ForumNotFoundError, ForumValidationError
from nurture_forum.models import Comment, Post
from nurture_forum.schemas.comment import (
    CommentCreate,
    CommentNodeResponse,
    CommentResponse,
    CommentThreadResponse,
)
from nurture_forum.schemas.post import (
    BookmarkToggleResponse,
    PostCreate,
    PostDeleteResponse,
    PostResponse,
)
from nurture_forum.schemas.reaction import ReactionRequest, ReactionResult, ReactionSummary
from nurture_forum.services.posts import create_post, get_live_post, soft_delete_post

router = APIRouter(prefix="/posts", tags=["posts"])


def _get_post_or_404(db: Session, post_id: int) -> Post:
    try:
        return get_live_post(db, post_id)
    except ForumNotFoundError as err:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(err)) from err


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_forum_post(
    post_data: PostCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Post:
    """Create a post in the global feed or in the author's city feed.

    Raises:
        HTTPException: 400 if the post type, feed type or city is invalid, or the
            text contains a blocked phrase.
    """
    try:
        return create_post(db, current_user, post_data)
    except ForumValidationError as err:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err)) from err


@router.delete("/{post_id}", response_model=PostDeleteResponse)
async def delete_post(
    post_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> PostDeleteResponse:
    """Soft-delete the caller's own post.

    Missing and foreign posts get the same answer so that the response does not
    reveal whether the post exists.
    """
    if not soft_delete_post(db, post_id, current_user.forum_uid):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found or not owned by you",
        )
    return PostDeleteResponse()


@router.post("/{post_id}/react", response_model=ReactionResult)
async def react_to_post(
    post_id: int,
    reaction: ReactionRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
    reactions: ReactionServiceDep,
) -> ReactionResult:
    """Add, change or remove the caller's reaction on a post."""
    post = _get_post_or_404(db, post_id)
    try:
        outcome = reactions.react(post, current_user.forum_uid, reaction.reaction)
    except ForumValidationError as err:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err)) from err

    return ReactionResult(
        reacted=outcome.reacted,
        reaction=outcome.reaction,
        counts=outcome.counts,
        total=outcome.total,
        my_reaction=outcome.my_reaction,
    )


@router.get("/{post_id}/reactions", response_model=ReactionSummary)
async def get_post_reactions(
    post_id: int,
    current_user: CurrentUserDep,
    reactions: ReactionServiceDep,
) -> ReactionSummary:
    """Return the reaction tally of a post and the caller's own reactions."""
    tally = reactions.tally(post_id, current_user.forum_uid)
    return ReactionSummary(counts=tally.counts, total=tally.total, my_reactions=tally.my_reactions)


@router.post(
    "/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    post_id: int,
    comment_data: CommentCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
    comments: CommentServiceDep,
) -> Comment:
    """Comment on a post or reply to one of its comments."""
    post = _get_post_or_404(db, post_id)
    try:
        return comments.create(
            post,
            current_user.forum_uid,
            comment_data.content,
            parent_id=comment_data.parent_id,
        )
    except ForumValidationError as err:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err)) from err


@router.get("/{post_id}/comments", response_model=CommentThreadResponse)
async def list_comments(
    post_id: int,
    current_user: CurrentUserDep,
    comments: CommentServiceDep,
) -> CommentThreadResponse:
    """Return the comments of a post as a reply tree."""
    roots = comments.thread(post_id, current_user.forum_uid)
    return CommentThreadResponse(comments=[CommentNodeResponse.from_node(node) for node in roots])


@router.post("/{post_id}/saveBookmark", response_model=BookmarkToggleResponse)
async def toggle_bookmark(
    post_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
    feed: FeedServiceDep,
) -> BookmarkToggleResponse:
    """Save the post for later, or remove it from the saved list."""
    _get_post_or_404(db, post_id)
    return BookmarkToggleResponse(saved=feed.toggle_bookmark(post_id, current_user.forum_uid))

# src/nurture_forum/api/v1/endpoints/comments.py
"""Comment endpoints: deletion and likes."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status
from sqlalchemy.orm import Session

from nurture_forum.api.v1.dependencies import (
    CommentServiceDep,
    CurrentUserDep,
    LikeServiceDep,
    SessionDep,
)
from nurture_forum.core.errors import ForumNotFoundError
from nurture_forum.models import Comment
from nurture_forum.schemas.comment import CommentDeleteResponse, LikeResult, LikeSummary
from nurture_forum.services.comments import get_comment_or_raise
from nurture_forum.services.likes import LikeState

router = APIRouter(prefix="/comments", tags=["comments"])


def _get_comment_or_404(db: Session, comment_id: int) -> Comment:
    try:
        return get_comment_or_raise(db, comment_id)
    except ForumNotFoundError as err:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(err)) from err


def _like_result(state: LikeState) -> LikeResult:
    return LikeResult(
        liked=state.liked,
        total_likes=state.total_likes,
        is_liked_by_me=state.is_liked_by_me,
    )


@router.delete("/{comment_id}", response_model=CommentDeleteResponse)
async def delete_comment(
    comment_id: int,
    current_user: CurrentUserDep,
    comments: CommentServiceDep,
) -> CommentDeleteResponse:
    """Permanently delete the caller's own comment."""
    if not comments.delete_own(comment_id, current_user.forum_uid):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only delete your own comment",
        )
    return CommentDeleteResponse()


@router.post("/{comment_id}/like", response_model=LikeResult)
async def toggle_comment_like(
    comment_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
    likes: LikeServiceDep,
) -> LikeResult:
    """Like the comment, or remove the like if the caller already likes it."""
    comment = _get_comment_or_404(db, comment_id)
    return _like_result(likes.toggle(comment, current_user.forum_uid))


@router.delete("/{comment_id}/like", response_model=LikeResult)
async def unlike_comment(
    comment_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
    likes: LikeServiceDep,
) -> LikeResult:
    """Remove the caller's like; succeeds even if there was none."""
    comment = _get_comment_or_404(db, comment_id)
    return _like_result(likes.unlike(comment, current_user.forum_uid))


@router.get("/{comment_id}/likes", response_model=LikeSummary)
async def get_comment_likes(
    comment_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
    likes: LikeServiceDep,
) -> LikeSummary:
    """Return the like count of a comment and whether the caller liked it."""
    comment = _get_comment_or_404(db, comment_id)
    state = likes.summary(comment.id, current_user.forum_uid)
    return LikeSummary(total_likes=state.total_likes, is_liked_by_me=state.is_liked_by_me)

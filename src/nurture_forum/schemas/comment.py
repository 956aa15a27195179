# src/nurture_forum/schemas/comment.py
"""Comment-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from nurture_forum.services.comments import CommentNode


class CommentCreate(BaseModel):
    """Schema for creating a comment or a reply."""

    content: str = Field(..., min_length=1, max_length=5000)
    parent_id: int | None = Field(None, description="Comment being replied to")


class CommentResponse(BaseModel):
    """Schema for a stored comment."""

    id: int
    post_id: int
    user_id: str
    parent_id: int | None
    content: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CommentNodeResponse(BaseModel):
    """A comment in a thread, carrying its replies."""

    id: int
    parent_id: int | None
    content: str
    author: str
    timestamp: datetime
    total_likes: int
    is_liked_by_me: bool
    is_own_comment: bool = Field(alias="isOwnComment")
    replies: list[CommentNodeResponse] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_node(cls, node: CommentNode) -> CommentNodeResponse:
        return cls(
            id=node.id,
            parent_id=node.parent_id,
            content=node.content,
            author=node.author,
            timestamp=node.timestamp,
            total_likes=node.total_likes,
            is_liked_by_me=node.is_liked_by_me,
            is_own_comment=node.is_own_comment,
            replies=[cls.from_node(child) for child in node.replies],
        )


class CommentThreadResponse(BaseModel):
    """Root comments of a post."""

    comments: list[CommentNodeResponse]


class LikeResult(BaseModel):
    """Like state of a comment after the viewer toggled it."""

    liked: bool
    total_likes: int
    is_liked_by_me: bool


class LikeSummary(BaseModel):
    """Like count of a comment and whether the viewer liked it."""

    total_likes: int
    is_liked_by_me: bool


class CommentDeleteResponse(BaseModel):
    """Result of an author deleting their comment."""

    success: bool = True

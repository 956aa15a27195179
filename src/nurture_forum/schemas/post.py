# src/nurture_forum/schemas/post.py
"""Post-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PostCreate(BaseModel):
    """Schema for creating a new post.

    ``post_type`` and ``feed_type`` are checked by the post service so that the
    caller gets a specific reason instead of a generic schema error.
    """

    title: str = Field(..., min_length=1, max_length=300)
    content: str = Field(..., min_length=1, max_length=10000)
    category: str | None = Field(None, description="Single category, used when no tags are sent")
    tags: list[str] | str | None = Field(None, description="Tag list or comma separated string")
    media_urls: list[str] = Field(default_factory=list)
    is_anonymous: bool = False
    post_type: str | None = Field(None, description='"query" or "insight"')
    feed_type: str | None = Field(None, description='"global" or "city"')

    def tag_string(self) -> str:
        """Return tags as the comma separated string stored on the post."""
        if isinstance(self.tags, list):
            return ",".join(self.tags)
        return self.category or self.tags or ""


class PostResponse(BaseModel):
    """Schema for a stored post."""

    id: int
    user_id: str
    title: str
    content: str
    category: str
    media_urls: list[str]
    is_anonymous: bool
    post_type: str | None
    feed_type: str
    city: str | None
    created_at: datetime
    updated_at: datetime
    is_deleted: bool = False
    deleted_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class EnrichedPost(PostResponse):
    """A post as shown to one viewer, with social state attached."""

    username: str
    reaction_counts: dict[str, int]
    total_reactions: int
    my_reactions: list[str]
    comment_count: int
    is_own_post: bool = Field(alias="isOwnPost")
    # Milliseconds left in the author's edit/undo window; zero for other viewers.
    time_remaining: int = Field(alias="timeRemaining")
    can_edit_undo_delete: bool = Field(alias="canEditUndoDelete")
    saved_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class FeedPage(BaseModel):
    """One page of enriched posts."""

    posts: list[EnrichedPost]
    has_more: bool = Field(alias="hasMore")
    total: int
    page: int

    model_config = ConfigDict(populate_by_name=True)


class BookmarkToggleResponse(BaseModel):
    """Result of toggling a bookmark."""

    saved: bool


class PostDeleteResponse(BaseModel):
    """Result of an author deleting their post."""

    success: bool = True
    message: str = "Post deleted"

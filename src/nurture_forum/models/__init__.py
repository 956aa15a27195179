# src/nurture_forum/models/__init__.py
"""SQLAlchemy models for the forum."""

from .comment import Comment, CommentLike
from .notification import Notification
from .post import Post, SavedPost
from .reaction import PostReaction
from .report import Report
from .user import Profile, User

__all__ = [
    "Comment", "CommentLike",
    "Notification",
    "Post", "SavedPost",
    "PostReaction",
    "Report",
    "Profile", "User",
]

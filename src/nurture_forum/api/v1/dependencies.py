"""Shared API dependencies for authentication and service wiring."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from datetime import datetime
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from nurture_forum.core.security import decode_subject
from nurture_forum.db.session import get_db
from nurture_forum.db.time import utcnow
from nurture_forum.models import User
from nurture_forum.services.comments import CommentService
from nurture_forum.services.enrichment import EnrichmentPipeline
from nurture_forum.services.feed import FeedService
from nurture_forum.services.likes import LikeService
from nurture_forum.services.moderation import ModerationService
from nurture_forum.services.notifications import NotificationFanout, NotificationInbox
from nurture_forum.services.profiles import ProfileResolver
from nurture_forum.services.reactions import ReactionService

logger = logging.getLogger(__name__)

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_profile_resolver(db: SessionDep) -> ProfileResolver:
    return ProfileResolver(db)


ProfileResolverDep = Annotated[ProfileResolver, Depends(get_profile_resolver)]


def _ensure_forum_uid(db: Session, user: User) -> None:
    """Give an account its forum identity the first time it uses the forum."""
    if user.forum_uid:
        return
    user.forum_uid = str(uuid.uuid4())
    db.commit()
    db.refresh(user)
    logger.info("Linked account %s to forum uid %s", user.id, user.forum_uid)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    db: SessionDep,
    profiles: ProfileResolverDep,
) -> User:
    """Get the current authenticated user from the bearer token.

    The user's forum profile is refreshed from the account record on every
    request; a failed refresh does not block the request.

    Raises:
        HTTPException: If the token is invalid or the user does not exist.
    """
    user_id = decode_subject(credentials.credentials)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )

    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    _ensure_forum_uid(db, user)
    profiles.sync(user)
    return user


# Type alias for current user dependency
CurrentUserDep = Annotated[User, Depends(get_current_user)]


def get_clock() -> Callable[[], datetime]:
    """Return the clock used for the edit/undo window."""
    return utcnow


def get_notification_fanout(db: SessionDep) -> NotificationFanout:
    return NotificationFanout(db)


FanoutDep = Annotated[NotificationFanout, Depends(get_notification_fanout)]


def get_enrichment_pipeline(
    db: SessionDep,
    profiles: ProfileResolverDep,
    clock: Annotated[Callable[[], datetime], Depends(get_clock)],
) -> EnrichmentPipeline:
    return EnrichmentPipeline(db, profiles, clock=clock)


def get_feed_service(
    db: SessionDep,
    pipeline: Annotated[EnrichmentPipeline, Depends(get_enrichment_pipeline)],
) -> FeedService:
    return FeedService(db, pipeline)


def get_reaction_service(db: SessionDep, fanout: FanoutDep) -> ReactionService:
    return ReactionService(db, fanout)


def get_comment_service(
    db: SessionDep,
    profiles: ProfileResolverDep,
    fanout: FanoutDep,
) -> CommentService:
    return CommentService(db, profiles, fanout)


def get_like_service(db: SessionDep, fanout: FanoutDep) -> LikeService:
    return LikeService(db, fanout)


def get_notification_inbox(db: SessionDep, profiles: ProfileResolverDep) -> NotificationInbox:
    return NotificationInbox(db, profiles)


def get_moderation_service(db: SessionDep) -> ModerationService:
    return ModerationService(db)


FeedServiceDep = Annotated[FeedService, Depends(get_feed_service)]
ReactionServiceDep = Annotated[ReactionService, Depends(get_reaction_service)]
CommentServiceDep = Annotated[CommentService, Depends(get_comment_service)]
LikeServiceDep = Annotated[LikeService, Depends(get_like_service)]
NotificationInboxDep = Annotated[NotificationInbox, Depends(get_notification_inbox)]
ModerationServiceDep = Annotated[ModerationService, Depends(get_moderation_service)]

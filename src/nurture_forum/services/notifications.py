# src/nurture_forum/services/notifications.py
"""Notification fan-out and the recipient's inbox."""

from __future__ import annotations

import logging

from sqlalchemy import and_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from nurture_forum.models import Notification, Post, PostReaction
from nurture_forum.models.notification import (
    NOTIFICATION_COMMENT_LIKE,
    NOTIFICATION_COMMENT_REPLY,
    NOTIFICATION_REACTION,
    NOTIFICATION_REPLY,
)
from nurture_forum.schemas.notification import NotificationPost, NotificationResponse
from nurture_forum.services.profiles import UNKNOWN_NAME, ProfileResolver

logger = logging.getLogger(__name__)

COMMENT_REPLY_MESSAGE = "replied to your comment"


def comment_recipients(
    *,
    commenter_id: str,
    post_author_id: str | None,
    parent_author_id: str | None,
) -> list[tuple[str, str]]:
    """Return ``(recipient, type)`` pairs for a newly created comment.

    The parent comment's author hears about the reply, the post author hears
    about any comment. Nobody is told about their own action, and a post
    author who also wrote the parent comment gets one notification, not two.
    """
    recipients: list[tuple[str, str]] = []
    if parent_author_id and parent_author_id != commenter_id:
        recipients.append((parent_author_id, NOTIFICATION_COMMENT_REPLY))
    if (
        post_author_id
        and post_author_id != commenter_id
        and post_author_id != parent_author_id
    ):
        recipients.append((post_author_id, NOTIFICATION_REPLY))
    return recipients


class NotificationFanout:
    """Writes notifications after the triggering action has been committed.

    Every notification is written in its own savepoint and committed on its
    own. A failed write is logged and dropped; callers never see it and the
    triggering action stays in place.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def reaction_added(self, *, post: Post, reactor_id: str) -> Notification | None:
        if post.user_id == reactor_id:
            return None
        return self._emit(
            user_id=post.user_id,
            type=NOTIFICATION_REACTION,
            post_id=post.id,
            trigger_user_id=reactor_id,
        )

    def comment_created(
        self,
        *,
        post_id: int,
        comment_id: int,
        commenter_id: str,
        post_author_id: str | None,
        parent_author_id: str | None,
    ) -> list[Notification]:
        created: list[Notification] = []
        for recipient, kind in comment_recipients(
            commenter_id=commenter_id,
            post_author_id=post_author_id,
            parent_author_id=parent_author_id,
        ):
            notification = self._emit(
                user_id=recipient,
                type=kind,
                post_id=post_id,
                comment_id=comment_id,
                trigger_user_id=commenter_id,
                message=COMMENT_REPLY_MESSAGE if kind == NOTIFICATION_COMMENT_REPLY else None,
            )
            if notification is not None:
                created.append(notification)
        return created

    def comment_liked(
        self,
        *,
        comment_id: int,
        comment_author_id: str,
        liker_id: str,
    ) -> Notification | None:
        if comment_author_id == liker_id:
            return None
        return self._emit(
            user_id=comment_author_id,
            type=NOTIFICATION_COMMENT_LIKE,
            comment_id=comment_id,
            trigger_user_id=liker_id,
        )

    def _emit(self, **fields: object) -> Notification | None:
        notification = Notification(read=False, **fields)
        try:
            with self.db.begin_nested():
                self.db.add(notification)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(
                "Failed to insert %s notification for %s",
                fields.get("type"),
                fields.get("user_id"),
            )
            return None
        logger.debug("Inserted %s notification for %s", notification.type, notification.user_id)
        return notification


class NotificationInbox:
    """Read side of notifications for a single recipient."""

    def __init__(self, db: Session, profiles: ProfileResolver | None = None) -> None:
        self.db = db
        self.profiles = profiles or ProfileResolver(db)

    def list_for(self, recipient_id: str) -> list[NotificationResponse]:
        """Return the recipient's notifications, newest first.

        Reaction notifications get their ``message`` from the reactor's
        current reaction on the post, looked up now. If the reactor has since
        changed or withdrawn the reaction, the message follows.
        """
        rows = (
            self.db.query(Notification, Post.title, Post.category)
            .outerjoin(Post, Post.id == Notification.post_id)
            .filter(Notification.user_id == recipient_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .all()
        )
        if not rows:
            return []

        identities = self.profiles.resolve(n.trigger_user_id for n, _, _ in rows)
        current_reactions = self._current_reactions([n for n, _, _ in rows])

        results: list[NotificationResponse] = []
        for notification, title, category in rows:
            identity = identities.get(notification.trigger_user_id)
            message = notification.message
            if notification.type == NOTIFICATION_REACTION:
                message = current_reactions.get(
                    (notification.post_id, notification.trigger_user_id)
                )
            results.append(
                NotificationResponse(
                    id=notification.id,
                    type=notification.type,
                    post_id=notification.post_id,
                    comment_id=notification.comment_id,
                    trigger_user_id=notification.trigger_user_id,
                    trigger_username=(identity.username if identity else None) or UNKNOWN_NAME,
                    read=notification.read,
                    created_at=notification.created_at,
                    message=message,
                    post=(
                        NotificationPost(title=title, category=category or "")
                        if title is not None
                        else None
                    ),
                )
            )
        return results

    def mark_all_read(self, recipient_id: str) -> int:
        """Mark every notification of the recipient as read."""
        updated = (
            self.db.query(Notification)
            .filter(Notification.user_id == recipient_id, Notification.read.is_(False))
            .update({Notification.read: True}, synchronize_session="fetch")
        )
        self.db.commit()
        return updated

    def _current_reactions(
        self, notifications: list[Notification]
    ) -> dict[tuple[int, str], str]:
        reaction_refs = [
            n for n in notifications
            if n.type == NOTIFICATION_REACTION and n.post_id is not None
        ]
        if not reaction_refs:
            return {}

        post_ids = {n.post_id for n in reaction_refs}
        trigger_ids = {n.trigger_user_id for n in reaction_refs}
        rows = (
            self.db.query(PostReaction.post_id, PostReaction.user_id, PostReaction.reaction_type)
            .filter(
                and_(
                    PostReaction.post_id.in_(post_ids),
                    PostReaction.user_id.in_(trigger_ids),
                )
            )
            .all()
        )
        return {(post_id, user_id): kind for post_id, user_id, kind in rows}

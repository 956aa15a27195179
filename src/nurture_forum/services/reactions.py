# src/nurture_forum/services/reactions.py
"""Reaction state machine for posts.

Each (post, user) pair is either without a reaction or holds exactly one
reaction kind. A request names the kind the user pressed, or nothing to clear:

    NONE        + nothing   -> NONE
    NONE        + k         -> k        (notifies the post author)
    j           + nothing   -> NONE
    j           + j         -> NONE     (pressing the same kind toggles off)
    j           + k         -> k        (notifies the post author)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from nurture_forum.core.errors import ForumValidationError
from nurture_forum.models import Post, PostReaction
from nurture_forum.models.reaction import REACTION_ALIASES, REACTION_TYPES
from nurture_forum.services.enrichment import empty_reaction_counts
from nurture_forum.services.notifications import NotificationFanout

logger = logging.getLogger(__name__)


def normalize_reaction(value: str | None) -> str | None:
    """Return the canonical reaction kind, or None for a removal request.

    Raises:
        ForumValidationError: If a non-empty value is not a known kind.
    """
    if value is None:
        return None
    value = value.strip().lower()
    if not value:
        return None
    value = REACTION_ALIASES.get(value, value)
    if value not in REACTION_TYPES:
        raise ForumValidationError("Invalid reaction")
    return value


def next_reaction(current: str | None, requested: str | None) -> str | None:
    """Return the reaction held after ``requested`` is applied to ``current``."""
    if requested is None or requested == current:
        return None
    return requested


@dataclass
class ReactionOutcome:
    """Authoritative reaction state of a post after a react request."""

    reacted: bool
    reaction: str | None
    counts: dict[str, int]
    total: int
    my_reaction: str | None


@dataclass
class ReactionTally:
    """Reaction counts of a post and the viewer's own reaction kinds."""

    counts: dict[str, int]
    total: int
    my_reactions: list[str]


class ReactionService:
    """Applies react requests and reads reaction tallies."""

    def __init__(self, db: Session, fanout: NotificationFanout | None = None) -> None:
        self.db = db
        self.fanout = fanout or NotificationFanout(db)

    def react(self, post: Post, viewer_id: str, requested: str | None) -> ReactionOutcome:
        """Apply ``requested`` to the viewer's reaction on ``post``.

        Raises:
            ForumValidationError: If ``requested`` is not a known reaction kind.
        """
        canonical = normalize_reaction(requested)
        existing = self._stored_reaction(post.id, viewer_id)
        current = existing.reaction_type if existing else None
        target = next_reaction(current, canonical)

        if existing is not None and target is None:
            self.db.delete(existing)
        elif existing is not None and target is not None:
            existing.reaction_type = target
        elif target is not None and not self._insert(post.id, viewer_id, target):
            current = self._apply_to_concurrent(post.id, viewer_id, target)
        self.db.commit()

        added = target is not None and target != current
        if added:
            self.fanout.reaction_added(post=post, reactor_id=viewer_id)

        tally = self.tally(post.id, viewer_id)
        return ReactionOutcome(
            reacted=target is not None,
            reaction=canonical,
            counts=tally.counts,
            total=tally.total,
            my_reaction=tally.my_reactions[0] if tally.my_reactions else None,
        )

    def tally(self, post_id: int, viewer_id: str) -> ReactionTally:
        """Count reactions on a post from a fresh read of the stored rows."""
        rows = (
            self.db.query(PostReaction.user_id, PostReaction.reaction_type)
            .filter(PostReaction.post_id == post_id)
            .all()
        )
        counts = empty_reaction_counts()
        mine: list[str] = []
        for user_id, kind in rows:
            if kind in counts:
                counts[kind] += 1
            if user_id == viewer_id:
                mine.append(kind)
        return ReactionTally(counts=counts, total=sum(counts.values()), my_reactions=mine)

    def _stored_reaction(self, post_id: int, viewer_id: str) -> PostReaction | None:
        return self.db.get(PostReaction, (post_id, viewer_id))

    def _insert(self, post_id: int, viewer_id: str, kind: str) -> bool:
        """Insert the reaction; returns False if a concurrent request stored one first."""
        try:
            with self.db.begin_nested():
                self.db.add(PostReaction(post_id=post_id, user_id=viewer_id, reaction_type=kind))
        except IntegrityError:
            logger.info(
                "Reaction on post %s by %s already stored by a concurrent request",
                post_id,
                viewer_id,
            )
            return False
        return True

    def _apply_to_concurrent(self, post_id: int, viewer_id: str, kind: str) -> str | None:
        """Bring the row stored by a concurrent request to ``kind``.

        Returns the kind that row held, which is what the viewer is treated as
        having had before this request. If that row is gone again, ``kind`` is
        returned so that nothing is announced for a reaction that is not stored.
        """
        stored = (
            self.db.query(PostReaction)
            .filter(PostReaction.post_id == post_id, PostReaction.user_id == viewer_id)
            .populate_existing()
            .first()
        )
        if stored is None:
            return kind
        previous = stored.reaction_type
        stored.reaction_type = kind
        return previous

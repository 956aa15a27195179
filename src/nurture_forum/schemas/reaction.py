# src/nurture_forum/schemas/reaction.py
"""Reaction-related Pydantic schemas."""

from pydantic import BaseModel, Field


class ReactionRequest(BaseModel):
    """Requested reaction; empty or null removes the viewer's reaction."""

    reaction: str | None = Field(
        None,
        description='"like", "support", "celebrate", "love" or "insightful"',
    )


class ReactionSummary(BaseModel):
    """Reaction tally for a post and the viewer's own reactions."""

    counts: dict[str, int]
    total: int
    my_reactions: list[str]


class ReactionResult(BaseModel):
    """State of a post's reactions after the viewer reacted."""

    reacted: bool
    reaction: str | None
    counts: dict[str, int]
    total: int
    my_reaction: str | None

# src/hublib/schemas/vote.py
"""Vote-related Pydantic schemas."""

from typing import Literal

from pydantic import BaseModel, Field

from .suggestion import SuggestionResponse

VoteType = Literal["upvote", "downvote"]


class VoteCreate(BaseModel):
    """Schema for casting a vote; repeating the same vote retracts it."""

    vote_type: VoteType = Field(..., description="upvote or downvote")


class VoteTallyResponse(BaseModel):
    """Aggregates for a suggestion as seen by the voter."""

    total_upvotes: int
    total_downvotes: int
    user_vote: VoteType | None


class VoteResponse(BaseModel):
    """Body returned after a vote mutation."""

    message: str
    suggestion: SuggestionResponse
    votes: VoteTallyResponse

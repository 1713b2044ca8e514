"""
Vote-related Pydantic schemas.
"""

from datetime import datetime
from typing import Optional

from schemas.base import APIModel
from schemas.poll import PollWithResults


class VoteCreate(APIModel):
    """Schema for casting (or changing) a vote."""

    option_id: Optional[str] = None


class UserVoteChoice(APIModel):
    option_id: str
    option_text: str


class VoteResponse(APIModel):
    """Response after a vote is recorded: fresh tallies plus the caller's choice."""

    message: str
    poll: PollWithResults
    user_vote: UserVoteChoice


class VoteStatus(APIModel):
    """The caller's current choice on a poll, if any."""

    has_voted: bool
    option_id: Optional[str] = None
    option_text: Optional[str] = None
    voted_at: Optional[datetime] = None

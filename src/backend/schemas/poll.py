"""
Poll-related Pydantic schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from schemas.base import APIModel


class PollCreator(APIModel):
    """Public projection of the user who created a poll."""

    id: str
    name: str
    image: Optional[str] = None


class PollOptionWithResults(APIModel):
    """A poll option with its vote tally."""

    id: str
    text: str
    votes: int = 0


class PollCreate(APIModel):
    """
    Schema for creating a new poll.

    Content rules (non-empty question, at least two distinct options) are
    enforced by the poll service so the error names the offending field.
    """

    question: str = ""
    description: Optional[str] = None
    options: list[str] = Field(default_factory=list)


class PollUpdate(APIModel):
    """Partial update; omitted fields are left untouched."""

    question: Optional[str] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None


class PollWithResults(APIModel):
    """Poll with tallies computed from the votes table at read time."""

    id: str
    question: str
    description: Optional[str] = None
    is_active: bool
    created_at: datetime
    created_by: Optional[PollCreator] = None
    total_votes: int = 0
    options: list[PollOptionWithResults]

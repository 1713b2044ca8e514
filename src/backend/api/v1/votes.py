"""
Vote endpoints, mounted under /polls/{poll_id}/vote.

A user holds at most one vote per poll. Voting again replaces the earlier
choice instead of being rejected.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import CurrentSession
from api.v1.polls import raise_poll_error
from db.session import get_db
from schemas.vote import VoteCreate, VoteResponse, VoteStatus
from services.poll_service import PollError, PollService

router = APIRouter()


@router.post("/{poll_id}/vote", response_model=VoteResponse)
async def cast_vote(
    poll_id: str,
    vote_data: VoteCreate,
    session: CurrentSession,
    db: AsyncSession = Depends(get_db),
) -> VoteResponse:
    """
    Vote on an open poll, or change an existing vote.

    Returns the poll's fresh tallies and the caller's current choice.
    """
    try:
        return await PollService(db).cast_vote(poll_id, session.id, vote_data.option_id)
    except PollError as e:
        raise_poll_error(e)


@router.get(
    "/{poll_id}/vote",
    response_model=VoteStatus,
    response_model_exclude_none=True,
)
async def get_my_vote(
    poll_id: str,
    session: CurrentSession,
    db: AsyncSession = Depends(get_db),
) -> VoteStatus:
    """The caller's current choice on a poll: `{hasVoted: false}` if none."""
    return await PollService(db).get_user_vote(poll_id, session.id)

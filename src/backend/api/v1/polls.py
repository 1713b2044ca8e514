"""
Poll management endpoints.

Anyone can read polls and their tallies; any logged-in user can create one.
Only a poll's creator can edit, close/reopen or delete it.
"""

from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import CurrentSession
from db.session import get_db
from schemas.auth import MessageResponse
from schemas.poll import PollCreate, PollUpdate, PollWithResults
from services.poll_service import PollError, PollService

router = APIRouter()


def raise_poll_error(exc: PollError) -> NoReturn:
    """Translate a poll engine failure into its HTTP status."""
    raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc


# ============================================================================
# Public Endpoints
# ============================================================================


@router.get("", response_model=list[PollWithResults])
async def list_polls(
    db: AsyncSession = Depends(get_db),
) -> list[PollWithResults]:
    """All polls, newest first, with vote tallies."""
    return await PollService(db).list_polls()


@router.get("/{poll_id}", response_model=PollWithResults)
async def get_poll(
    poll_id: str,
    db: AsyncSession = Depends(get_db),
) -> PollWithResults:
    """A single poll with vote tallies."""
    try:
        return await PollService(db).get_poll(poll_id)
    except PollError as e:
        raise_poll_error(e)


# ============================================================================
# Authenticated Endpoints
# ============================================================================


@router.post("", response_model=PollWithResults, status_code=status.HTTP_201_CREATED)
async def create_poll(
    poll_data: PollCreate,
    session: CurrentSession,
    db: AsyncSession = Depends(get_db),
) -> PollWithResults:
    """
    Create a poll owned by the current user.

    Requires a question and at least two distinct, non-blank options.
    """
    try:
        return await PollService(db).create_poll(
            creator_id=session.id,
            question=poll_data.question,
            options=poll_data.options,
            description=poll_data.description,
        )
    except PollError as e:
        raise_poll_error(e)


@router.put("/{poll_id}", response_model=PollWithResults)
async def update_poll(
    poll_id: str,
    changes: PollUpdate,
    session: CurrentSession,
    db: AsyncSession = Depends(get_db),
) -> PollWithResults:
    """
    Edit a poll you created.

    Setting `isActive` to false closes the poll to new votes; true reopens it.
    """
    try:
        return await PollService(db).update_poll(poll_id, session, changes)
    except PollError as e:
        raise_poll_error(e)


@router.delete("/{poll_id}", response_model=MessageResponse)
async def delete_poll(
    poll_id: str,
    session: CurrentSession,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Delete a poll you created, along with its options and votes."""
    try:
        await PollService(db).delete_poll(poll_id, session)
    except PollError as e:
        raise_poll_error(e)

    return MessageResponse(message="Poll deleted successfully")

"""
Poll repository for database operations.
"""

from typing import Any, Optional
from uuid import uuid4

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from models.poll import Poll, PollOption
from models.vote import Vote


class PollRepository:
    """Repository for poll database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _get_rowcount(self, result: Any) -> int:
        """Safely get rowcount from result."""
        return getattr(result, "rowcount", 0) or 0

    async def get_by_id(self, poll_id: str) -> Optional[Poll]:
        """Get a poll by ID with its options."""
        result = await self.db.execute(
            select(Poll)
            .options(selectinload(Poll.options), selectinload(Poll.created_by))
            .where(Poll.id == poll_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_polls(self) -> list[Poll]:
        """All polls, newest first."""
        result = await self.db.execute(
            select(Poll)
            .options(selectinload(Poll.options), selectinload(Poll.created_by))
            .order_by(Poll.created_at.desc(), Poll.id)
        )
        return list(result.scalars().all())

    async def create(
        self,
        created_by_id: str,
        question: str,
        options: list[str],
        description: Optional[str] = None,
    ) -> Poll:
        """
        Stage a poll and its options in the current transaction.

        Nothing is visible to other sessions until the caller commits, so the
        poll and its options land together or not at all.
        """
        poll = Poll(
            id=str(uuid4()),
            question=question,
            description=description,
            is_active=True,
            created_by_id=created_by_id,
            options=[
                PollOption(id=str(uuid4()), text=text, order=idx)
                for idx, text in enumerate(options)
            ],
        )

        self.db.add(poll)
        await self.db.flush()

        return poll

    async def get_option(self, poll_id: str, option_id: str) -> Optional[PollOption]:
        """Get an option only if it belongs to the given poll."""
        result = await self.db.execute(
            select(PollOption).where(PollOption.id == option_id, PollOption.poll_id == poll_id)
        )
        return result.scalar_one_or_none()

    async def update(self, poll: Poll, **fields: Any) -> Poll:
        """Apply the given column values to a loaded poll."""
        for name, value in fields.items():
            setattr(poll, name, value)
        await self.db.flush()
        return poll

    async def delete_poll(self, poll_id: str) -> bool:
        """Delete a poll with its votes and options."""
        # Children first (foreign key constraints)
        await self.db.execute(delete(Vote).where(Vote.poll_id == poll_id))
        await self.db.execute(delete(PollOption).where(PollOption.poll_id == poll_id))
        result = await self.db.execute(delete(Poll).where(Poll.id == poll_id))
        return self._get_rowcount(result) > 0

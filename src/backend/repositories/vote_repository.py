"""
Vote repository for database operations.

Writes go through a single upsert keyed on (poll_id, user_id); the unique
constraint on that pair, not a read-then-write check, keeps one row per user.
The row is produced by a SELECT guarded on the poll being active, so a poll
closed after the caller's own checks takes no further votes.
"""

from typing import Any, Optional
from uuid import uuid4

import structlog
from sqlalchemy import exists, func, insert, literal, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from db.base import utcnow
from models.poll import Poll
from models.vote import Vote

logger = structlog.get_logger(__name__)

# Dialects with INSERT ... ON CONFLICT DO UPDATE
_ON_CONFLICT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}

_VOTE_COLUMNS = ["id", "poll_id", "user_id", "option_id", "voted_at"]


def _poll_is_open(poll_id: str) -> Any:
    return exists().where(Poll.id == poll_id, Poll.is_active.is_(True))


def _guarded_row(values: dict[str, Any]) -> Any:
    """SELECT yielding the vote row only while its poll is active."""
    columns = Vote.__table__.c
    return select(
        *(literal(values[name], columns[name].type).label(name) for name in _VOTE_COLUMNS)
    ).where(_poll_is_open(values["poll_id"]))


class VoteRepository:
    """Repository for vote database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _get_rowcount(self, result: Any) -> int:
        return getattr(result, "rowcount", 0) or 0

    async def get_user_vote(self, poll_id: str, user_id: str) -> Optional[Vote]:
        """Get the user's current vote on a poll (always re-read from the database)."""
        result = await self.db.execute(
            select(Vote)
            .where(Vote.poll_id == poll_id, Vote.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def upsert(self, poll_id: str, user_id: str, option_id: str) -> Optional[Vote]:
        """
        Record the user's choice, replacing any earlier one on the same poll.

        Uses one INSERT ... SELECT ... ON CONFLICT DO UPDATE statement where the
        dialect supports it, otherwise an insert that falls back to an update
        when the unique constraint rejects it.

        Returns None when nothing was written because the poll is closed or
        no longer exists.
        """
        values = {
            "id": str(uuid4()),
            "poll_id": poll_id,
            "user_id": user_id,
            "option_id": option_id,
            "voted_at": utcnow(),
        }

        dialect = self.db.get_bind().dialect.name
        insert_fn = _ON_CONFLICT_INSERTS.get(dialect)
        if insert_fn is not None:
            written = await self._upsert_on_conflict(insert_fn, values)
        else:
            written = await self._insert_or_update(values)

        if not written:
            return None
        return await self.get_user_vote(poll_id, user_id)

    async def _upsert_on_conflict(self, insert_fn: Any, values: dict[str, Any]) -> int:
        stmt = insert_fn(Vote).from_select(_VOTE_COLUMNS, _guarded_row(values))
        stmt = stmt.on_conflict_do_update(
            index_elements=["poll_id", "user_id"],
            set_={
                "option_id": stmt.excluded.option_id,
                "voted_at": stmt.excluded.voted_at,
            },
        )
        return self._get_rowcount(await self.db.execute(stmt))

    async def _insert_or_update(self, values: dict[str, Any]) -> int:
        try:
            async with self.db.begin_nested():
                result = await self.db.execute(
                    insert(Vote).from_select(_VOTE_COLUMNS, _guarded_row(values))
                )
            return self._get_rowcount(result)
        except IntegrityError:
            # Another request (or an earlier vote) already holds the row
            logger.info("vote_insert_conflict", poll_id=values["poll_id"], user_id=values["user_id"])
            result = await self.db.execute(
                update(Vote)
                .where(
                    Vote.poll_id == values["poll_id"],
                    Vote.user_id == values["user_id"],
                    _poll_is_open(values["poll_id"]),
                )
                .values(option_id=values["option_id"], voted_at=values["voted_at"])
            )
            return self._get_rowcount(result)

    async def tally_by_option(self, poll_ids: list[str]) -> dict[str, dict[str, int]]:
        """
        Count votes per option for the given polls.

        Returns: {poll_id: {option_id: count}}; options with no votes are absent.
        """
        if not poll_ids:
            return {}

        result = await self.db.execute(
            select(Vote.poll_id, Vote.option_id, func.count(Vote.id))
            .where(Vote.poll_id.in_(poll_ids))
            .group_by(Vote.poll_id, Vote.option_id)
        )

        tallies: dict[str, dict[str, int]] = {}
        for poll_id, option_id, count in result.all():
            tallies.setdefault(str(poll_id), {})[str(option_id)] = int(count)
        return tallies

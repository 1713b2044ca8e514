"""
Poll engine.

Creates polls, records single-choice votes and reports tallies. Vote counts
are always aggregated from the votes table at read time, so a poll's
totalVotes is by construction the sum of its option counts and the number of
distinct voters.

Every mutating operation commits on success and rolls back on failure;
callers never see a half-written poll or vote.
"""

from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from models.poll import Poll
from repositories.poll_repository import PollRepository
from repositories.vote_repository import VoteRepository
from schemas.converters import poll_model_to_schema
from schemas.poll import PollUpdate, PollWithResults
from schemas.session import SessionRecord
from schemas.vote import UserVoteChoice, VoteResponse, VoteStatus
from services.authorization import Denied, IsOwner, authorize_session

logger = structlog.get_logger(__name__)


class PollError(Exception):
    """Base exception for poll operations."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class PollValidationError(PollError):
    """Malformed or incomplete poll input; `field` names the offending field."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class PollNotFoundError(PollError):
    status_code = 404

    def __init__(self, message: str = "Poll not found"):
        super().__init__(message)


class PollClosedError(PollError):
    """Vote attempted on a closed poll."""

    def __init__(self, message: str = "Poll is not active"):
        super().__init__(message)


class InvalidOptionError(PollError):
    """The option does not belong to the poll."""

    def __init__(self, message: str = "Invalid option"):
        super().__init__(message)


class PollForbiddenError(PollError):
    status_code = 403

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message)


REQUIRED_FIELDS_MESSAGE = "Question and at least 2 options are required"
MIN_OPTIONS = 2


def clean_question(question: Optional[str], max_length: int) -> str:
    """Trim the question and check it is present and not too long."""
    cleaned = (question or "").strip()
    if not cleaned:
        raise PollValidationError("question", REQUIRED_FIELDS_MESSAGE)
    if len(cleaned) > max_length:
        raise PollValidationError("question", f"Question must be at most {max_length} characters")
    return cleaned


def clean_options(options: Optional[list[str]], max_options: int) -> list[str]:
    """
    Trim option texts, drop blank ones and validate what is left.

    Duplicates are compared case-insensitively; two options reading the same
    would make the results meaningless.
    """
    cleaned = [text.strip() for text in options or [] if text and text.strip()]

    if len(cleaned) < MIN_OPTIONS:
        raise PollValidationError("options", REQUIRED_FIELDS_MESSAGE)
    if len(cleaned) > max_options:
        raise PollValidationError("options", f"A poll can have at most {max_options} options")

    seen: set[str] = set()
    for text in cleaned:
        key = text.casefold()
        if key in seen:
            raise PollValidationError("options", f"Duplicate option: {text}")
        seen.add(key)

    return cleaned


class PollService:
    """Poll lifecycle, voting and tallies on top of the poll and vote repositories."""

    def __init__(
        self,
        db: AsyncSession,
        max_options: Optional[int] = None,
        default_avatar: Optional[str] = None,
    ):
        self.db = db
        self.polls = PollRepository(db)
        self.votes = VoteRepository(db)
        self.max_options = max_options or settings.POLL_MAX_OPTIONS
        self.default_avatar = default_avatar if default_avatar is not None else settings.DEFAULT_AVATAR_URL

    # ========================================================================
    # Reads
    # ========================================================================

    async def list_polls(self) -> list[PollWithResults]:
        """All polls, newest first, each with current tallies."""
        polls = await self.polls.list_polls()
        tallies = await self.votes.tally_by_option([str(p.id) for p in polls])
        return [self._to_schema(poll, tallies.get(str(poll.id))) for poll in polls]

    async def get_poll(self, poll_id: str) -> PollWithResults:
        poll = await self._require_poll(poll_id)
        return await self._with_tallies(poll)

    async def get_user_vote(self, poll_id: str, user_id: str) -> VoteStatus:
        """The user's current choice on a poll; `hasVoted=False` when none."""
        vote = await self.votes.get_user_vote(poll_id, user_id)
        if vote is None:
            return VoteStatus(has_voted=False)

        return VoteStatus(
            has_voted=True,
            option_id=str(vote.option_id),
            option_text=vote.option.text if vote.option is not None else None,
            voted_at=vote.voted_at,
        )

    # ========================================================================
    # Writes
    # ========================================================================

    async def create_poll(
        self,
        creator_id: str,
        question: Optional[str],
        options: Optional[list[str]],
        description: Optional[str] = None,
    ) -> PollWithResults:
        """
        Create an open poll with its options in one transaction.

        Raises:
            PollValidationError: missing question, fewer than two usable
                options, too many options or duplicate options.
        """
        cleaned_question = clean_question(question, settings.POLL_QUESTION_MAX_LENGTH)
        cleaned_options = clean_options(options, self.max_options)
        cleaned_description = (description or "").strip() or None

        try:
            poll = await self.polls.create(
                created_by_id=creator_id,
                question=cleaned_question,
                options=cleaned_options,
                description=cleaned_description,
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info("poll_created", poll_id=str(poll.id), user_id=creator_id, options=len(cleaned_options))
        return await self.get_poll(str(poll.id))

    async def cast_vote(self, poll_id: str, user_id: str, option_id: Optional[str]) -> VoteResponse:
        """
        Record the user's vote, replacing any earlier vote on the same poll.

        Raises:
            PollValidationError: no option id given.
            PollNotFoundError: the poll does not exist.
            PollClosedError: the poll is closed.
            InvalidOptionError: the option is not one of this poll's options.
        """
        if not option_id:
            raise PollValidationError("optionId", "Option ID is required")

        poll = await self._require_poll(poll_id)
        if not poll.is_active:
            raise PollClosedError()

        option = await self.polls.get_option(poll_id, str(option_id))
        if option is None:
            raise InvalidOptionError()

        try:
            vote = await self.votes.upsert(poll_id=poll_id, user_id=user_id, option_id=str(option.id))
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        if vote is None:
            # Closed or deleted after the checks above
            logger.info("vote_rejected_poll_closed", poll_id=poll_id, user_id=user_id)
            await self._require_poll(poll_id)
            raise PollClosedError()

        logger.info("vote_cast", poll_id=poll_id, user_id=user_id, option_id=str(option.id))

        return VoteResponse(
            message="Vote recorded successfully",
            poll=await self.get_poll(poll_id),
            user_vote=UserVoteChoice(option_id=str(option.id), option_text=option.text),
        )

    async def update_poll(
        self,
        poll_id: str,
        requester: SessionRecord,
        changes: PollUpdate,
    ) -> PollWithResults:
        """
        Edit a poll the requester owns. Setting `is_active` opens or closes it.

        Raises:
            PollNotFoundError, PollForbiddenError, PollValidationError
        """
        poll = await self._require_poll(poll_id)
        self._require_owner(poll, requester, "update")

        fields = {}
        if changes.question is not None:
            fields["question"] = clean_question(changes.question, settings.POLL_QUESTION_MAX_LENGTH)
        if changes.description is not None:
            fields["description"] = changes.description.strip() or None
        if changes.is_active is not None:
            fields["is_active"] = changes.is_active

        if fields:
            try:
                await self.polls.update(poll, **fields)
                await self.db.commit()
            except Exception:
                await self.db.rollback()
                raise

            logger.info("poll_updated", poll_id=poll_id, user_id=requester.id, fields=sorted(fields))

        return await self.get_poll(poll_id)

    async def delete_poll(self, poll_id: str, requester: SessionRecord) -> None:
        """
        Delete a poll the requester owns, with its options and votes.

        Raises:
            PollNotFoundError, PollForbiddenError
        """
        poll = await self._require_poll(poll_id)
        self._require_owner(poll, requester, "delete")

        try:
            deleted = await self.polls.delete_poll(poll_id)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        if not deleted:
            raise PollNotFoundError()

        logger.info("poll_deleted", poll_id=poll_id, user_id=requester.id)

    # ========================================================================
    # Helpers
    # ========================================================================

    async def _require_poll(self, poll_id: str) -> Poll:
        poll = await self.polls.get_by_id(poll_id)
        if poll is None:
            raise PollNotFoundError()
        return poll

    def _require_owner(self, poll: Poll, requester: SessionRecord, action: str) -> None:
        if isinstance(authorize_session(requester, IsOwner(str(poll.created_by_id))), Denied):
            raise PollForbiddenError(f"Forbidden - You can only {action} your own polls")

    async def _with_tallies(self, poll: Poll) -> PollWithResults:
        tallies = await self.votes.tally_by_option([str(poll.id)])
        return self._to_schema(poll, tallies.get(str(poll.id)))

    def _to_schema(self, poll: Poll, tallies: Optional[dict[str, int]]) -> PollWithResults:
        return poll_model_to_schema(poll, tallies, default_avatar=self.default_avatar)

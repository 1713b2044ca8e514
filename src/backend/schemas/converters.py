"""
Schema converter functions.

Centralized helper functions for converting SQLAlchemy models to Pydantic schemas.
These are the single source of truth for model-to-schema conversions.
"""

from typing import TYPE_CHECKING, Optional

from schemas.admin import RecentSubmission
from schemas.poll import PollCreator, PollOptionWithResults, PollWithResults
from schemas.session import SessionRecord
from schemas.user import GranteeResponse, MPSummary, UserProfile, UserSummary

if TYPE_CHECKING:
    from models.certificate import CertificateSubmission
    from models.mp import MP
    from models.poll import Poll as PollModel
    from models.user import User


def poll_model_to_schema(
    poll: "PollModel",
    tallies: Optional[dict[str, int]] = None,
    default_avatar: Optional[str] = None,
) -> PollWithResults:
    """
    Convert a Poll model plus its per-option tallies to the API shape.

    `tallies` maps option id to vote count (missing options count as zero);
    totalVotes is their sum, so it always matches the options.
    """
    tallies = tallies or {}
    options = [
        PollOptionWithResults(id=str(o.id), text=o.text, votes=tallies.get(str(o.id), 0))
        for o in sorted(poll.options, key=lambda x: x.order)
    ]

    creator = None
    if poll.created_by is not None:
        creator = PollCreator(
            id=str(poll.created_by.id),
            name=poll.created_by.name,
            image=poll.created_by.image or default_avatar,
        )

    return PollWithResults(
        id=str(poll.id),
        question=poll.question,
        description=poll.description,
        is_active=poll.is_active,
        created_at=poll.created_at,
        created_by=creator,
        total_votes=sum(o.votes for o in options),
        options=options,
    )


def user_model_to_session_record(user: "User") -> SessionRecord:
    """Snapshot the user's current fields into a session record."""
    return SessionRecord(
        id=str(user.id),
        email=user.email,
        name=user.name,
        role=user.role,
        status=user.status,
        batch=user.batch or "",
        image=user.image,
        phone_number=user.phone_number,
        address=user.address,
    )


def user_model_to_summary(user: "User") -> UserSummary:
    return UserSummary(
        id=str(user.id),
        name=user.name,
        email=user.email,
        role=user.role,
        status=user.status,
        batch=user.batch or "",
        image=user.image,
        created_at=user.created_at,
    )


def user_model_to_profile(user: "User") -> UserProfile:
    return UserProfile(
        id=str(user.id),
        name=user.name,
        email=user.email,
        role=user.role,
        status=user.status,
        batch=user.batch or "",
        image=user.image,
        phone_number=user.phone_number,
        address=user.address,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def mp_model_to_summary(mp: "MP") -> MPSummary:
    return MPSummary(id=str(mp.id), name=mp.name, district=mp.district, party=mp.party)


def user_model_to_grantee(user: "User") -> GranteeResponse:
    """Grantee projection, including the assigned MP if any."""
    return GranteeResponse(
        id=str(user.id),
        name=user.name,
        email=user.email,
        batch=user.batch or "",
        status=user.status,
        image=user.image,
        phone_number=user.phone_number,
        address=user.address,
        mp=mp_model_to_summary(user.mp) if user.mp is not None else None,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def submission_model_to_recent(submission: "CertificateSubmission") -> RecentSubmission:
    return RecentSubmission(
        id=str(submission.id),
        title=submission.title,
        semester=submission.semester,
        description=submission.description,
        status=submission.status,
        is_active=submission.is_active,
        created_at=submission.created_at,
        updated_at=submission.updated_at,
        user=user_model_to_summary(submission.user) if submission.user is not None else None,
    )

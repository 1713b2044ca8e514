"""
Authorization guard.

Decides whether a session token (or an already decoded session record)
satisfies a requirement. The guard never raises for ordinary denials; it
returns a `Denied` result that HTTP dependencies map to 401 or 403.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

import structlog

from core.security import decode_session
from models.user import UserRole
from schemas.session import SessionRecord

logger = structlog.get_logger(__name__)


class DenialReason(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class Denied:
    """Authorization failed; `reason` picks the HTTP status."""

    reason: DenialReason


@dataclass(frozen=True)
class Authenticated:
    """Any valid session."""


@dataclass(frozen=True)
class HasRole:
    """The session's role must be one of `roles`."""

    roles: frozenset[str]

    @classmethod
    def of(cls, *roles: Union[str, UserRole]) -> "HasRole":
        return cls(frozenset(r.value if isinstance(r, UserRole) else r for r in roles))


@dataclass(frozen=True)
class IsOwner:
    """The session's subject must own the resource."""

    owner_id: str


Requirement = Union[Authenticated, HasRole, IsOwner]

# Roles allowed into the admin dashboard endpoints
STAFF_ROLES = HasRole.of(UserRole.ADMIN, UserRole.PERSONNEL)


def authorize_session(
    record: SessionRecord | None,
    requirement: Requirement,
) -> SessionRecord | Denied:
    """Check an already decoded session against a requirement."""
    if record is None:
        return Denied(DenialReason.UNAUTHENTICATED)

    if isinstance(requirement, HasRole) and record.role not in requirement.roles:
        logger.warning("authorization_denied", user_id=record.id, requirement="role")
        return Denied(DenialReason.FORBIDDEN)

    if isinstance(requirement, IsOwner) and str(record.id) != str(requirement.owner_id):
        logger.warning("authorization_denied", user_id=record.id, requirement="owner")
        return Denied(DenialReason.FORBIDDEN)

    return record


def authorize(token: str | None, requirement: Requirement) -> SessionRecord | Denied:
    """Decode a session token and check it against a requirement."""
    return authorize_session(decode_session(token), requirement)


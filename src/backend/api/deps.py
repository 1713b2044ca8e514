"""
Shared dependencies for API endpoints.

Includes:
- Session cookie authentication (signed, stateless)
- Role requirements for staff endpoints
- Helpers that set and clear the session cookie
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Response, status
from fastapi.security import APIKeyCookie

from core.config import settings
from core.security import decode_session, encode_session
from schemas.session import SessionRecord
from services.authorization import (
    Authenticated,
    Denied,
    DenialReason,
    HasRole,
    STAFF_ROLES,
    authorize,
)

# Security scheme: the session lives in an HttpOnly cookie
session_cookie = APIKeyCookie(name=settings.SESSION_COOKIE_NAME, auto_error=False)

NOT_AUTHENTICATED = "Not authenticated"
FORBIDDEN = "Forbidden"


# =============================================================================
# Session cookie
# =============================================================================


def set_session_cookie(response: Response, record: SessionRecord) -> None:
    """Attach a freshly signed session cookie to the response."""
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=encode_session(record),
        max_age=settings.SESSION_MAX_AGE_SECONDS,
        path="/",
        secure=settings.SESSION_COOKIE_SECURE,
        httponly=True,
        samesite="lax",
    )


def clear_session_cookie(response: Response) -> None:
    """Expire the session cookie (Max-Age=0) with the same attributes it was set with."""
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        path="/",
        secure=settings.SESSION_COOKIE_SECURE,
        httponly=True,
        samesite="lax",
    )


# =============================================================================
# Authentication
# =============================================================================


def _raise_for_denial(denied: Denied) -> None:
    if denied.reason == DenialReason.UNAUTHENTICATED:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=NOT_AUTHENTICATED,
        )
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=FORBIDDEN,
    )


async def get_optional_session(
    token: Annotated[str | None, Depends(session_cookie)],
) -> SessionRecord | None:
    """
    Decode the session cookie if present.

    Returns None for a missing or invalid cookie. Does not raise, so it suits
    endpoints that work for both anonymous and logged-in callers.
    """
    return decode_session(token)


async def get_current_session(
    token: Annotated[str | None, Depends(session_cookie)],
) -> SessionRecord:
    """
    Require a valid session.

    Raises:
        HTTPException: 401 if the cookie is missing, tampered with or unreadable.
    """
    result = authorize(token, Authenticated())
    if isinstance(result, Denied):
        _raise_for_denial(result)
    return result


class RequireRole:
    """
    Dependency that requires the session's role to be one of a set.

    Missing session gives 401; a valid session with another role gives 403.
    """

    def __init__(self, requirement: HasRole):
        self.requirement = requirement

    async def __call__(
        self,
        token: Annotated[str | None, Depends(session_cookie)],
    ) -> SessionRecord:
        result = authorize(token, self.requirement)
        if isinstance(result, Denied):
            _raise_for_denial(result)
        return result


require_staff = RequireRole(STAFF_ROLES)


CurrentSession = Annotated[SessionRecord, Depends(get_current_session)]
OptionalSession = Annotated[SessionRecord | None, Depends(get_optional_session)]
StaffSession = Annotated[SessionRecord, Depends(require_staff)]

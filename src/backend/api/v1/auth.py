"""
Authentication endpoints.

Email/password login issues a signed session cookie; there is no server-side
session store. Logout only expires the cookie in the browser.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import OptionalSession, clear_session_cookie, set_session_cookie
from core.config import settings
from db.session import get_db
from schemas.auth import LoginRequest, LoginResponse, MessageResponse, SessionResponse
from services.credential_service import CredentialVerifier, Rejected

logger = structlog.get_logger(__name__)

router = APIRouter()

INVALID_CREDENTIALS = "Invalid email or password"


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
) -> LoginResponse:
    """
    Log in with email and password.

    On success the session cookie (HttpOnly, SameSite=Lax, 7 days) is set
    and the session record is returned. Unknown email and wrong password
    produce the same 401.
    """
    result = await CredentialVerifier(db).verify(credentials.email, credentials.password)

    if isinstance(result, Rejected):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=INVALID_CREDENTIALS,
        )

    set_session_cookie(response, result)
    logger.info("session_started", user_id=result.id)

    return LoginResponse(user=result)


@router.get("/session", response_model=SessionResponse)
async def get_session(session: OptionalSession) -> SessionResponse:
    """
    Return the current session's user, or `{"user": null}`.

    Never fails: a missing or invalid cookie is simply no session.
    """
    if session is None:
        return SessionResponse(user=None)

    if not session.image:
        session = session.model_copy(update={"image": settings.DEFAULT_AVATAR_URL})

    return SessionResponse(user=session)


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response, session: OptionalSession) -> MessageResponse:
    """
    Log out by expiring the session cookie.

    The token itself is not revoked; a copy taken before logout remains
    valid until its cookie lifetime would have ended.
    """
    clear_session_cookie(response)
    logger.info("session_ended", user_id=session.id if session else None)

    return MessageResponse(message="Logged out successfully")

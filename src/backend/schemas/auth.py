"""
Authentication-related Pydantic schemas.
"""

from typing import Optional

from pydantic import BaseModel

from schemas.session import SessionRecord


class LoginRequest(BaseModel):
    """Email/password login body."""

    email: str
    password: str


class LoginResponse(BaseModel):
    """Successful login: the session cookie is set alongside this body."""

    success: bool = True
    user: SessionRecord


class SessionResponse(BaseModel):
    """Current session, or null when there is none (never an error)."""

    user: Optional[SessionRecord] = None


class MessageResponse(BaseModel):
    message: str

"""Schemas module initialization."""

from schemas.admin import AdminOverview
from schemas.auth import LoginRequest, LoginResponse, MessageResponse, SessionResponse
from schemas.poll import PollCreate, PollUpdate, PollWithResults
from schemas.session import SessionRecord
from schemas.user import (
    GranteeResponse,
    MPAssignmentRequest,
    MPUnassignRequest,
    UserProfile,
    UserProfileUpdate,
    UserSummary,
)
from schemas.vote import VoteCreate, VoteResponse, VoteStatus

__all__ = [
    "AdminOverview",
    "GranteeResponse",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "MPAssignmentRequest",
    "MPUnassignRequest",
    "PollCreate",
    "PollUpdate",
    "PollWithResults",
    "SessionRecord",
    "SessionResponse",
    "UserProfile",
    "UserProfileUpdate",
    "UserSummary",
    "VoteCreate",
    "VoteResponse",
    "VoteStatus",
]

"""
Credential verification for email/password login.

A failed login returns `Rejected` instead of raising, and the result is the
same whether the email is unknown or the password is wrong. Account status is
not checked here: it is copied into the session as-is.
"""

from dataclasses import dataclass
from enum import Enum

import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from core.security import dummy_password_hash, verify_password
from repositories.user_repository import UserRepository
from schemas.converters import user_model_to_session_record
from schemas.session import SessionRecord

logger = structlog.get_logger(__name__)


class RejectionReason(str, Enum):
    INVALID_CREDENTIALS = "invalid_credentials"


@dataclass(frozen=True)
class Rejected:
    reason: RejectionReason = RejectionReason.INVALID_CREDENTIALS


class CredentialVerifier:
    """
    Checks an email/password pair against the stored bcrypt hash.

    bcrypt runs in the threadpool so a login does not stall other requests.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = UserRepository(db)

    async def verify(self, email: str, password: str) -> SessionRecord | Rejected:
        if not email or not password:
            return Rejected()

        user = await self.users.get_by_email(email)
        if user is None:
            # Same bcrypt cost as a real comparison
            await run_in_threadpool(verify_password, password, dummy_password_hash())
            logger.info("login_failed", reason="unknown_email")
            return Rejected()

        if not await run_in_threadpool(verify_password, password, user.password_hash):
            logger.info("login_failed", reason="password_mismatch", user_id=str(user.id))
            return Rejected()

        logger.info("login_succeeded", user_id=str(user.id), role=user.role)
        return user_model_to_session_record(user)

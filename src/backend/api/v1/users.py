"""
Profile endpoints for the signed-in user.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import CurrentSession, set_session_cookie
from db.session import get_db
from repositories.user_repository import UserRepository
from schemas.converters import user_model_to_profile, user_model_to_session_record
from schemas.user import UserProfile, UserProfileUpdate

logger = structlog.get_logger(__name__)

router = APIRouter()

EMAIL_IN_USE = "Email address is already in use"

# Columns that cannot be cleared; a null for these is ignored
_REQUIRED_PROFILE_FIELDS = ("name", "email", "batch")


@router.get("/profile", response_model=UserProfile)
async def get_profile(
    session: CurrentSession,
    db: AsyncSession = Depends(get_db),
) -> UserProfile:
    """Get the current user's profile, read fresh from the database."""
    user = await UserRepository(db).get_by_id(session.id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    return user_model_to_profile(user)


@router.patch("/profile", response_model=UserProfile)
async def update_profile(
    profile_data: UserProfileUpdate,
    response: Response,
    session: CurrentSession,
    db: AsyncSession = Depends(get_db),
) -> UserProfile:
    """
    Update the current user's profile.

    The session cookie is re-issued so it carries the new name, email and
    contact fields.
    """
    repo = UserRepository(db)

    user = await repo.get_by_id(session.id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    fields = profile_data.model_dump(exclude_unset=True)
    for name in _REQUIRED_PROFILE_FIELDS:
        if name in fields and fields[name] is None:
            del fields[name]

    if "email" in fields and fields["email"] != user.email:
        if await repo.email_exists(fields["email"]):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=EMAIL_IN_USE)

    if fields:
        try:
            await repo.update_profile(user, **fields)
            await db.commit()
        except IntegrityError:
            # Email taken by a concurrent update
            await db.rollback()
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=EMAIL_IN_USE)
        await db.refresh(user)

        logger.info("profile_updated", user_id=str(user.id), fields=sorted(fields))

    set_session_cookie(response, user_model_to_session_record(user))
    return user_model_to_profile(user)

"""
User repository for database operations.
"""

from typing import Any, Optional
from uuid import uuid4

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.mp import MP
from models.user import User, UserRole


class UserRepository:
    """Repository for user database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Get a user by ID."""
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get a user by exact email match."""
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def email_exists(self, email: str) -> bool:
        """Check if email is already registered."""
        result = await self.db.execute(select(func.count(User.id)).where(User.email == email))
        count = result.scalar() or 0
        return count > 0

    async def create(
        self,
        email: str,
        password_hash: str,
        name: str,
        role: str = UserRole.USER.value,
        status: str = "active",
        batch: str = "",
        **profile: Any,
    ) -> User:
        """Create a new user. `profile` may carry image, phone_number, address."""
        user = User(
            id=str(uuid4()),
            email=email,
            password_hash=password_hash,
            name=name,
            role=role,
            status=status,
            batch=batch,
            image=profile.get("image"),
            phone_number=profile.get("phone_number"),
            address=profile.get("address"),
        )

        self.db.add(user)
        await self.db.flush()

        return user

    async def update_profile(self, user: User, **fields: Any) -> User:
        """Apply profile changes to a loaded user."""
        for name, value in fields.items():
            setattr(user, name, value)
        await self.db.flush()
        return user

    # ========================================================================
    # MP assignment
    # ========================================================================

    async def get_mp(self, mp_id: str) -> Optional[MP]:
        result = await self.db.execute(select(MP).where(MP.id == mp_id))
        return result.scalar_one_or_none()

    async def set_mp(self, user: User, mp: Optional[MP]) -> User:
        """Assign (or with None, clear) the grantee's MP."""
        user.mp_id = mp.id if mp else None
        user.mp = mp
        await self.db.flush()
        return user

"""
User model for PostgreSQL storage.

Contains grantee/staff profile data and the password hash used at login.
Roles and account status are copied into the session cookie at login time.
"""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional
from uuid import uuid4

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, utcnow

if TYPE_CHECKING:
    from models.mp import MP


class UserRole(str, Enum):
    """Roles recognised by the authorization layer."""

    ADMIN = "admin"
    PERSONNEL = "personnel"
    USER = "user"


class User(Base):
    """
    User account model.

    Authentication Strategy:
    - Email + password, bcrypt-hashed (never stored in plaintext)
    - Session state lives in a signed cookie, not in this table
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255))

    name: Mapped[str] = mapped_column(String(255))
    role: Mapped[str] = mapped_column(String(20), default=UserRole.USER.value, index=True)
    status: Mapped[str] = mapped_column(String(50), default="active")
    batch: Mapped[str] = mapped_column(String(50), default="")

    # Profile
    image: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    phone_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Assigned member of parliament (grantees only)
    mp_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("mps.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
    )

    mp: Mapped[Optional["MP"]] = relationship("MP", lazy="selectin")

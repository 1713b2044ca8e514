"""
Poll model for PostgreSQL storage.

Polls hold the question and their options only. Vote totals are never
stored on these rows; they are aggregated from the votes table on read.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional
from uuid import uuid4

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, utcnow

if TYPE_CHECKING:
    from models.user import User


class Poll(Base):
    """
    Single-choice poll created by any authenticated user.

    The creator owns the poll for editing and deletion; everyone can read it.
    """

    __tablename__ = "polls"

    __table_args__ = (Index("ix_polls_active_created", "is_active", "created_at"),)

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )

    question: Mapped[str] = mapped_column(Text)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)

    created_by_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
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

    # Relationships
    options: Mapped[list["PollOption"]] = relationship(
        "PollOption",
        back_populates="poll",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="PollOption.order",
        lazy="selectin",
    )
    created_by: Mapped["User"] = relationship("User", lazy="selectin")


class PollOption(Base):
    """
    One answer a voter can pick.

    (id, poll_id) is unique so votes can reference both columns and the
    database itself rejects a vote whose option belongs to another poll.
    """

    __tablename__ = "poll_options"

    __table_args__ = (UniqueConstraint("id", "poll_id", name="uq_poll_options_id_poll"),)

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )

    poll_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("polls.id", ondelete="CASCADE"),
        index=True,
    )

    text: Mapped[str] = mapped_column(Text)
    order: Mapped[int] = mapped_column(Integer, default=0)

    poll: Mapped["Poll"] = relationship("Poll", back_populates="options")

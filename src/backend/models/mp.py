"""
Member of parliament records that grantees get assigned to.

Only the fields the admin assignment flow reads are mapped here.
"""

from typing import Optional
from uuid import uuid4

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base


class MP(Base):
    __tablename__ = "mps"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    name: Mapped[str] = mapped_column(String(255))
    district: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    party: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

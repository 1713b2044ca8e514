"""
Session record schema.

This is the whole identity carried in the session cookie. It is built from a
user row at login and only ever parsed back by the session codec in
core.security, never assembled field by field elsewhere.
"""

from typing import Optional

from pydantic import ConfigDict

from schemas.base import APIModel


class SessionRecord(APIModel):
    """Identity snapshot taken at login (role and status are not re-checked)."""

    model_config = ConfigDict(frozen=True)

    id: str
    email: str
    name: str
    role: str
    status: str
    batch: str = ""
    image: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None

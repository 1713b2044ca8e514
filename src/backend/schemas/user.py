"""
User-related Pydantic schemas.
"""

from datetime import datetime
from typing import Optional, Union

from pydantic import Field

from schemas.base import APIModel


class MPSummary(APIModel):
    id: str
    name: str
    district: Optional[str] = None
    party: Optional[str] = None


class UserSummary(APIModel):
    """Row shown in admin listings."""

    id: str
    name: str
    email: str
    role: str
    status: str
    batch: str
    image: Optional[str] = None
    created_at: datetime


class UserProfile(APIModel):
    """The signed-in user's own account."""

    id: str
    name: str
    email: str
    role: str
    status: str
    batch: str
    image: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class UserProfileUpdate(APIModel):
    """
    Fields a user may change on their own profile.

    Only the keys present in the request are applied; phoneNumber, address and
    image may be set to null to clear them.
    """

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[str] = Field(None, min_length=3, max_length=255)
    batch: Optional[str] = Field(None, max_length=50)
    phone_number: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None
    image: Optional[str] = Field(None, max_length=500)


class GranteeResponse(APIModel):
    """Grantee record returned after an MP (un)assignment."""

    id: str
    name: str
    email: str
    batch: str
    status: str
    image: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    mp: Optional[MPSummary] = None
    created_at: datetime
    updated_at: datetime


class MPAssignmentRequest(APIModel):
    """Assign a grantee to an MP. Ids may arrive as strings or numbers."""

    grantee_id: Optional[Union[str, int]] = None
    mp_id: Optional[Union[str, int]] = None


class MPUnassignRequest(APIModel):
    grantee_id: Optional[Union[str, int]] = None

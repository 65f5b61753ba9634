from pydantic import EmailStr, Field, HttpUrl
from typing import Optional, List
from datetime import datetime

from familyhub.models.family import FamilyRole
from .base import CamelModel
from .user import UserResponse


class LocationResponse(CamelModel):
    id: int
    label: str
    address: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None


class FamilyResponse(CamelModel):
    id: int
    uuid: str
    name: str
    owner_id: int
    created_at: Optional[datetime] = None
    locations: List[LocationResponse] = []


class CompleteProfileResponse(CamelModel):
    user: UserResponse
    family: FamilyResponse


class AddFamilyMemberRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=120)
    role: FamilyRole
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=5, max_length=15)
    country_code: Optional[str] = Field(None, max_length=5)
    avatar_url: Optional[HttpUrl] = None


class AddFamilyMemberResponse(CamelModel):
    user_id: int
    family_member_id: int
    login_code: Optional[str] = None


class FamilyMemberEntry(CamelModel):
    """A membership joined with the member's public profile."""

    family_member_id: int
    user_id: int
    role: FamilyRole
    created_at: Optional[datetime] = None
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    login_code: Optional[str] = None
    avatar_url: Optional[str] = None


class FamilyMembersResponse(CamelModel):
    members: List[FamilyMemberEntry]

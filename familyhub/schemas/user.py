from pydantic import EmailStr, Field, HttpUrl
from typing import Optional, List
from datetime import datetime

from familyhub.models.user import Gender
from familyhub.models.family import FamilyRole
from .base import CamelModel


class SignupRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=100)
    name: Optional[str] = Field(None, max_length=120)
    country_code: str = Field(..., min_length=2, max_length=5)
    phone_number: str = Field(..., min_length=5, max_length=15)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=100)


class LoginCodeRequest(CamelModel):
    login_code: str = Field(..., min_length=6, max_length=6)


class RefreshRequest(CamelModel):
    refresh: str = Field(..., min_length=1)


class UserResponse(CamelModel):
    id: int
    uuid: str
    email: Optional[str] = None
    phone: Optional[str] = None
    country_code: Optional[str] = None
    name: Optional[str] = None
    gender: Optional[Gender] = None
    birth_date: Optional[datetime] = None
    avatar_url: Optional[str] = None
    login_code: Optional[str] = None
    created_at: Optional[datetime] = None


class AuthResponse(CamelModel):
    user_id: int
    access: str
    refresh: str
    user: UserResponse


class AccessTokenResponse(CamelModel):
    access: str


class AccessClaims(CamelModel):
    """Typed view of a verified access token."""

    sub: int
    exp: int
    type: str = "access"


class LocationCreate(CamelModel):
    label: str = Field(..., min_length=1, max_length=100)
    address: Optional[str] = Field(None, max_length=500)
    lat: Optional[float] = None
    lng: Optional[float] = None


class ProfilePatch(CamelModel):
    """
    Updatable profile attributes.

    Only fields present in the request are applied; an explicit ``null``
    clears the stored value.
    """

    name: Optional[str] = Field(None, min_length=1, max_length=120)
    gender: Optional[Gender] = None
    birth_date: Optional[datetime] = None
    avatar_url: Optional[str] = None

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True, by_alias=False)


class CompleteProfileRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=120)
    gender: Optional[Gender] = None
    birth_date: Optional[datetime] = None
    avatar_url: Optional[HttpUrl] = None
    family_name: str = Field("My Family", min_length=1, max_length=100)
    role_in_family: FamilyRole = FamilyRole.OTHER
    locations: Optional[List[LocationCreate]] = None

    def to_patch(self) -> ProfilePatch:
        fields = {"name", "gender", "birth_date", "avatar_url"} & self.model_fields_set
        values = {name: getattr(self, name) for name in fields}
        if values.get("avatar_url") is not None:
            values["avatar_url"] = str(values["avatar_url"])
        return ProfilePatch.model_validate(values)

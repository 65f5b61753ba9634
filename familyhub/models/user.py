from sqlalchemy import String, DateTime, Enum as SQLEnum
from sqlalchemy.orm import relationship, Mapped, mapped_column
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime
import enum
from familyhub.models.base import BaseModel
if TYPE_CHECKING:
    from familyhub.models.family import FamilyMember
    from familyhub.models.session import UserSession


class Gender(str, enum.Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class User(BaseModel):
    """
    A person known to the system.

    Account holders sign up with email + phone + password. Family members
    added without contact details (children, grandparents) get a
    ``login_code`` instead.
    """

    __tablename__ = "users"

    email: Mapped[Optional[str]] = mapped_column(
        String(255), unique=True, index=True, nullable=True, default=None
    )
    phone: Mapped[Optional[str]] = mapped_column(
        String(20), unique=True, index=True, nullable=True, default=None
    )
    country_code: Mapped[Optional[str]] = mapped_column(String(5), nullable=True, default=None)
    password_hash: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, default=None)

    # Profile
    name: Mapped[Optional[str]] = mapped_column(String(120), nullable=True, default=None)
    gender: Mapped[Optional[Gender]] = mapped_column(SQLEnum(Gender), nullable=True, default=None)
    birth_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None
    )
    avatar_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True, default=None)

    # Passwordless credential
    login_code: Mapped[Optional[str]] = mapped_column(
        String(6), unique=True, index=True, nullable=True, default=None
    )

    # Relationships
    memberships: Mapped[List["FamilyMember"]] = relationship(
        "FamilyMember",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="selectin"
    )
    sessions: Mapped[List["UserSession"]] = relationship(
        "UserSession",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="select"
    )

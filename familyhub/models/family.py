from sqlalchemy import String, Float, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import List, Optional, TYPE_CHECKING
import enum
from familyhub.models.base import BaseModel

if TYPE_CHECKING:
    from familyhub.models.user import User
    from familyhub.models.task import TaskAssignment


class FamilyRole(str, enum.Enum):
    """Role a member plays in a family"""

    FATHER = "FATHER"
    MOTHER = "MOTHER"
    SON = "SON"
    DAUGHTER = "DAUGHTER"
    GRANDPARENTS = "GRANDPARENTS"
    OTHER = "OTHER"


class Family(BaseModel):
    """
    A family groups users through role-tagged memberships.
    Created by its owner when they complete their profile.
    """

    __tablename__ = "families"

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    owner_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Relationships
    owner: Mapped["User"] = relationship("User", foreign_keys=[owner_id], lazy="selectin")

    members: Mapped[List["FamilyMember"]] = relationship(
        "FamilyMember",
        back_populates="family",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    locations: Mapped[List["Location"]] = relationship(
        "Location",
        back_populates="family",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class FamilyMember(BaseModel):
    __tablename__ = "family_members"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    family_id: Mapped[int] = mapped_column(
        ForeignKey("families.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role: Mapped[FamilyRole] = mapped_column(
        SQLEnum(FamilyRole), nullable=False, default=FamilyRole.OTHER
    )

    user: Mapped["User"] = relationship("User", back_populates="memberships", lazy="selectin")
    family: Mapped["Family"] = relationship("Family", back_populates="members", lazy="selectin")
    assignments: Mapped[List["TaskAssignment"]] = relationship(
        "TaskAssignment",
        back_populates="family_member",
        cascade="all, delete-orphan",
        lazy="select",
    )


class Location(BaseModel):
    """A named place (home, school, grandma's) belonging to one family."""

    __tablename__ = "locations"

    family_id: Mapped[int] = mapped_column(
        ForeignKey("families.id", ondelete="CASCADE"), nullable=False, index=True
    )
    label: Mapped[str] = mapped_column(String(100), nullable=False)
    address: Mapped[Optional[str]] = mapped_column(String(500), nullable=True, default=None)
    lat: Mapped[Optional[float]] = mapped_column(Float, nullable=True, default=None)
    lng: Mapped[Optional[float]] = mapped_column(Float, nullable=True, default=None)

    family: Mapped["Family"] = relationship("Family", back_populates="locations", lazy="selectin")

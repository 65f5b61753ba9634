from sqlalchemy import String, Text, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import List, Optional, TYPE_CHECKING
from datetime import datetime
import enum
from familyhub.models.base import BaseModel

if TYPE_CHECKING:
    from familyhub.models.category import Category
    from familyhub.models.family import FamilyMember
    from familyhub.models.user import User


class TimeOfDay(str, enum.Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"


class RepeatCadence(str, enum.Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    ONCE = "once"


class Visibility(str, enum.Enum):
    PUBLIC = "public"
    PRIVATE = "private"
    FAMILY = "family"


class Complexity(str, enum.Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Popularity(str, enum.Enum):
    VIRAL = "viral"
    TRENDING = "trending"
    NORMAL = "normal"


class TaskTemplate(BaseModel):
    """
    Reusable task definition.
    Templates without a creator are global and visible to every user.
    """

    __tablename__ = "task_templates"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)
    reward: Mapped[Optional[str]] = mapped_column(String(200), nullable=True, default=None)
    complexity: Mapped[Optional[Complexity]] = mapped_column(
        SQLEnum(Complexity), nullable=True, default=None
    )
    popularity: Mapped[Optional[Popularity]] = mapped_column(
        SQLEnum(Popularity), nullable=True, default=None
    )
    image_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True, default=None)

    category_id: Mapped[int] = mapped_column(
        ForeignKey("categories.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_by_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )

    category: Mapped["Category"] = relationship(
        "Category", back_populates="templates", lazy="selectin"
    )
    created_by: Mapped[Optional["User"]] = relationship(
        "User", foreign_keys=[created_by_id], lazy="select"
    )

    @property
    def is_global(self) -> bool:
        return self.created_by_id is None


class Task(BaseModel):
    """A concrete, dated task handed out to one or more family members."""

    __tablename__ = "tasks"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)

    time_of_day: Mapped[Optional[TimeOfDay]] = mapped_column(
        SQLEnum(TimeOfDay), nullable=True, default=None
    )
    repeat: Mapped[Optional[RepeatCadence]] = mapped_column(
        SQLEnum(RepeatCadence), nullable=True, default=None
    )
    reward: Mapped[Optional[str]] = mapped_column(String(200), nullable=True, default=None)
    visibility: Mapped[Optional[Visibility]] = mapped_column(
        SQLEnum(Visibility), nullable=True, default=None
    )
    complexity: Mapped[Optional[Complexity]] = mapped_column(
        SQLEnum(Complexity), nullable=True, default=None
    )
    popularity: Mapped[Optional[Popularity]] = mapped_column(
        SQLEnum(Popularity), nullable=True, default=None
    )
    image_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True, default=None)

    # Foreign keys
    category_id: Mapped[int] = mapped_column(
        ForeignKey("categories.id", ondelete="CASCADE"), nullable=False, index=True
    )
    template_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("task_templates.id", ondelete="SET NULL"), nullable=True, index=True
    )
    created_by_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Relationships
    category: Mapped["Category"] = relationship("Category", lazy="selectin")
    template: Mapped[Optional["TaskTemplate"]] = relationship("TaskTemplate", lazy="selectin")
    created_by: Mapped["User"] = relationship("User", foreign_keys=[created_by_id], lazy="select")
    assignments: Mapped[List["TaskAssignment"]] = relationship(
        "TaskAssignment",
        back_populates="task",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class TaskAssignment(BaseModel):
    __tablename__ = "task_assignments"

    task_id: Mapped[int] = mapped_column(
        ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True
    )
    family_member_id: Mapped[int] = mapped_column(
        ForeignKey("family_members.id", ondelete="CASCADE"), nullable=False, index=True
    )

    task: Mapped["Task"] = relationship("Task", back_populates="assignments", lazy="selectin")
    family_member: Mapped["FamilyMember"] = relationship(
        "FamilyMember", back_populates="assignments", lazy="selectin"
    )

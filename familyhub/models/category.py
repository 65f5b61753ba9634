from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import List, Optional, TYPE_CHECKING
from familyhub.models.base import BaseModel

if TYPE_CHECKING:
    from familyhub.models.task import TaskTemplate


class Category(BaseModel):
    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False)
    icon_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True, default=None)

    templates: Mapped[List["TaskTemplate"]] = relationship(
        "TaskTemplate",
        back_populates="category",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

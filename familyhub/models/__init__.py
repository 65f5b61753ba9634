from familyhub.models.base import Base, BaseModel
from familyhub.models.user import User, Gender
from familyhub.models.session import UserSession
from familyhub.models.family import Family, FamilyMember, FamilyRole, Location
from familyhub.models.category import Category
from familyhub.models.task import (
    Task,
    TaskTemplate,
    TaskAssignment,
    TimeOfDay,
    RepeatCadence,
    Visibility,
    Complexity,
    Popularity,
)

__all__ = [
    # Base
    "Base",
    "BaseModel",
    # Identity
    "User",
    "Gender",
    "UserSession",
    # Family
    "Family",
    "FamilyMember",
    "FamilyRole",
    "Location",
    # Tasks
    "Category",
    "Task",
    "TaskTemplate",
    "TaskAssignment",
    "TimeOfDay",
    "RepeatCadence",
    "Visibility",
    "Complexity",
    "Popularity",
]

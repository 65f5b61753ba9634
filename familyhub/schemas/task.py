import json
from pydantic import Field, HttpUrl, field_validator
from typing import Optional, List
from datetime import datetime

from familyhub.models.family import FamilyRole
from familyhub.models.task import (
    TimeOfDay,
    RepeatCadence,
    Visibility,
    Complexity,
    Popularity,
)
from .base import CamelModel


class CategoryCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    icon_url: Optional[HttpUrl] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Category name is required")
        return v


class CategoryResponse(CamelModel):
    id: int
    uuid: str
    name: str
    icon_url: Optional[str] = None
    created_at: Optional[datetime] = None


class TemplateResponse(CamelModel):
    id: int
    uuid: str
    title: str
    description: Optional[str] = None
    reward: Optional[str] = None
    complexity: Optional[Complexity] = None
    popularity: Optional[Popularity] = None
    image_url: Optional[str] = None
    category_id: int
    created_by_id: Optional[int] = None


class TemplateWithCategoryResponse(TemplateResponse):
    category: CategoryResponse


class CategoryWithTemplatesResponse(CategoryResponse):
    templates: List[TemplateResponse] = []


class TaskCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    date: datetime
    category_id: int
    template_id: Optional[int] = None
    reward: Optional[str] = Field(None, max_length=200)
    visibility: Optional[Visibility] = None
    complexity: Optional[Complexity] = None
    popularity: Optional[Popularity] = None
    time_of_day: Optional[TimeOfDay] = None
    repeat: Optional[RepeatCadence] = None
    assigned_member_ids: List[int] = []

    @field_validator("assigned_member_ids", mode="before")
    @classmethod
    def split_member_ids(cls, v):
        # form posts may send a single "1,2,3" or "[1, 2, 3]" string
        if isinstance(v, str):
            v = v.strip()
            if v.startswith("["):
                return json.loads(v)
            return [part.strip() for part in v.split(",") if part.strip()]
        return v

    @field_validator("assigned_member_ids")
    @classmethod
    def dedupe_member_ids(cls, v: List[int]) -> List[int]:
        # keep first-seen order
        return list(dict.fromkeys(v))


class AssignedUserResponse(CamelModel):
    id: int
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    avatar_url: Optional[str] = None


class AssignedMemberResponse(CamelModel):
    id: int
    family_id: int
    role: FamilyRole
    user: AssignedUserResponse


class TaskAssignmentResponse(CamelModel):
    id: int
    task_id: int
    family_member_id: int
    created_at: Optional[datetime] = None
    family_member: AssignedMemberResponse


class TaskResponse(CamelModel):
    id: int
    uuid: str
    title: str
    description: Optional[str] = None
    date: datetime
    time_of_day: Optional[TimeOfDay] = None
    repeat: Optional[RepeatCadence] = None
    reward: Optional[str] = None
    visibility: Optional[Visibility] = None
    complexity: Optional[Complexity] = None
    popularity: Optional[Popularity] = None
    image_url: Optional[str] = None
    category_id: int
    template_id: Optional[int] = None
    created_by_id: int
    created_at: Optional[datetime] = None
    category: CategoryResponse
    template: Optional[TemplateResponse] = None
    assignments: List[TaskAssignmentResponse] = []


class TaskCreatedResponse(CamelModel):
    task: TaskResponse


class TemplateListResponse(CamelModel):
    templates: List[TemplateWithCategoryResponse]


class CategoryListResponse(CamelModel):
    categories: List[CategoryWithTemplatesResponse]


class CategoryCreatedResponse(CamelModel):
    category: CategoryResponse

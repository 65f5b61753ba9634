from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session
from typing import Optional

from familyhub.database import get_db
from familyhub.dependencies import get_current_user, read_payload
from familyhub.models.user import User
from familyhub.schemas.task import (
    TaskCreate,
    TaskResponse,
    TaskCreatedResponse,
    TemplateListResponse,
    TemplateWithCategoryResponse,
    CategoryCreate,
    CategoryResponse,
    CategoryCreatedResponse,
    CategoryListResponse,
    CategoryWithTemplatesResponse,
)
from familyhub.schemas.result import Result
from familyhub.services.task_service import TaskService
from familyhub.services.category_service import CategoryService
from familyhub.utils.storage import save_image, discard_image

router = APIRouter()


@router.post("/custom", response_model=Result[TaskCreatedResponse])
async def create_and_assign_task(
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Create a task and assign it to family members.

    Accepts JSON, or multipart form data with an optional `image` file.
    """
    payload, image = await read_payload(request, file_field="image")
    data = TaskCreate.model_validate(payload)

    service = TaskService(db)
    service.check_references(current_user.id, data)

    image_url = await save_image(image) if image else None
    try:
        task = service.create_and_assign(current_user.id, data, image_url=image_url)
    except Exception:
        if image_url:
            await discard_image(image_url)
        raise
    return Result.successful(data=TaskCreatedResponse(task=TaskResponse.model_validate(task)))


@router.get("", response_model=Result[TemplateListResponse])
async def get_tasks(
    category_id: Optional[int] = Query(None, alias="categoryId"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    List the task templates the user can pick from: global templates plus
    their own, optionally filtered by category.
    """
    service = TaskService(db)
    templates = service.list_templates(current_user.id, category_id)
    return Result.successful(
        data=TemplateListResponse(
            templates=[TemplateWithCategoryResponse.model_validate(t) for t in templates]
        )
    )


@router.get("/categories", response_model=Result[CategoryListResponse])
async def get_categories(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get all categories with their templates."""
    service = CategoryService(db)
    categories = service.list_categories()
    return Result.successful(
        data=CategoryListResponse(
            categories=[CategoryWithTemplatesResponse.model_validate(c) for c in categories]
        )
    )


@router.post(
    "/categories",
    response_model=Result[CategoryCreatedResponse],
    status_code=status.HTTP_201_CREATED,
)
async def add_category(
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Add a category.

    Accepts JSON with `iconUrl`, or multipart form data with an `icon` file.
    An uploaded file wins over `iconUrl`.
    """
    payload, icon = await read_payload(request, file_field="icon")
    data = CategoryCreate.model_validate(payload)

    service = CategoryService(db)
    service.ensure_name_available(data.name)

    icon_url = await save_image(icon) if icon else None
    try:
        category = service.add_category(data, uploaded_icon_url=icon_url)
    except Exception:
        if icon_url:
            await discard_image(icon_url)
        raise
    return Result.successful(
        data=CategoryCreatedResponse(category=CategoryResponse.model_validate(category))
    )

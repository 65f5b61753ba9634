import logging
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List, Optional
from familyhub.models.category import Category
from familyhub.repositories.category_repository import CategoryRepository
from familyhub.schemas.task import CategoryCreate
from familyhub.core.exception import DuplicateResourceException

logger = logging.getLogger(__name__)


class CategoryService:
    def __init__(self, db: Session):
        self.db = db
        self.category_repo = CategoryRepository(db)

    def list_categories(self) -> List[Category]:
        return self.category_repo.get_all_with_templates()

    def ensure_name_available(self, name: str) -> None:
        if self.category_repo.get_by_name(name):
            raise DuplicateResourceException("Category", message="Category already exists")

    def add_category(self, data: CategoryCreate, uploaded_icon_url: Optional[str] = None) -> Category:
        """
        Create a category. An uploaded icon takes precedence over ``icon_url``.

        Raises:
            DuplicateResourceException: If a category with the same name exists
        """
        self.ensure_name_available(data.name)

        icon_url = uploaded_icon_url or (str(data.icon_url) if data.icon_url else None)

        try:
            category = self.category_repo.create(Category(name=data.name, icon_url=icon_url))
        except IntegrityError:
            self.db.rollback()
            raise DuplicateResourceException("Category", message="Category already exists")

        logger.info(f"Category {category.id} '{category.name}' created")
        return category

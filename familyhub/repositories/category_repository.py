from sqlalchemy.orm import Session
from typing import List, Optional
from familyhub.models.category import Category
from .repository import BaseRepository


class CategoryRepository(BaseRepository[Category]):
    def __init__(self, db: Session):
        super().__init__(Category, db)

    def get_by_name(self, name: str) -> Optional[Category]:
        """Exact, case-sensitive name match."""
        return self.db.query(Category).filter(Category.name == name).first()

    def get_all_with_templates(self) -> List[Category]:
        # templates are selectin-loaded with each category
        return self.db.query(Category).order_by(Category.name).all()

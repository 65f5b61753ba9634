from sqlalchemy.orm import Session, selectinload
from sqlalchemy import or_
from typing import Iterable, List, Optional
from familyhub.models.task import Task, TaskAssignment, TaskTemplate
from familyhub.models.family import FamilyMember
from .repository import BaseRepository


class TaskRepository(BaseRepository[Task]):
    """Repository for tasks and their assignments."""

    def __init__(self, db: Session):
        super().__init__(Task, db)

    def get_with_details(self, task_id: int) -> Optional[Task]:
        """
        Load a task together with its category, template and assignments,
        each assignment joined to its family member and that member's user.
        """
        return (
            self.db.query(Task)
            .options(
                selectinload(Task.category),
                selectinload(Task.template),
                selectinload(Task.assignments)
                .selectinload(TaskAssignment.family_member)
                .selectinload(FamilyMember.user),
            )
            .filter(Task.id == task_id)
            .populate_existing()
            .first()
        )

    def assign(
        self, task_id: int, member_ids: Iterable[int], commit: bool = True
    ) -> List[TaskAssignment]:
        """Create one assignment row per family member id."""
        assignments = [
            TaskAssignment(task_id=task_id, family_member_id=member_id)
            for member_id in member_ids
        ]
        return self.create_many(assignments, commit=commit)


class TaskTemplateRepository(BaseRepository[TaskTemplate]):
    def __init__(self, db: Session):
        super().__init__(TaskTemplate, db)

    def get_visible_to(
        self, user_id: int, category_id: Optional[int] = None
    ) -> List[TaskTemplate]:
        """
        Templates the user may pick from: global ones (no creator) plus the
        user's own, optionally narrowed to one category.
        """
        query = self.db.query(TaskTemplate).filter(
            or_(TaskTemplate.created_by_id.is_(None), TaskTemplate.created_by_id == user_id)
        )
        if category_id is not None:
            query = query.filter(TaskTemplate.category_id == category_id)
        return query.order_by(TaskTemplate.id).all()

import logging
from sqlalchemy.orm import Session
from typing import List, Optional
from familyhub.models.task import Task, TaskTemplate
from familyhub.repositories.task_repository import TaskRepository, TaskTemplateRepository
from familyhub.repositories.category_repository import CategoryRepository
from familyhub.repositories.family_repository import FamilyRepository
from familyhub.schemas.task import TaskCreate
from familyhub.core.exception import (
    ResourceNotFoundException,
    AuthorizationException,
    InternalServerException,
)

logger = logging.getLogger(__name__)


class TaskService:
    """Service layer for tasks, assignments and templates."""

    def __init__(self, db: Session):
        self.db = db
        self.task_repo = TaskRepository(db)
        self.template_repo = TaskTemplateRepository(db)
        self.category_repo = CategoryRepository(db)
        self.family_repo = FamilyRepository(db)

    def create_and_assign(
        self, creator_id: int, data: TaskCreate, image_url: Optional[str] = None
    ) -> Task:
        """
        Create a task and assign it to each of the given family members.

        The task and all of its assignments are written in one transaction.

        Args:
            creator_id: ID of the user creating the task
            data: Task details and the family member ids to assign
            image_url: Public path of an uploaded image, if any

        Returns:
            The task with category, template and assignments loaded

        Raises:
            ResourceNotFoundException: If the category, template or a member does not exist
            AuthorizationException: If a member is outside the creator's families
        """
        self.check_references(creator_id, data)

        task = Task(
            title=data.title,
            description=data.description,
            date=data.date,
            category_id=data.category_id,
            template_id=data.template_id,
            created_by_id=creator_id,
            reward=data.reward,
            visibility=data.visibility,
            complexity=data.complexity,
            popularity=data.popularity,
            time_of_day=data.time_of_day,
            repeat=data.repeat,
            image_url=image_url,
        )

        try:
            task = self.task_repo.create(task, commit=False)
            self.task_repo.assign(task.id, data.assigned_member_ids, commit=False)
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception(f"Creating task for user {creator_id} failed")
            raise InternalServerException("Failed to create task")

        logger.info(
            f"Task {task.id} created by user {creator_id} "
            f"with {len(data.assigned_member_ids)} assignment(s)"
        )
        return self.task_repo.get_with_details(task.id)

    def check_references(self, creator_id: int, data: TaskCreate) -> None:
        """
        Make sure everything the task points at exists, and that every assignee
        shares a family with the creator.
        """
        if not self.category_repo.exists(data.category_id):
            raise ResourceNotFoundException("Category", data.category_id)

        if data.template_id is not None and not self.template_repo.exists(data.template_id):
            raise ResourceNotFoundException("Task template", data.template_id)

        members = self.family_repo.get_memberships_by_ids(data.assigned_member_ids)
        missing = set(data.assigned_member_ids) - {m.id for m in members}
        if missing:
            raise ResourceNotFoundException(
                "Family member", ", ".join(str(i) for i in sorted(missing))
            )

        family_ids = self.family_repo.get_family_ids_for_user(creator_id)
        if any(m.family_id not in family_ids for m in members):
            raise AuthorizationException("You can only assign tasks to members of your family")

    def list_templates(
        self, user_id: int, category_id: Optional[int] = None
    ) -> List[TaskTemplate]:
        """
        Templates available to a user who belongs to a family.

        Raises:
            ResourceNotFoundException: If the user has no family membership
        """
        if self.family_repo.get_first_membership(user_id) is None:
            raise ResourceNotFoundException("Family", message="Family not found")

        return self.template_repo.get_visible_to(user_id, category_id)

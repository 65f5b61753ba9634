import pytest
from datetime import datetime, timezone
from sqlalchemy.orm import Session

from familyhub.models import Task, TaskAssignment, TaskTemplate, Category, Complexity, TimeOfDay
from familyhub.schemas.task import TaskCreate
from familyhub.services.task_service import TaskService
from familyhub.core.exception import ResourceNotFoundException, AuthorizationException


def _task_data(category_id: int, member_ids, **overrides) -> TaskCreate:
    data = {
        "title": "Take out the trash",
        "date": "2025-06-01T18:00:00Z",
        "categoryId": category_id,
        "assignedMemberIds": member_ids,
    }
    data.update(overrides)
    return TaskCreate.model_validate(data)


@pytest.mark.unit
class TestCreateAndAssign:
    def test_creates_one_assignment_per_member(
        self, db_session: Session, test_user, test_category, owner_membership, child_membership
    ):
        data = _task_data(
            test_category.id,
            [owner_membership.id, child_membership.id],
            complexity="easy",
            timeOfDay="evening",
            reward="Ice cream",
        )

        task = TaskService(db_session).create_and_assign(test_user.id, data)

        assert task.title == "Take out the trash"
        assert task.created_by_id == test_user.id
        assert task.complexity == Complexity.EASY
        assert task.time_of_day == TimeOfDay.EVENING
        assert task.category.name == "Chores"
        assert len(task.assignments) == 2

        rows = db_session.query(TaskAssignment).filter_by(task_id=task.id).all()
        assert sorted(a.family_member_id for a in rows) == sorted(
            [owner_membership.id, child_membership.id]
        )
        for assignment in rows:
            assert assignment.task.id == task.id
            assert assignment.family_member.user is not None

    def test_duplicate_member_ids_are_assigned_once(
        self, db_session: Session, test_user, test_category, child_membership
    ):
        data = _task_data(test_category.id, [child_membership.id, child_membership.id])

        task = TaskService(db_session).create_and_assign(test_user.id, data)

        assert len(task.assignments) == 1

    def test_with_template_and_image(
        self, db_session: Session, test_user, test_category, global_template, child_membership
    ):
        data = _task_data(test_category.id, [child_membership.id], templateId=global_template.id)

        task = TaskService(db_session).create_and_assign(
            test_user.id, data, image_url="/uploads/trash.png"
        )

        assert task.template.id == global_template.id
        assert task.image_url == "/uploads/trash.png"

    def test_unknown_member_creates_nothing(
        self, db_session: Session, test_user, test_category, child_membership
    ):
        data = _task_data(test_category.id, [child_membership.id, 9999])

        with pytest.raises(ResourceNotFoundException):
            TaskService(db_session).create_and_assign(test_user.id, data)

        assert db_session.query(Task).count() == 0
        assert db_session.query(TaskAssignment).count() == 0

    def test_member_of_another_family_is_forbidden(
        self, db_session: Session, other_user, test_category, child_membership
    ):
        data = _task_data(test_category.id, [child_membership.id])

        with pytest.raises(AuthorizationException) as exc:
            TaskService(db_session).create_and_assign(other_user.id, data)

        assert exc.value.status_code == 403
        assert db_session.query(Task).count() == 0
        assert db_session.query(TaskAssignment).count() == 0

    def test_unknown_category(self, db_session: Session, test_user):
        with pytest.raises(ResourceNotFoundException):
            TaskService(db_session).create_and_assign(test_user.id, _task_data(404, []))

    def test_unknown_template(self, db_session: Session, test_user, test_category):
        data = _task_data(test_category.id, [], templateId=404)

        with pytest.raises(ResourceNotFoundException):
            TaskService(db_session).create_and_assign(test_user.id, data)

    def test_date_is_stored(self, db_session: Session, test_user, test_category):
        task = TaskService(db_session).create_and_assign(
            test_user.id, _task_data(test_category.id, [])
        )

        stored = task.date if task.date.tzinfo else task.date.replace(tzinfo=timezone.utc)
        assert stored == datetime(2025, 6, 1, 18, 0, tzinfo=timezone.utc)


@pytest.mark.unit
class TestListTemplates:
    def test_global_and_own_templates_only(
        self, db_session: Session, test_user, other_user, test_family, test_category, global_template
    ):
        own = TaskTemplate(title="Walk the dog", category_id=test_category.id, created_by_id=test_user.id)
        foreign = TaskTemplate(title="Secret", category_id=test_category.id, created_by_id=other_user.id)
        db_session.add_all([own, foreign])
        db_session.commit()

        templates = TaskService(db_session).list_templates(test_user.id)

        assert {t.title for t in templates} == {"Make the bed", "Walk the dog"}

    def test_filter_by_category(
        self, db_session: Session, test_user, test_family, test_category, global_template
    ):
        homework = Category(name="Homework")
        db_session.add(homework)
        db_session.flush()
        db_session.add(TaskTemplate(title="Read a chapter", category_id=homework.id))
        db_session.commit()

        templates = TaskService(db_session).list_templates(test_user.id, category_id=homework.id)

        assert [t.title for t in templates] == ["Read a chapter"]
        assert templates[0].category.name == "Homework"

    def test_requires_family_membership(self, db_session: Session, test_user, global_template):
        with pytest.raises(ResourceNotFoundException) as exc_info:
            TaskService(db_session).list_templates(test_user.id)

        assert exc_info.value.detail == "Family not found"

import pytest
from pydantic import ValidationError

from familyhub.schemas.task import TaskCreate

BASE = {"title": "Dishes", "date": "2025-06-01T18:00:00Z", "categoryId": 1}


@pytest.mark.unit
class TestAssignedMemberIds:
    def test_list(self):
        assert TaskCreate.model_validate({**BASE, "assignedMemberIds": [3, 1]}).assigned_member_ids == [3, 1]

    def test_comma_separated_form_value(self):
        data = TaskCreate.model_validate({**BASE, "assignedMemberIds": "4, 5,6"})
        assert data.assigned_member_ids == [4, 5, 6]

    def test_json_array_form_value(self):
        data = TaskCreate.model_validate({**BASE, "assignedMemberIds": "[7, 8]"})
        assert data.assigned_member_ids == [7, 8]

    def test_duplicates_removed_in_order(self):
        data = TaskCreate.model_validate({**BASE, "assignedMemberIds": [2, 1, 2, 1]})
        assert data.assigned_member_ids == [2, 1]

    def test_defaults_to_empty(self):
        assert TaskCreate.model_validate(BASE).assigned_member_ids == []

    def test_non_numeric_rejected(self):
        with pytest.raises(ValidationError):
            TaskCreate.model_validate({**BASE, "assignedMemberIds": "a,b"})

    def test_snake_case_keys_accepted(self):
        data = TaskCreate.model_validate(
            {"title": "Dishes", "date": "2025-06-01T18:00:00Z", "category_id": 2}
        )
        assert data.category_id == 2

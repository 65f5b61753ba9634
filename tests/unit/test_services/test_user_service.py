import pytest
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from familyhub.models import Family, FamilyMember, FamilyRole, Location, Gender
from familyhub.repositories.family_repository import FamilyRepository
from familyhub.schemas.user import CompleteProfileRequest
from familyhub.services.user_service import UserService
from familyhub.core.exception import InternalServerException


@pytest.mark.unit
class TestCompleteProfile:
    def test_creates_family_membership_and_locations(self, db_session: Session, test_user):
        data = CompleteProfileRequest.model_validate(
            {
                "name": "Alice Smith",
                "gender": "female",
                "birthDate": "1990-04-12T00:00:00Z",
                "avatarUrl": "https://cdn.example.com/alice.png",
                "familyName": "Smiths",
                "roleInFamily": "MOTHER",
                "locations": [
                    {"label": "Home", "address": "1 Main St", "lat": 51.5, "lng": -0.12},
                    {"label": "School"},
                ],
            }
        )

        user, family = UserService(db_session).complete_profile(test_user.id, data)

        assert user.name == "Alice Smith"
        assert user.gender == Gender.FEMALE
        assert user.avatar_url == "https://cdn.example.com/alice.png"
        assert family.name == "Smiths"
        assert family.owner_id == test_user.id

        member = db_session.query(FamilyMember).filter_by(family_id=family.id).one()
        assert member.user_id == test_user.id
        assert member.role == FamilyRole.MOTHER

        labels = sorted(loc.label for loc in db_session.query(Location).filter_by(family_id=family.id))
        assert labels == ["Home", "School"]

    def test_defaults(self, db_session: Session, test_user):
        data = CompleteProfileRequest.model_validate({"name": "Alice"})

        _, family = UserService(db_session).complete_profile(test_user.id, data)

        assert family.name == "My Family"
        member = db_session.query(FamilyMember).filter_by(family_id=family.id).one()
        assert member.role == FamilyRole.OTHER
        assert db_session.query(Location).count() == 0

    def test_failure_rolls_back_everything(self, db_session: Session, test_user, monkeypatch):
        def broken_add_locations(self, family_id, locations, commit=True):
            raise SQLAlchemyError("disk full")

        monkeypatch.setattr(FamilyRepository, "add_locations", broken_add_locations)
        data = CompleteProfileRequest.model_validate(
            {"name": "Renamed", "locations": [{"label": "Home"}]}
        )

        with pytest.raises(InternalServerException) as exc_info:
            UserService(db_session).complete_profile(test_user.id, data)

        assert exc_info.value.status_code == 500
        assert exc_info.value.detail == "Unable to complete registration"
        assert db_session.query(Family).filter_by(owner_id=test_user.id).count() == 0
        assert db_session.query(FamilyMember).filter_by(user_id=test_user.id).count() == 0
        db_session.refresh(test_user)
        assert test_user.name == "Test User"


@pytest.mark.unit
class TestProfilePatch:
    def test_absent_fields_are_left_alone(self, db_session: Session, test_user):
        test_user.avatar_url = "https://cdn.example.com/old.png"
        db_session.commit()

        data = CompleteProfileRequest.model_validate({"name": "New Name"})
        user = UserService(db_session).apply_profile_patch(test_user.id, data.to_patch())

        assert user.name == "New Name"
        assert user.avatar_url == "https://cdn.example.com/old.png"

    def test_explicit_null_clears_field(self, db_session: Session, test_user):
        test_user.avatar_url = "https://cdn.example.com/old.png"
        test_user.gender = Gender.OTHER
        db_session.commit()

        data = CompleteProfileRequest.model_validate({"name": "New Name", "avatarUrl": None})
        user = UserService(db_session).apply_profile_patch(test_user.id, data.to_patch())

        assert user.avatar_url is None
        assert user.gender == Gender.OTHER

import logging
from sqlalchemy.orm import Session
from familyhub.models.user import User
from familyhub.models.family import Family
from familyhub.repositories.user_repository import UserRepository
from familyhub.repositories.family_repository import FamilyRepository
from familyhub.schemas.user import CompleteProfileRequest, ProfilePatch
from familyhub.core.exception import ResourceNotFoundException, InternalServerException

logger = logging.getLogger(__name__)


class UserService:
    """Service layer for user operations."""

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)
        self.family_repo = FamilyRepository(db)

    def apply_profile_patch(
        self, user_id: int, patch: ProfilePatch, commit: bool = True
    ) -> User:
        """Apply only the fields present in the patch."""
        user = self.user_repo.update(user_id, patch.changes(), commit=commit)
        if user is None:
            raise ResourceNotFoundException("User", user_id)
        return user

    def complete_profile(
        self, user_id: int, data: CompleteProfileRequest
    ) -> tuple[User, Family]:
        """
        Finish onboarding in one transaction: update the profile, create the
        user's family, make them a member with the requested role and store
        any locations. Nothing persists if any step fails.

        Raises:
            InternalServerException: If any write fails
        """
        try:
            user = self.apply_profile_patch(user_id, data.to_patch(), commit=False)

            family = self.family_repo.create(
                Family(name=data.family_name, owner_id=user_id), commit=False
            )
            self.family_repo.add_member(
                family.id, user_id, data.role_in_family, commit=False
            )

            if data.locations:
                self.family_repo.add_locations(
                    family.id,
                    (location.model_dump(by_alias=False) for location in data.locations),
                    commit=False,
                )

            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception(f"Complete profile failed for user {user_id}")
            raise InternalServerException("Unable to complete registration")

        self.db.refresh(user)
        self.db.refresh(family)
        logger.info(f"User {user_id} completed profile and created family {family.id}")
        return user, family

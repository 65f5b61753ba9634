import logging
from sqlalchemy.orm import Session
from typing import List
from familyhub.models.family import Family
from familyhub.models.user import User
from familyhub.repositories.family_repository import FamilyRepository
from familyhub.repositories.user_repository import UserRepository
from familyhub.schemas.family import AddFamilyMemberRequest, AddFamilyMemberResponse
from familyhub.core.exception import (
    ResourceNotFoundException,
    AuthorizationException,
    BadRequestException,
)

logger = logging.getLogger(__name__)


class FamilyService:
    """Service layer for family membership operations."""

    def __init__(self, db: Session):
        self.db = db
        self.family_repo = FamilyRepository(db)
        self.user_repo = UserRepository(db)

    def get_family_for_member(self, family_id: int, user_id: int) -> Family:
        """
        Resolve a family the requesting user belongs to.

        Raises:
            ResourceNotFoundException: If family not found
            AuthorizationException: If user is not a member
        """
        family = self.family_repo.get(family_id)
        if not family:
            raise ResourceNotFoundException("Family", message="Family not found")

        if not self.family_repo.is_member(family_id, user_id):
            raise AuthorizationException("You are not a member of this family")

        return family

    def add_member(
        self, family_id: int, requester_id: int, data: AddFamilyMemberRequest
    ) -> AddFamilyMemberResponse:
        """
        Add someone to a family.

        An existing user matched by email or phone is reused. Otherwise a new
        user is created; one with neither email nor phone gets a login code.

        Args:
            family_id: Family ID
            requester_id: Requesting user ID
            data: The new member's details

        Returns:
            Ids of the user and the membership, plus the login code if any
        """
        self.get_family_for_member(family_id, requester_id)

        user = self.user_repo.get_by_email_or_phone(email=data.email, phone=data.phone)

        if user is None:
            user = User(
                name=data.name,
                email=data.email,
                phone=data.phone,
                country_code=data.country_code,
                avatar_url=str(data.avatar_url) if data.avatar_url else None,
            )
            if not data.email and not data.phone:
                user.login_code = self.user_repo.generate_login_code()
            user = self.user_repo.create(user, commit=False)
        elif self.family_repo.has_membership(family_id, user.id, data.role):
            raise BadRequestException("User is already a member of this family with that role")

        member = self.family_repo.add_member(family_id, user.id, data.role, commit=False)
        self.db.commit()

        logger.info(f"User {user.id} added to family {family_id} as {data.role.value}")
        return AddFamilyMemberResponse(
            user_id=user.id,
            family_member_id=member.id,
            login_code=user.login_code,
        )

    def get_members(self, family_id: int, requester_id: int) -> List[dict]:
        """
        Get family members.

        Raises:
            ResourceNotFoundException: If family not found
            AuthorizationException: If not a member
        """
        self.get_family_for_member(family_id, requester_id)
        return self.family_repo.get_members(family_id)

from sqlalchemy.orm import Session
from sqlalchemy import select, and_
from typing import Iterable, List, Optional, Set
from familyhub.models.family import Family, FamilyMember, FamilyRole, Location
from familyhub.models.user import User
from .repository import BaseRepository


class FamilyRepository(BaseRepository[Family]):
    """Repository for families, their memberships and locations."""

    def __init__(self, db: Session):
        super().__init__(Family, db)

    def add_member(
        self, family_id: int, user_id: int, role: FamilyRole, commit: bool = True
    ) -> FamilyMember:
        """
        Link a user to a family.

        Args:
            family_id: The family ID
            user_id: The user ID to add
            role: Role the user plays in the family

        Returns:
            The new membership row
        """
        member = FamilyMember(family_id=family_id, user_id=user_id, role=role)
        self.db.add(member)
        self._persist(commit)
        self.db.refresh(member)
        return member

    def add_locations(
        self, family_id: int, locations: Iterable[dict], commit: bool = True
    ) -> List[Location]:
        rows = [Location(family_id=family_id, **data) for data in locations]
        self.db.add_all(rows)
        self._persist(commit)
        return rows

    def get_memberships_by_ids(self, member_ids: Iterable[int]) -> List[FamilyMember]:
        member_ids = list(member_ids)
        if not member_ids:
            return []
        return self.db.query(FamilyMember).filter(FamilyMember.id.in_(member_ids)).all()

    def get_first_membership(self, user_id: int) -> Optional[FamilyMember]:
        """The user's oldest membership in any family."""
        return (
            self.db.query(FamilyMember)
            .filter(FamilyMember.user_id == user_id)
            .order_by(FamilyMember.created_at, FamilyMember.id)
            .first()
        )

    def get_family_ids_for_user(self, user_id: int) -> Set[int]:
        stmt = select(FamilyMember.family_id).where(FamilyMember.user_id == user_id)
        return set(self.db.execute(stmt).scalars())

    def has_membership(self, family_id: int, user_id: int, role: FamilyRole) -> bool:
        stmt = select(FamilyMember.id).where(
            and_(
                FamilyMember.family_id == family_id,
                FamilyMember.user_id == user_id,
                FamilyMember.role == role,
            )
        )
        return self.db.execute(stmt).first() is not None

    def is_member(self, family_id: int, user_id: int) -> bool:
        """Check if a user belongs to a family in any role."""
        stmt = select(FamilyMember.id).where(
            and_(
                FamilyMember.family_id == family_id,
                FamilyMember.user_id == user_id,
            )
        )
        return self.db.execute(stmt).first() is not None

    def get_members(self, family_id: int) -> List[dict]:
        """
        Get all memberships of a family joined with each member's public profile.

        Returns:
            List of dicts with membership and user info
        """
        stmt = (
            select(
                FamilyMember.id.label("family_member_id"),
                FamilyMember.role,
                FamilyMember.created_at,
                User.id.label("user_id"),
                User.name,
                User.email,
                User.phone,
                User.login_code,
                User.avatar_url,
            )
            .join(User, User.id == FamilyMember.user_id)
            .where(FamilyMember.family_id == family_id)
            .order_by(FamilyMember.created_at, FamilyMember.id)
        )

        results = self.db.execute(stmt).all()
        return [
            {
                "family_member_id": r.family_member_id,
                "user_id": r.user_id,
                "role": r.role,
                "created_at": r.created_at,
                "name": r.name,
                "email": r.email,
                "phone": r.phone,
                "login_code": r.login_code,
                "avatar_url": r.avatar_url,
            }
            for r in results
        ]

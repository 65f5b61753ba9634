from sqlalchemy.orm import Session
from sqlalchemy import or_
from typing import Optional
from familyhub.models.user import User
from .repository import BaseRepository
import secrets
import string


class UserRepository(BaseRepository[User]):
    """Repository for User operations."""

    def __init__(self, db: Session):
        super().__init__(User, db)

    def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email."""
        return self.db.query(User).filter(User.email == email).first()

    def get_by_login_code(self, code: str) -> Optional[User]:
        return self.db.query(User).filter(User.login_code == code.upper()).first()

    def get_by_email_or_phone(
        self, email: Optional[str] = None, phone: Optional[str] = None
    ) -> Optional[User]:
        """
        Find a user matching either contact. Missing values are ignored, so
        calling with neither returns None rather than the first user.
        """
        conditions = []
        if email:
            conditions.append(User.email == email)
        if phone:
            conditions.append(User.phone == phone)
        if not conditions:
            return None
        return self.db.query(User).filter(or_(*conditions)).first()

    def login_code_exists(self, code: str) -> bool:
        return self.db.query(User).filter(User.login_code == code).count() > 0

    def generate_login_code(self) -> str:
        """
        Generate a unique login code.

        Returns:
            A 6-character uppercase alphanumeric code
        """
        while True:
            code = ''.join(
                secrets.choice(string.ascii_uppercase + string.digits) for _ in range(6)
            )

            if not self.login_code_exists(code):
                return code

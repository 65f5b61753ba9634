from sqlalchemy.orm import Session
from typing import Optional
from datetime import datetime
from familyhub.models.session import UserSession
from .repository import BaseRepository


class SessionRepository(BaseRepository[UserSession]):
    """Repository for refresh-token sessions."""

    def __init__(self, db: Session):
        super().__init__(UserSession, db)

    def record(self, user_id: int, jti: str, expires_at: datetime) -> UserSession:
        """Persist the identifier of a freshly issued refresh token."""
        return self.create(
            UserSession(user_id=user_id, refresh_jti=jti, expires_at=expires_at)
        )

    def get_by_jti(self, jti: str) -> Optional[UserSession]:
        return self.db.query(UserSession).filter(UserSession.refresh_jti == jti).first()

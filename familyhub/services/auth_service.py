import logging
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from familyhub.models.user import User
from familyhub.repositories.user_repository import UserRepository
from familyhub.repositories.session_repository import SessionRepository
from familyhub.schemas.user import (
    SignupRequest,
    AuthResponse,
    AccessTokenResponse,
    AccessClaims,
    UserResponse,
)
from familyhub.utils.security import (
    InvalidTokenError,
    get_password_hash,
    verify_password,
    issue_access,
    issue_refresh,
    verify_access,
    verify_refresh,
)
from familyhub.core.exception import AuthenticationException, DuplicateResourceException

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


class AuthService:
    """Service layer for authentication operations."""

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)
        self.session_repo = SessionRepository(db)

    def signup(self, data: SignupRequest) -> AuthResponse:
        """
        Register a new account holder and open their first session.

        Raises:
            DuplicateResourceException: If the email or phone is already taken
        """
        if self.user_repo.get_by_email_or_phone(email=data.email, phone=data.phone_number):
            raise DuplicateResourceException("User", status_code=400, message="User already exists")

        user = User(
            email=data.email,
            phone=data.phone_number,
            country_code=data.country_code,
            name=data.name,
            password_hash=get_password_hash(data.password),
        )

        try:
            user = self.user_repo.create(user, commit=False)
            response = self._open_session(user)
        except IntegrityError:
            # Lost a race against a concurrent signup with the same contact
            self.db.rollback()
            raise DuplicateResourceException("User", status_code=400, message="User already exists")

        logger.info(f"User {user.id} signed up")
        return response

    def login(self, email: str, password: str) -> AuthResponse:
        """
        Login with email and password.

        Unknown email, password-less account and wrong password all fail
        with the same message.
        """
        user = self.user_repo.get_by_email(email)

        if not user or not user.password_hash:
            logger.warning("Login failed: unknown account or no password set")
            raise AuthenticationException(INVALID_CREDENTIALS)

        if not verify_password(password, user.password_hash):
            logger.warning(f"Login failed: wrong password for user {user.id}")
            raise AuthenticationException(INVALID_CREDENTIALS)

        return self._open_session(user)

    def login_with_code(self, login_code: str) -> AuthResponse:
        """Login for members that were added without email or phone."""
        user = self.user_repo.get_by_login_code(login_code)
        if not user:
            raise AuthenticationException("Invalid login code")
        return self._open_session(user)

    def refresh_access_token(self, refresh_token: str) -> AccessTokenResponse:
        """
        Exchange a refresh token for a new access token.

        The token must verify, its session row must exist and be unexpired,
        and its owner must still exist.
        """
        try:
            payload = verify_refresh(refresh_token)
        except InvalidTokenError:
            raise AuthenticationException("Could not validate refresh token")

        session = self.session_repo.get_by_jti(payload["jti"])
        if session is None or session.is_expired:
            raise AuthenticationException("Session expired or not found")

        if str(session.user_id) != str(payload["sub"]):
            raise AuthenticationException("Could not validate refresh token")

        if self.user_repo.get(session.user_id) is None:
            raise AuthenticationException("Invalid user")

        return AccessTokenResponse(access=issue_access(session.user_id))

    def verify_token(self, token: str) -> AccessClaims:
        """
        Verify an access token and return its typed claims.
        Raises AuthenticationException if the token is invalid.
        """
        try:
            payload = verify_access(token)
            return AccessClaims.model_validate(payload)
        except (InvalidTokenError, ValueError):
            raise AuthenticationException("Could not validate credentials")

    def _open_session(self, user: User) -> AuthResponse:
        access = issue_access(user.id)
        refresh, jti, expires_at = issue_refresh(user.id)
        self.session_repo.record(user.id, jti, expires_at)

        return AuthResponse(
            user_id=user.id,
            access=access,
            refresh=refresh,
            user=UserResponse.model_validate(user),
        )

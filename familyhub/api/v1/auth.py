from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from familyhub.database import get_db
from familyhub.dependencies import get_current_user
from familyhub.models.user import User
from familyhub.schemas.user import (
    SignupRequest,
    LoginRequest,
    LoginCodeRequest,
    RefreshRequest,
    AuthResponse,
    AccessTokenResponse,
    UserResponse,
)
from familyhub.schemas.result import Result
from familyhub.services.auth_service import AuthService

router = APIRouter()


@router.post(
    "/signup",
    response_model=Result[AuthResponse],
    status_code=status.HTTP_201_CREATED,
)
async def signup(data: SignupRequest, db: Session = Depends(get_db)):
    """
    Register a new account.

    - **email**: Valid email address (unique)
    - **password**: At least 6 characters
    - **countryCode**: 2-5 characters, e.g. "+1"
    - **phoneNumber**: 5-15 characters (unique)
    - **name**: Optional display name

    Returns:
        Result[AuthResponse]: The new user id, access and refresh tokens, and the user
    """
    auth_service = AuthService(db)
    return Result.successful(data=auth_service.signup(data))


@router.post("/login", response_model=Result[AuthResponse])
async def login(data: LoginRequest, db: Session = Depends(get_db)):
    """
    Login with email and password.

    Returns:
        Result[AuthResponse]: Access and refresh tokens plus the user
    """
    auth_service = AuthService(db)
    return Result.successful(data=auth_service.login(data.email, data.password))


@router.post("/login-code", response_model=Result[AuthResponse])
async def login_with_code(data: LoginCodeRequest, db: Session = Depends(get_db)):
    """Login for family members that were given a login code instead of a password."""
    auth_service = AuthService(db)
    return Result.successful(data=auth_service.login_with_code(data.login_code))


@router.post("/refresh", response_model=Result[AccessTokenResponse])
async def refresh_token(data: RefreshRequest, db: Session = Depends(get_db)):
    """
    Get a new access token using a refresh token.

    Returns:
        Result[AccessTokenResponse]: Success result with new access token
    """
    auth_service = AuthService(db)
    return Result.successful(data=auth_service.refresh_access_token(data.refresh))


@router.get("/me", response_model=Result[UserResponse])
async def get_current_user_profile(current_user: User = Depends(get_current_user)):
    """
    Get current authenticated user's profile.

    Requires valid access token in Authorization header.
    """
    return Result.successful(data=UserResponse.model_validate(current_user))

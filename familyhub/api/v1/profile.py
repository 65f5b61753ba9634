from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from familyhub.database import get_db
from familyhub.dependencies import get_current_user
from familyhub.models.user import User
from familyhub.schemas.user import CompleteProfileRequest, UserResponse
from familyhub.schemas.family import CompleteProfileResponse, FamilyResponse
from familyhub.schemas.result import Result
from familyhub.services.user_service import UserService

router = APIRouter()


@router.post(
    "/complete",
    response_model=Result[CompleteProfileResponse],
    status_code=status.HTTP_201_CREATED,
)
async def complete_profile(
    data: CompleteProfileRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Finish onboarding: fill in the profile and create the user's family.

    Profile update, family, owner membership and locations are saved
    together or not at all.
    """
    service = UserService(db)
    user, family = service.complete_profile(current_user.id, data)
    return Result.successful(
        data=CompleteProfileResponse(
            user=UserResponse.model_validate(user),
            family=FamilyResponse.model_validate(family),
        )
    )

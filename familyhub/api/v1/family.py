from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from familyhub.database import get_db
from familyhub.dependencies import get_current_user
from familyhub.models.user import User
from familyhub.schemas.family import (
    AddFamilyMemberRequest,
    AddFamilyMemberResponse,
    FamilyMembersResponse,
    FamilyMemberEntry,
)
from familyhub.schemas.result import Result
from familyhub.services.family_service import FamilyService

router = APIRouter()


@router.post(
    "/{family_id}/members",
    response_model=Result[AddFamilyMemberResponse],
    status_code=status.HTTP_201_CREATED,
)
async def add_family_member(
    family_id: int,
    data: AddFamilyMemberRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Add a member to a family.

    Members without email or phone receive a 6-character login code.
    """
    service = FamilyService(db)
    result = service.add_member(family_id, current_user.id, data)
    return Result.successful(data=result)


@router.get("/{family_id}/members", response_model=Result[FamilyMembersResponse])
async def get_family_members(
    family_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get all family members with their roles."""
    service = FamilyService(db)
    members = service.get_members(family_id, current_user.id)
    return Result.successful(
        data=FamilyMembersResponse(
            members=[FamilyMemberEntry.model_validate(m) for m in members]
        )
    )

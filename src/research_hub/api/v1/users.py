from fastapi import APIRouter

from src.research_hub.api.dependencies import CurrentProfile, IdentityServiceDep
from src.research_hub.schemas.user import ProfileRead, ProfileUpdate

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=ProfileRead)
async def get_me(profile: CurrentProfile) -> ProfileRead:
    """Get the caller's profile."""
    return ProfileRead.model_validate(profile)


@router.patch("/me", response_model=ProfileRead)
async def update_me(
    data: ProfileUpdate, profile: CurrentProfile, service: IdentityServiceDep
) -> ProfileRead:
    """Update name, department, phone, year or GPA."""
    updated = await service.update_profile(profile, data)
    return ProfileRead.model_validate(updated)

"""Routes for the caller's own profile."""

from fastapi import APIRouter, Depends

from linkbio.api.deps import get_current_owner_id, get_profile_service
from linkbio.api.errors import raise_for_errors
from linkbio.api.schemas import ProfileCreateRequest, ProfileResponse, ProfileUpdateRequest
from linkbio.components.profiles import (
    CreateProfileInput,
    GetProfileInput,
    ProfileService,
    UpdateProfileInput,
    run_create,
    run_get,
    run_update,
)

router = APIRouter()


@router.get("/profile", response_model=ProfileResponse | None)
def get_profile(
    owner_id: str = Depends(get_current_owner_id),
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse | None:
    """The caller's profile, or null before one is created."""
    result = run_get(GetProfileInput(owner_id=owner_id), service)
    return ProfileResponse.from_entity(result.profile) if result.profile else None


@router.post("/profile", response_model=ProfileResponse, status_code=201)
def create_profile(
    data: ProfileCreateRequest,
    owner_id: str = Depends(get_current_owner_id),
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    result = run_create(
        CreateProfileInput(
            owner_id=owner_id,
            username=data.username,
            display_name=data.display_name,
            bio=data.bio,
            avatar_url=data.avatar_url,
            banner_url=data.banner_url,
            support_banner=data.support_banner,
        ),
        service,
    )
    if not result.success or result.profile is None:
        raise_for_errors(result.errors)
    return ProfileResponse.from_entity(result.profile)


@router.patch("/profile", response_model=ProfileResponse)
def update_profile(
    data: ProfileUpdateRequest,
    owner_id: str = Depends(get_current_owner_id),
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    result = run_update(
        UpdateProfileInput(
            owner_id=owner_id,
            username=data.username,
            display_name=data.display_name,
            bio=data.bio,
            avatar_url=data.avatar_url,
            banner_url=data.banner_url,
            support_banner=data.support_banner,
        ),
        service,
    )
    if not result.success or result.profile is None:
        raise_for_errors(result.errors)
    return ProfileResponse.from_entity(result.profile)

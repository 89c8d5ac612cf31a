"""Onboarding routes."""

from fastapi import APIRouter, Depends

from linkbio.api.deps import get_current_owner_id, get_onboarding_service
from linkbio.api.errors import raise_for_errors
from linkbio.api.schemas import (
    LinkResponse,
    OnboardingCompleteRequest,
    OnboardingCompleteResponse,
    OnboardingStateResponse,
    ProfileResponse,
)
from linkbio.components.onboarding import (
    CompleteOnboardingInput,
    GetOnboardingStateInput,
    OnboardingService,
    StarterLink,
    run_complete,
    run_get_state,
)

router = APIRouter()


@router.get("/onboarding", response_model=OnboardingStateResponse)
def get_onboarding_state(
    owner_id: str = Depends(get_current_owner_id),
    service: OnboardingService = Depends(get_onboarding_service),
) -> OnboardingStateResponse:
    result = run_get_state(GetOnboardingStateInput(owner_id=owner_id), service)
    return OnboardingStateResponse(is_onboarding_complete=result.is_onboarding_complete)


@router.post("/onboarding/complete", response_model=OnboardingCompleteResponse)
def complete_onboarding(
    data: OnboardingCompleteRequest,
    owner_id: str = Depends(get_current_owner_id),
    service: OnboardingService = Depends(get_onboarding_service),
) -> OnboardingCompleteResponse:
    """Create/update the profile and add starter links in one transaction."""
    input_data = CompleteOnboardingInput(
        owner_id=owner_id,
        username=data.username,
        display_name=data.display_name,
        bio=data.bio,
        avatar_url=data.avatar_url,
        banner_url=data.banner_url,
        links=tuple(
            StarterLink(
                title=link.title,
                url=link.url,
                type=link.type,
                platform_name=link.platform_name,
                platform_category=link.platform_category,
            )
            for link in data.links
        ),
    )
    result = run_complete(input_data, service)
    if not result.success or result.profile is None:
        raise_for_errors(result.errors)
    return OnboardingCompleteResponse(
        profile=ProfileResponse.from_entity(result.profile),
        links=[LinkResponse.from_entity(link) for link in result.links],
    )

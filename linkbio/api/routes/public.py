"""Public (unauthenticated) profile routes."""

from fastapi import APIRouter, Depends, HTTPException

from linkbio.api.deps import get_link_service, get_profile_service
from linkbio.api.schemas import LinkResponse, ProfileResponse, PublicProfileResponse
from linkbio.components.links import LinkService, ListPublicLinksInput, run_list_public
from linkbio.components.profiles import GetPublicProfileInput, ProfileService, run_get_public

router = APIRouter()


@router.get("/public/{username}", response_model=PublicProfileResponse)
def get_public_profile(
    username: str,
    service: ProfileService = Depends(get_profile_service),
) -> PublicProfileResponse:
    """Public profile with its visible links."""
    result = run_get_public(GetPublicProfileInput(username=username), service)
    if result.profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return PublicProfileResponse(
        profile=ProfileResponse.from_entity(result.profile),
        links=[LinkResponse.from_entity(link) for link in result.links],
    )


@router.get("/public/{username}/links", response_model=list[LinkResponse])
def list_public_links(
    username: str,
    service: LinkService = Depends(get_link_service),
) -> list[LinkResponse]:
    """Visible links for a username; empty when the profile does not exist."""
    result = run_list_public(ListPublicLinksInput(username=username), service)
    return [LinkResponse.from_entity(link) for link in result.links]

"""Routes for managing the caller's links."""

from fastapi import APIRouter, Depends

from linkbio.api.deps import get_current_owner_id, get_link_service
from linkbio.api.errors import raise_for_errors
from linkbio.api.schemas import (
    LinkCreateRequest,
    LinkResponse,
    LinkUpdateRequest,
    ReorderRequest,
    SuccessResponse,
)
from linkbio.components.links import (
    CreateLinkInput,
    DeleteLinkInput,
    LinkService,
    ListOwnerLinksInput,
    ReorderLinksInput,
    UpdateLinkInput,
    run_create,
    run_delete,
    run_list_for_owner,
    run_reorder,
    run_update,
)

router = APIRouter()


@router.get("/links", response_model=list[LinkResponse])
def list_links(
    owner_id: str = Depends(get_current_owner_id),
    service: LinkService = Depends(get_link_service),
) -> list[LinkResponse]:
    """List the caller's links, hidden ones included."""
    result = run_list_for_owner(ListOwnerLinksInput(owner_id=owner_id), service)
    return [LinkResponse.from_entity(link) for link in result.links]


@router.post("/links", response_model=LinkResponse, status_code=201)
def create_link(
    data: LinkCreateRequest,
    owner_id: str = Depends(get_current_owner_id),
    service: LinkService = Depends(get_link_service),
) -> LinkResponse:
    """Create a link."""
    input_data = CreateLinkInput(
        owner_id=owner_id,
        title=data.title,
        url=data.url,
        type=data.type,
        platform_name=data.platform_name,
        platform_category=data.platform_category,
        display_mode=data.display_mode,
        thumbnail_url=data.thumbnail_url,
        contact_type=data.contact_type,
        contact_value=data.contact_value,
        is_hidden=data.is_hidden,
    )
    result = run_create(input_data, service)
    if not result.success or result.link is None:
        raise_for_errors(result.errors)
    return LinkResponse.from_entity(result.link)


@router.post("/links/reorder", response_model=SuccessResponse)
def reorder_links(
    data: ReorderRequest,
    owner_id: str = Depends(get_current_owner_id),
    service: LinkService = Depends(get_link_service),
) -> SuccessResponse:
    """Reorder links; all ids must be the caller's."""
    result = run_reorder(
        ReorderLinksInput(owner_id=owner_id, ordered_ids=tuple(data.ordered_ids)), service
    )
    if not result.success:
        raise_for_errors(result.errors)
    return SuccessResponse(success=True)


@router.patch("/links/{link_id}", response_model=LinkResponse)
def update_link(
    link_id: int,
    data: LinkUpdateRequest,
    owner_id: str = Depends(get_current_owner_id),
    service: LinkService = Depends(get_link_service),
) -> LinkResponse:
    """Partially update a link."""
    input_data = UpdateLinkInput(
        owner_id=owner_id,
        link_id=link_id,
        title=data.title,
        url=data.url,
        is_hidden=data.is_hidden,
        platform_name=data.platform_name,
        platform_category=data.platform_category,
        display_mode=data.display_mode,
        thumbnail_url=data.thumbnail_url,
        contact_type=data.contact_type,
        contact_value=data.contact_value,
    )
    result = run_update(input_data, service)
    if not result.success or result.link is None:
        raise_for_errors(result.errors)
    return LinkResponse.from_entity(result.link)


@router.delete("/links/{link_id}", response_model=LinkResponse)
def delete_link(
    link_id: int,
    owner_id: str = Depends(get_current_owner_id),
    service: LinkService = Depends(get_link_service),
) -> LinkResponse:
    """Delete a link and return the deleted row."""
    result = run_delete(DeleteLinkInput(owner_id=owner_id, link_id=link_id), service)
    if not result.success or result.link is None:
        raise_for_errors(result.errors)
    return LinkResponse.from_entity(result.link)

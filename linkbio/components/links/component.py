"""
Links component - Link Collection Manager.

Shell Layer - converts service results into output models.
"""

from __future__ import annotations

from typing import Any

from ._impl import CONTACT_FIELDS, CUSTOM_FIELDS, PLATFORM_FIELDS, LinkService
from .models import (
    CreateLinkInput,
    DeleteLinkInput,
    LinkListOutput,
    LinkOperationOutput,
    ListOwnerLinksInput,
    ListPublicLinksInput,
    ReorderLinksInput,
    ReorderOutput,
    UpdateLinkInput,
)


def _type_fields(input_data: CreateLinkInput | UpdateLinkInput) -> dict[str, Any]:
    return {
        name: getattr(input_data, name)
        for name in PLATFORM_FIELDS + CUSTOM_FIELDS + CONTACT_FIELDS
        if getattr(input_data, name) is not None
    }


def run_list_for_owner(input_data: ListOwnerLinksInput, service: LinkService) -> LinkListOutput:
    """List the caller's links in display order."""
    links = service.list_for_owner(input_data.owner_id)
    return LinkListOutput(links=tuple(links), total=len(links))


def run_list_public(input_data: ListPublicLinksInput, service: LinkService) -> LinkListOutput:
    """List a profile's visible links in display order."""
    links = service.list_public(input_data.username)
    return LinkListOutput(links=tuple(links), total=len(links))


def run_create(input_data: CreateLinkInput, service: LinkService) -> LinkOperationOutput:
    """Create a link with its extension record."""
    link, errors = service.create(
        owner_id=input_data.owner_id,
        title=input_data.title,
        url=input_data.url,
        link_type=input_data.type,
        type_fields=_type_fields(input_data),
        is_hidden=input_data.is_hidden,
    )
    return LinkOperationOutput(link=link, errors=tuple(errors), success=link is not None)


def run_update(input_data: UpdateLinkInput, service: LinkService) -> LinkOperationOutput:
    """Update an existing link."""
    updates = _type_fields(input_data)
    if input_data.title is not None:
        updates["title"] = input_data.title
    if input_data.url is not None:
        updates["url"] = input_data.url
    if input_data.is_hidden is not None:
        updates["is_hidden"] = input_data.is_hidden

    link, errors = service.update(input_data.owner_id, input_data.link_id, updates)
    return LinkOperationOutput(link=link, errors=tuple(errors), success=link is not None)


def run_reorder(input_data: ReorderLinksInput, service: LinkService) -> ReorderOutput:
    """Reorder the caller's links."""
    success, errors = service.reorder(input_data.owner_id, list(input_data.ordered_ids))
    return ReorderOutput(errors=tuple(errors), success=success)


def run_delete(input_data: DeleteLinkInput, service: LinkService) -> LinkOperationOutput:
    """Delete a link."""
    link, errors = service.delete(input_data.owner_id, input_data.link_id)
    return LinkOperationOutput(link=link, errors=tuple(errors), success=link is not None)

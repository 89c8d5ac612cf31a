"""
Links component - Ordered, polymorphic link collection per profile.
"""

from ._impl import LinkConfig, LinkService, build_details, validate_link_fields
from .component import (
    run_create,
    run_delete,
    run_list_for_owner,
    run_list_public,
    run_reorder,
    run_update,
)
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
from .platforms import SUPPORTED_PLATFORMS, category_for, find_platform
from .ports import LinkRepoPort, ProfileLookupPort

__all__ = [
    # Entry points
    "run_list_for_owner",
    "run_list_public",
    "run_create",
    "run_update",
    "run_reorder",
    "run_delete",
    # Input models
    "ListOwnerLinksInput",
    "ListPublicLinksInput",
    "CreateLinkInput",
    "UpdateLinkInput",
    "ReorderLinksInput",
    "DeleteLinkInput",
    # Output models
    "LinkOperationOutput",
    "LinkListOutput",
    "ReorderOutput",
    # Ports
    "LinkRepoPort",
    "ProfileLookupPort",
    # Core
    "LinkConfig",
    "LinkService",
    "build_details",
    "validate_link_fields",
    # Catalog
    "SUPPORTED_PLATFORMS",
    "find_platform",
    "category_for",
]

"""
Profiles component - Profile Store.

Shell Layer - converts service results into output models.
"""

from __future__ import annotations

from typing import Any

from ._impl import ProfileService
from .models import (
    CreateProfileInput,
    GetProfileInput,
    GetPublicProfileInput,
    ProfileOutput,
    PublicProfileOutput,
    UpdateProfileInput,
)

_UPDATABLE_FIELDS = (
    "username",
    "display_name",
    "bio",
    "avatar_url",
    "banner_url",
    "support_banner",
)


def run_get(input_data: GetProfileInput, service: ProfileService) -> ProfileOutput:
    """Get the caller's profile; a missing profile is not an error."""
    profile = service.get_for_owner(input_data.owner_id)
    return ProfileOutput(profile=profile, errors=(), success=True)


def run_get_public(
    input_data: GetPublicProfileInput, service: ProfileService
) -> PublicProfileOutput:
    """Get a public profile and its visible links."""
    profile, links = service.get_public(input_data.username)
    return PublicProfileOutput(profile=profile, links=tuple(links))


def run_create(input_data: CreateProfileInput, service: ProfileService) -> ProfileOutput:
    """Claim a username and create the caller's profile."""
    profile, errors = service.create(
        owner_id=input_data.owner_id,
        username=input_data.username,
        display_name=input_data.display_name,
        bio=input_data.bio,
        avatar_url=input_data.avatar_url,
        banner_url=input_data.banner_url,
        support_banner=input_data.support_banner,
    )
    return ProfileOutput(profile=profile, errors=tuple(errors), success=profile is not None)


def run_update(input_data: UpdateProfileInput, service: ProfileService) -> ProfileOutput:
    """Partially update the caller's profile."""
    updates: dict[str, Any] = {}
    for name in _UPDATABLE_FIELDS:
        value = getattr(input_data, name)
        if value is not None:
            updates[name] = value

    profile, errors = service.update(input_data.owner_id, updates)
    return ProfileOutput(profile=profile, errors=tuple(errors), success=profile is not None)

"""
Profiles component - Profile identity and username uniqueness.
"""

from ._impl import (
    ProfileConfig,
    ProfileService,
    normalize_username,
    validate_profile_fields,
    validate_username,
)
from .component import run_create, run_get, run_get_public, run_update
from .models import (
    CreateProfileInput,
    GetProfileInput,
    GetPublicProfileInput,
    ProfileOutput,
    PublicProfileOutput,
    UpdateProfileInput,
)
from .ports import ProfileRepoPort, VisibleLinksPort

__all__ = [
    # Entry points
    "run_get",
    "run_get_public",
    "run_create",
    "run_update",
    # Input models
    "GetProfileInput",
    "GetPublicProfileInput",
    "CreateProfileInput",
    "UpdateProfileInput",
    # Output models
    "ProfileOutput",
    "PublicProfileOutput",
    # Ports
    "ProfileRepoPort",
    "VisibleLinksPort",
    # Core
    "ProfileConfig",
    "ProfileService",
    "normalize_username",
    "validate_username",
    "validate_profile_fields",
]

"""
Profiles component - Data models.

Partial-update convention: a field left as None is untouched; an empty
string clears a nullable text field (bio, avatar_url, banner_url).
"""

from __future__ import annotations

from dataclasses import dataclass, field

from linkbio.domain.entities import Link, Profile
from linkbio.domain.errors import DomainError

# --- Input Models ---


@dataclass(frozen=True)
class GetProfileInput:
    """Input for reading the caller's own profile."""

    owner_id: str


@dataclass(frozen=True)
class GetPublicProfileInput:
    """Input for reading a public profile by username."""

    username: str


@dataclass(frozen=True)
class CreateProfileInput:
    """Input for claiming a username."""

    owner_id: str
    username: str
    display_name: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    banner_url: str | None = None
    support_banner: str | None = None


@dataclass(frozen=True)
class UpdateProfileInput:
    """Input for a partial profile update."""

    owner_id: str
    username: str | None = None
    display_name: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    banner_url: str | None = None
    support_banner: str | None = None


# --- Output Models ---


@dataclass(frozen=True)
class ProfileOutput:
    """Output from a profile operation."""

    profile: Profile | None
    errors: tuple[DomainError, ...] = field(default_factory=tuple)
    success: bool = True


@dataclass(frozen=True)
class PublicProfileOutput:
    """Public profile with its visible links in display order."""

    profile: Profile | None
    links: tuple[Link, ...] = field(default_factory=tuple)

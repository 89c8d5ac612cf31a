"""
Onboarding component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from linkbio.domain.entities import Link, Profile
from linkbio.domain.errors import DomainError


@dataclass(frozen=True)
class StarterLink:
    """A link created during onboarding (custom or platform)."""

    title: str
    url: str
    type: str | None = None
    platform_name: str | None = None
    platform_category: str | None = None


@dataclass(frozen=True)
class GetOnboardingStateInput:
    owner_id: str


@dataclass(frozen=True)
class CompleteOnboardingInput:
    owner_id: str
    username: str
    display_name: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    banner_url: str | None = None
    links: tuple[StarterLink, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class OnboardingStateOutput:
    is_onboarding_complete: bool


@dataclass(frozen=True)
class CompleteOnboardingOutput:
    profile: Profile | None
    links: tuple[Link, ...] = field(default_factory=tuple)
    errors: tuple[DomainError, ...] = field(default_factory=tuple)
    success: bool = True

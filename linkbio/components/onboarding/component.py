"""
Onboarding component - first-run setup.

Shell Layer - converts service results into output models.
"""

from __future__ import annotations

from ._impl import OnboardingService
from .models import (
    CompleteOnboardingInput,
    CompleteOnboardingOutput,
    GetOnboardingStateInput,
    OnboardingStateOutput,
)


def run_get_state(
    input_data: GetOnboardingStateInput, service: OnboardingService
) -> OnboardingStateOutput:
    return OnboardingStateOutput(is_onboarding_complete=service.is_complete(input_data.owner_id))


def run_complete(
    input_data: CompleteOnboardingInput, service: OnboardingService
) -> CompleteOnboardingOutput:
    """Create/update the profile and starter links in one transaction."""
    profile, links, errors = service.complete(
        owner_id=input_data.owner_id,
        username=input_data.username,
        display_name=input_data.display_name,
        bio=input_data.bio,
        avatar_url=input_data.avatar_url,
        banner_url=input_data.banner_url,
        links=list(input_data.links),
    )
    return CompleteOnboardingOutput(
        profile=profile,
        links=tuple(links),
        errors=tuple(errors),
        success=profile is not None,
    )

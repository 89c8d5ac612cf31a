"""
Onboarding component - first-run profile and starter links.
"""

from ._impl import OnboardingService
from .component import run_complete, run_get_state
from .models import (
    CompleteOnboardingInput,
    CompleteOnboardingOutput,
    GetOnboardingStateInput,
    OnboardingStateOutput,
    StarterLink,
)
from .ports import UnitOfWorkFactory, UnitOfWorkPort

__all__ = [
    "run_get_state",
    "run_complete",
    "GetOnboardingStateInput",
    "CompleteOnboardingInput",
    "StarterLink",
    "OnboardingStateOutput",
    "CompleteOnboardingOutput",
    "UnitOfWorkPort",
    "UnitOfWorkFactory",
    "OnboardingService",
]

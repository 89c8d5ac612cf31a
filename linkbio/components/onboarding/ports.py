"""
Onboarding component - Port interfaces.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol

from linkbio.domain.entities import Link, Profile


class OnboardingProfilesPort(Protocol):
    def get_by_owner(self, owner_id: str) -> Profile | None:
        ...

    def get_by_username(self, username: str) -> Profile | None:
        ...

    def create(self, profile: Profile) -> Profile:
        ...

    def update(self, profile: Profile) -> Profile:
        ...


class OnboardingLinksPort(Protocol):
    def create_many(self, links: list[Link]) -> list[Link]:
        ...


class UnitOfWorkPort(Protocol):
    """One transaction spanning profile and link writes."""

    @property
    def profiles(self) -> OnboardingProfilesPort:
        ...

    @property
    def links(self) -> OnboardingLinksPort:
        ...

    def __enter__(self) -> UnitOfWorkPort:
        ...

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        ...

    def commit(self) -> None:
        ...


UnitOfWorkFactory = Callable[[], UnitOfWorkPort]

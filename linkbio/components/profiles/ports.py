"""
Profiles component - Port interfaces.
"""

from __future__ import annotations

from typing import Protocol

from linkbio.domain.entities import Link, Profile


class ProfileRepoPort(Protocol):
    """Repository interface for profiles."""

    def get_by_id(self, profile_id: int) -> Profile | None:
        ...

    def get_by_owner(self, owner_id: str) -> Profile | None:
        ...

    def get_by_username(self, username: str) -> Profile | None:
        """Case-insensitive lookup."""
        ...

    def create(self, profile: Profile) -> Profile:
        """Insert profile. Raises UniqueViolationError on username/owner clash."""
        ...

    def update(self, profile: Profile) -> Profile:
        """Persist profile. Raises UniqueViolationError on username clash."""
        ...


class VisibleLinksPort(Protocol):
    """Read access to a profile's links."""

    def list_by_profile(self, profile_id: int, include_hidden: bool = True) -> list[Link]:
        ...

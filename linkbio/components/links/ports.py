"""
Links component - Port interfaces.
"""

from __future__ import annotations

from typing import Protocol

from linkbio.domain.entities import Link, Profile


class LinkRepoPort(Protocol):
    """Repository interface for links and their extension records."""

    def list_by_profile(self, profile_id: int, include_hidden: bool = True) -> list[Link]:
        """Links ordered by sort_order, then id."""
        ...

    def get_by_id(self, link_id: int) -> Link | None:
        ...

    def create(self, link: Link) -> Link:
        """Insert base row and extension atomically, appended after the last link."""
        ...

    def update(self, link: Link) -> Link:
        """Persist base fields and upsert the extension."""
        ...

    def reorder(self, profile_id: int, ordered_ids: list[int]) -> bool:
        """Assign sort_order = index. False (no writes) if any id is not owned."""
        ...

    def delete(self, profile_id: int, link_id: int) -> Link | None:
        """Delete an owned link; None when missing or not owned."""
        ...


class ProfileLookupPort(Protocol):
    """Profile resolution needed by the link manager."""

    def get_by_owner(self, owner_id: str) -> Profile | None:
        ...

    def get_by_username(self, username: str) -> Profile | None:
        ...

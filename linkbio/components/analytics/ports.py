"""
Analytics component - Port interfaces.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol

from linkbio.domain.entities import AnalyticsEvent, Link, Profile


class EventStorePort(Protocol):
    """Append-only event store."""

    def append(self, event: AnalyticsEvent) -> AnalyticsEvent:
        ...


class AnalyticsQueryPort(Protocol):
    """Read side of the event store. Ranges are inclusive on both ends."""

    def count_by_type(self, profile_id: int, start: datetime, end: datetime) -> dict[str, int]:
        ...

    def list_events(self, profile_id: int, start: datetime, end: datetime) -> list[AnalyticsEvent]:
        ...

    def top_links(
        self, profile_id: int, start: datetime, end: datetime, limit: int = 5
    ) -> list[dict[str, Any]]:
        """Rows with id, title, url, clicks; clicks DESC then id ASC."""
        ...

    def count_link_clicks(self, link_id: int) -> int:
        ...


class ProfileLookupPort(Protocol):
    def get_by_owner(self, owner_id: str) -> Profile | None:
        ...

    def get_by_username(self, username: str) -> Profile | None:
        ...


class LinkLookupPort(Protocol):
    def get_by_id(self, link_id: int) -> Link | None:
        ...

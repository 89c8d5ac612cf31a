"""
Event ingestion and reporting.

Tracking is best-effort: a missing profile or link is a silent no-op and
storage failures are logged, never raised to the caller.
"""

from __future__ import annotations

import logging
from datetime import date, datetime

from linkbio.domain.entities import AnalyticsEvent
from linkbio.domain.errors import DomainError, forbidden, not_found
from linkbio.ports.clock import ClockPort

from ._aggregate import DEFAULT_CONFIG, AggregatorService, AnalyticsConfig
from ._window import resolve_date_window, validate_window_request
from .models import StatsReport
from .ports import AnalyticsQueryPort, EventStorePort, LinkLookupPort, ProfileLookupPort

logger = logging.getLogger(__name__)


class EventIngestionService:
    """Records view and click events."""

    def __init__(
        self,
        events: EventStorePort,
        profiles: ProfileLookupPort,
        links: LinkLookupPort,
        clock: ClockPort,
    ) -> None:
        self._events = events
        self._profiles = profiles
        self._links = links
        self._clock = clock

    def record_view(self, username: str) -> bool:
        """Record a profile view. Returns whether an event was written."""
        try:
            profile = self._profiles.get_by_username(username)
            if profile is None or profile.id is None:
                return False
            self._events.append(
                AnalyticsEvent(
                    profile_id=profile.id,
                    link_id=None,
                    type="view",
                    created_at=self._clock.now_utc(),
                )
            )
            return True
        except Exception:
            logger.exception("Failed to record view for %r", username)
            return False

    def record_click(self, link_id: int) -> bool:
        """Record an outbound click. Returns whether an event was written."""
        try:
            link = self._links.get_by_id(link_id)
            if link is None:
                return False
            self._events.append(
                AnalyticsEvent(
                    profile_id=link.profile_id,
                    link_id=link.id,
                    type="click",
                    created_at=self._clock.now_utc(),
                )
            )
            return True
        except Exception:
            logger.exception("Failed to record click for link %s", link_id)
            return False


class ReportingService:
    """
    Reporting facade over the aggregator.

    Resolves the caller's profile and window, then composes the report.
    """

    def __init__(
        self,
        repo: AnalyticsQueryPort,
        profiles: ProfileLookupPort,
        links: LinkLookupPort,
        clock: ClockPort,
        config: AnalyticsConfig | None = None,
    ) -> None:
        self._repo = repo
        self._profiles = profiles
        self._links = links
        self._clock = clock
        self._config = config or DEFAULT_CONFIG
        self._aggregator = AggregatorService(repo, self._config)

    def get_stats(
        self,
        owner_id: str,
        range_name: str | None = None,
        date_from: date | datetime | None = None,
        date_to: date | datetime | None = None,
    ) -> tuple[StatsReport | None, list[DomainError]]:
        """
        Stats for the caller's profile over the requested window.

        Returns:
            Tuple of (report, errors). Report is None on failure.
        """
        tz = self._config.tz
        errors = validate_window_request(range_name, date_from, date_to, tz)
        if errors:
            return None, errors

        profile = self._profiles.get_by_owner(owner_id)
        if profile is None or profile.id is None:
            return None, [not_found("profile_not_found", "Profile not found")]

        window = resolve_date_window(
            self._clock.now_utc(),
            range_name=range_name,
            date_from=date_from,
            date_to=date_to,
            tz=tz,
            default_range=self._config.default_range,
        )
        return self._aggregator.compute_stats(profile.id, window), []

    def get_link_click_count(
        self, owner_id: str, link_id: int
    ) -> tuple[int | None, list[DomainError]]:
        """All-time clicks for one of the caller's links."""
        link = self._links.get_by_id(link_id)
        if link is None:
            return None, [not_found("link_not_found", f"Link {link_id} not found")]

        profile = self._profiles.get_by_owner(owner_id)
        if profile is None or profile.id != link.profile_id:
            return None, [forbidden("link_not_owned", "You do not own this link")]

        return self._repo.count_link_clicks(link_id), []

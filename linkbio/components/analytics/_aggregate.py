"""
Analytics aggregation - rollups, comparisons and hourly buckets.

Key behaviors:
- Count events per type inside an inclusive window
- Compare against the equally long previous window
- Bucket events by hour (sparse, ascending by bucket key)
- Rank links by clicks with a deterministic tie-break
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime, tzinfo
from zoneinfo import ZoneInfo

from linkbio.domain.entities import AnalyticsEvent
from linkbio.rules.models import AnalyticsRules

from ._window import DEFAULT_RANGE, DateWindow, previous_window
from .models import ChartPoint, StatsReport, TopLink
from .ports import AnalyticsQueryPort

BUCKET_KEY_FORMAT = "%Y-%m-%d %H:00:00"

# --- Configuration ---


@dataclass(frozen=True)
class AnalyticsConfig:
    """Reporting configuration."""

    default_range: str = DEFAULT_RANGE
    top_links_limit: int = 5
    timezone: str = "UTC"

    @classmethod
    def from_rules(cls, rules: AnalyticsRules | None) -> AnalyticsConfig:
        if rules is None:
            return cls()
        return cls(
            default_range=rules.default_range,
            top_links_limit=rules.top_links_limit,
            timezone=rules.timezone,
        )

    @property
    def tz(self) -> tzinfo:
        if self.timezone.upper() == "UTC":
            return UTC
        return ZoneInfo(self.timezone)


DEFAULT_CONFIG = AnalyticsConfig()


# --- Pure math ---


def click_through_rate(clicks: int, views: int) -> float:
    """Clicks per 100 views; 0 when there were no views."""
    if views <= 0:
        return 0.0
    return clicks / views * 100


def percent_change(current: float, previous: float) -> float:
    """
    Period-over-period change in percent.

    100 when the previous value is 0 and the current one is positive;
    0 when both are 0.
    """
    if previous > 0:
        return (current - previous) / previous * 100
    if current > 0:
        return 100.0
    return 0.0


# --- Bucket Calculation ---


def calculate_bucket_start(timestamp: datetime, tz: tzinfo = UTC) -> datetime:
    """
    Start of the hourly bucket containing ``timestamp``.

    Naive timestamps are treated as UTC; truncation happens in ``tz``.
    """
    if timestamp.tzinfo is None:
        ts = timestamp.replace(tzinfo=UTC).astimezone(tz)
    else:
        ts = timestamp.astimezone(tz)

    return ts.replace(minute=0, second=0, microsecond=0)


def bucket_events(events: Iterable[AnalyticsEvent], tz: tzinfo = UTC) -> list[ChartPoint]:
    """Group events into sparse hourly buckets, ascending by key."""
    views: dict[str, int] = defaultdict(int)
    clicks: dict[str, int] = defaultdict(int)

    for event in events:
        key = calculate_bucket_start(event.created_at, tz).strftime(BUCKET_KEY_FORMAT)
        if event.type == "view":
            views[key] += 1
        elif event.type == "click":
            clicks[key] += 1

    keys = sorted(set(views) | set(clicks))
    return [ChartPoint(timestamp=k, views=views[k], clicks=clicks[k]) for k in keys]


def rank_top_links(rows: Iterable[dict], limit: int = 5) -> list[TopLink]:
    """Order by clicks DESC, id ASC and cut to ``limit``."""
    ranked = sorted(rows, key=lambda r: (-int(r["clicks"]), int(r["id"])))
    return [
        TopLink(id=r["id"], title=r["title"], url=r["url"], clicks=int(r["clicks"]))
        for r in ranked[:limit]
    ]


# --- Aggregator ---


class AggregatorService:
    """
    Computes a StatsReport for one profile and window.

    Each figure comes from its own query; there is no shared snapshot.
    """

    def __init__(self, repo: AnalyticsQueryPort, config: AnalyticsConfig | None = None) -> None:
        self._repo = repo
        self._config = config or DEFAULT_CONFIG

    def compute_stats(self, profile_id: int, window: DateWindow) -> StatsReport:
        current = self._repo.count_by_type(profile_id, window.start, window.end)
        prev = previous_window(window)
        previous = self._repo.count_by_type(profile_id, prev.start, prev.end)

        total_views = int(current.get("view", 0))
        total_clicks = int(current.get("click", 0))
        prev_views = int(previous.get("view", 0))
        prev_clicks = int(previous.get("click", 0))

        ctr = click_through_rate(total_clicks, total_views)
        prev_ctr = click_through_rate(prev_clicks, prev_views)

        events = self._repo.list_events(profile_id, window.start, window.end)
        top = self._repo.top_links(
            profile_id, window.start, window.end, limit=self._config.top_links_limit
        )

        return StatsReport(
            start=window.start,
            end=window.end,
            total_views=total_views,
            total_clicks=total_clicks,
            ctr=ctr,
            prev_total_views=prev_views,
            prev_total_clicks=prev_clicks,
            prev_ctr=prev_ctr,
            views_change=percent_change(total_views, prev_views),
            clicks_change=percent_change(total_clicks, prev_clicks),
            ctr_change=percent_change(ctr, prev_ctr),
            chart_data=tuple(bucket_events(events, self._config.tz)),
            top_links=tuple(rank_top_links(top, self._config.top_links_limit)),
        )

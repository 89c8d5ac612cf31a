"""
Analytics component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime

from linkbio.domain.errors import DomainError

# --- Input Models ---


@dataclass(frozen=True)
class RecordViewInput:
    """A public profile render."""

    username: str


@dataclass(frozen=True)
class RecordClickInput:
    """An outbound link activation."""

    link_id: int


@dataclass(frozen=True)
class GetStatsInput:
    """Stats request: a named range, or an explicit from/to pair."""

    owner_id: str
    range: str | None = None
    date_from: date | datetime | None = None
    date_to: date | datetime | None = None


@dataclass(frozen=True)
class GetLinkClickCountInput:
    owner_id: str
    link_id: int


# --- Report Models ---


@dataclass(frozen=True)
class ChartPoint:
    """One hourly bucket; timestamp is 'YYYY-MM-DD HH:00:00'."""

    timestamp: str
    views: int = 0
    clicks: int = 0


@dataclass(frozen=True)
class TopLink:
    id: int
    title: str
    url: str
    clicks: int


@dataclass(frozen=True)
class StatsReport:
    """Period totals, previous-period comparison, chart and top links."""

    start: datetime
    end: datetime
    total_views: int
    total_clicks: int
    ctr: float
    prev_total_views: int
    prev_total_clicks: int
    prev_ctr: float
    views_change: float
    clicks_change: float
    ctr_change: float
    chart_data: tuple[ChartPoint, ...] = field(default_factory=tuple)
    top_links: tuple[TopLink, ...] = field(default_factory=tuple)


# --- Output Models ---


@dataclass(frozen=True)
class TrackOutput:
    """Tracking always reports acceptance; ``recorded`` says whether a row was written."""

    success: bool = True
    recorded: bool = False


@dataclass(frozen=True)
class StatsOutput:
    report: StatsReport | None
    errors: tuple[DomainError, ...] = field(default_factory=tuple)
    success: bool = True


@dataclass(frozen=True)
class LinkClickCountOutput:
    link_id: int
    click_count: int = 0
    errors: tuple[DomainError, ...] = field(default_factory=tuple)
    success: bool = True

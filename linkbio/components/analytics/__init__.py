"""
Analytics component - Event ingestion, aggregation and reporting.
"""

from ._aggregate import (
    AggregatorService,
    AnalyticsConfig,
    bucket_events,
    calculate_bucket_start,
    click_through_rate,
    percent_change,
    rank_top_links,
)
from ._impl import EventIngestionService, ReportingService
from ._window import (
    NAMED_RANGES,
    DateWindow,
    previous_window,
    resolve_date_window,
    validate_window_request,
)
from .component import (
    run_get_link_click_count,
    run_get_stats,
    run_record_click,
    run_record_view,
)
from .models import (
    ChartPoint,
    GetLinkClickCountInput,
    GetStatsInput,
    LinkClickCountOutput,
    RecordClickInput,
    RecordViewInput,
    StatsOutput,
    StatsReport,
    TopLink,
    TrackOutput,
)
from .ports import AnalyticsQueryPort, EventStorePort, LinkLookupPort, ProfileLookupPort

__all__ = [
    # Entry points
    "run_record_view",
    "run_record_click",
    "run_get_stats",
    "run_get_link_click_count",
    # Input models
    "RecordViewInput",
    "RecordClickInput",
    "GetStatsInput",
    "GetLinkClickCountInput",
    # Output models
    "TrackOutput",
    "StatsOutput",
    "StatsReport",
    "ChartPoint",
    "TopLink",
    "LinkClickCountOutput",
    # Ports
    "EventStorePort",
    "AnalyticsQueryPort",
    "ProfileLookupPort",
    "LinkLookupPort",
    # Services
    "EventIngestionService",
    "ReportingService",
    "AggregatorService",
    "AnalyticsConfig",
    # Pure functions
    "DateWindow",
    "NAMED_RANGES",
    "bucket_events",
    "calculate_bucket_start",
    "click_through_rate",
    "percent_change",
    "previous_window",
    "rank_top_links",
    "resolve_date_window",
    "validate_window_request",
]

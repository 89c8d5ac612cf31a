"""
Analytics component - Event ingestion and reporting.

Shell Layer - converts service results into output models.

Invariants:
- Tracking never surfaces an error to the caller
- Reports are scoped to the caller's own profile
"""

from __future__ import annotations

from ._impl import EventIngestionService, ReportingService
from .models import (
    GetLinkClickCountInput,
    GetStatsInput,
    LinkClickCountOutput,
    RecordClickInput,
    RecordViewInput,
    StatsOutput,
    TrackOutput,
)


def run_record_view(input_data: RecordViewInput, service: EventIngestionService) -> TrackOutput:
    """Record a profile view (best-effort)."""
    recorded = service.record_view(input_data.username)
    return TrackOutput(success=True, recorded=recorded)


def run_record_click(input_data: RecordClickInput, service: EventIngestionService) -> TrackOutput:
    """Record a link click (best-effort)."""
    recorded = service.record_click(input_data.link_id)
    return TrackOutput(success=True, recorded=recorded)


def run_get_stats(input_data: GetStatsInput, service: ReportingService) -> StatsOutput:
    """Build the stats report for the caller."""
    report, errors = service.get_stats(
        owner_id=input_data.owner_id,
        range_name=input_data.range,
        date_from=input_data.date_from,
        date_to=input_data.date_to,
    )
    return StatsOutput(report=report, errors=tuple(errors), success=report is not None)


def run_get_link_click_count(
    input_data: GetLinkClickCountInput, service: ReportingService
) -> LinkClickCountOutput:
    """All-time click count for one of the caller's links."""
    count, errors = service.get_link_click_count(input_data.owner_id, input_data.link_id)
    return LinkClickCountOutput(
        link_id=input_data.link_id,
        click_count=count or 0,
        errors=tuple(errors),
        success=count is not None,
    )

"""
Tests for analytics aggregation: CTR, period-over-period change,
hourly bucketing and top-link ranking.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest

from linkbio.components.analytics import (
    AggregatorService,
    AnalyticsConfig,
    DateWindow,
    bucket_events,
    calculate_bucket_start,
    click_through_rate,
    percent_change,
    rank_top_links,
)
from linkbio.domain.entities import AnalyticsEvent


def _event(kind: str, at: datetime, link_id: int | None = None) -> AnalyticsEvent:
    return AnalyticsEvent(profile_id=1, link_id=link_id, type=kind, created_at=at)


# --- Pure math ---


class TestClickThroughRate:
    def test_zero_views_is_zero(self) -> None:
        assert click_through_rate(0, 0) == 0
        assert click_through_rate(3, 0) == 0

    def test_ratio_in_percent(self) -> None:
        assert click_through_rate(1, 4) == 25.0

    def test_not_rounded(self) -> None:
        assert click_through_rate(1, 3) == pytest.approx(33.3333333)


class TestPercentChange:
    def test_from_zero_to_positive_is_100(self) -> None:
        assert percent_change(5, 0) == 100

    def test_both_zero_is_zero(self) -> None:
        assert percent_change(0, 0) == 0

    def test_growth_and_decline(self) -> None:
        assert percent_change(15, 10) == 50.0
        assert percent_change(5, 10) == -50.0
        assert percent_change(0, 10) == -100.0

    def test_applies_to_floats(self) -> None:
        assert percent_change(37.5, 25.0) == 50.0


# --- Buckets ---


class TestCalculateBucketStart:
    def test_hour_truncation(self) -> None:
        ts = datetime(2024, 3, 15, 10, 42, 17, 123, tzinfo=UTC)
        assert calculate_bucket_start(ts) == datetime(2024, 3, 15, 10, tzinfo=UTC)

    def test_naive_is_utc(self) -> None:
        ts = datetime(2024, 3, 15, 10, 42)
        assert calculate_bucket_start(ts) == datetime(2024, 3, 15, 10, tzinfo=UTC)

    def test_truncates_in_reporting_timezone(self) -> None:
        half_hour = timezone(timedelta(hours=5, minutes=30))
        ts = datetime(2024, 3, 15, 10, 10, tzinfo=UTC)  # 15:40 local
        start = calculate_bucket_start(ts, half_hour)
        assert start.hour == 15
        assert start.minute == 0


class TestBucketEvents:
    def test_hourly_buckets_are_sparse(self) -> None:
        day = datetime(2024, 3, 15, tzinfo=UTC)
        events = [
            _event("view", day.replace(hour=10, minute=5)),
            _event("view", day.replace(hour=10, minute=42)),
            _event("view", day.replace(hour=11, minute=1)),
        ]

        points = bucket_events(events)

        assert [(p.timestamp, p.views, p.clicks) for p in points] == [
            ("2024-03-15 10:00:00", 2, 0),
            ("2024-03-15 11:00:00", 1, 0),
        ]

    def test_views_and_clicks_share_buckets(self) -> None:
        at = datetime(2024, 3, 15, 9, 30, tzinfo=UTC)
        points = bucket_events([_event("view", at), _event("click", at, link_id=3)])
        assert len(points) == 1
        assert (points[0].views, points[0].clicks) == (1, 1)

    def test_ascending_regardless_of_input_order(self) -> None:
        events = [
            _event("click", datetime(2024, 3, 15, 14, 0, tzinfo=UTC), link_id=1),
            _event("view", datetime(2024, 3, 14, 23, 59, tzinfo=UTC)),
            _event("view", datetime(2024, 3, 15, 0, 0, tzinfo=UTC)),
        ]
        keys = [p.timestamp for p in bucket_events(events)]
        assert keys == ["2024-03-14 23:00:00", "2024-03-15 00:00:00", "2024-03-15 14:00:00"]

    def test_empty(self) -> None:
        assert bucket_events([]) == []


class TestRankTopLinks:
    def test_ties_broken_by_id(self) -> None:
        rows = [
            {"id": 2, "title": "L2", "url": "https://b.example", "clicks": 5},
            {"id": 3, "title": "L3", "url": "https://c.example", "clicks": 10},
            {"id": 1, "title": "L1", "url": "https://a.example", "clicks": 5},
        ]
        assert [link.id for link in rank_top_links(rows)] == [3, 1, 2]

    def test_limit(self) -> None:
        rows = [{"id": i, "title": f"L{i}", "url": "https://x.example", "clicks": i} for i in range(10)]
        ranked = rank_top_links(rows, limit=5)
        assert [link.id for link in ranked] == [9, 8, 7, 6, 5]


# --- Aggregator ---


class StubQueryRepo:
    """Canned answers keyed by window start."""

    def __init__(self, counts: dict[datetime, dict[str, int]]) -> None:
        self.counts = counts
        self.events: list[AnalyticsEvent] = []
        self.top: list[dict] = []

    def count_by_type(self, profile_id: int, start: datetime, end: datetime) -> dict[str, int]:
        return self.counts.get(start, {"view": 0, "click": 0})

    def list_events(self, profile_id: int, start: datetime, end: datetime) -> list[AnalyticsEvent]:
        return [e for e in self.events if start <= e.created_at <= end]

    def top_links(self, profile_id: int, start: datetime, end: datetime, limit: int = 5) -> list[dict]:
        return self.top[:limit]

    def count_link_clicks(self, link_id: int) -> int:
        return 0


WINDOW = DateWindow(
    start=datetime(2024, 3, 8, tzinfo=UTC),
    end=datetime(2024, 3, 15, 23, 59, 59, 999000, tzinfo=UTC),
)
PREV_START = WINDOW.start - WINDOW.duration


class TestAggregatorService:
    def test_empty_window(self) -> None:
        report = AggregatorService(StubQueryRepo({})).compute_stats(1, WINDOW)

        assert report.total_views == 0
        assert report.total_clicks == 0
        assert report.ctr == 0
        assert report.views_change == 0
        assert report.clicks_change == 0
        assert report.ctr_change == 0
        assert report.chart_data == ()
        assert report.top_links == ()

    def test_previous_period_comparison(self) -> None:
        repo = StubQueryRepo(
            {
                WINDOW.start: {"view": 8, "click": 2},
                PREV_START: {"view": 4, "click": 2},
            }
        )
        report = AggregatorService(repo).compute_stats(1, WINDOW)

        assert report.ctr == 25.0
        assert report.prev_ctr == 50.0
        assert report.views_change == 100.0
        assert report.clicks_change == 0.0
        assert report.ctr_change == -50.0

    def test_previous_zero_current_positive(self) -> None:
        repo = StubQueryRepo({WINDOW.start: {"view": 5, "click": 0}})
        report = AggregatorService(repo).compute_stats(1, WINDOW)
        assert report.prev_total_views == 0
        assert report.views_change == 100

    def test_echoes_window(self) -> None:
        report = AggregatorService(StubQueryRepo({})).compute_stats(1, WINDOW)
        assert report.start == WINDOW.start
        assert report.end == WINDOW.end

    def test_top_links_limit_from_config(self) -> None:
        repo = StubQueryRepo({})
        repo.top = [
            {"id": i, "title": f"L{i}", "url": "https://x.example", "clicks": 10 - i}
            for i in range(1, 6)
        ]
        report = AggregatorService(repo, AnalyticsConfig(top_links_limit=2)).compute_stats(1, WINDOW)
        assert [link.id for link in report.top_links] == [1, 2]

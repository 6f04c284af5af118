"""Unit tests for admin analytics."""

from datetime import datetime, timezone

import pytest

from core.clock import MS_PER_DAY, MS_PER_HOUR
from core.exceptions import ValidationError
from domain.entities.analytics import TimeRange
from domain.entities.profile import UserProfile
from domain.repositories.errors import OrderedQueryUnavailable
from domain.services.analytics_service import (
    AnalyticsService,
    bucket_edges,
    build_report,
    count_created_between,
    growth_percentage,
    parse_time_range,
    window_bounds,
)
from tests.unit.conftest import FakeUnitOfWork


def _profile(n: int, created_at: int, last_active: int | None = None) -> UserProfile:
    return UserProfile(
        uid=f"u{n}",
        username=f"user{n}",
        created_at=created_at,
        last_active=last_active,
    )


@pytest.fixture
def service(uow: FakeUnitOfWork) -> AnalyticsService:
    return AnalyticsService(lambda: uow, profile_limit=1000)


class TestGrowthPercentage:
    def test_from_zero_is_hundred(self) -> None:
        assert growth_percentage(3, 0) == 100.0

    def test_zero_to_zero(self) -> None:
        assert growth_percentage(0, 0) == 0.0

    def test_rounded_to_one_decimal(self) -> None:
        assert growth_percentage(4, 3) == 33.3

    def test_decline(self) -> None:
        assert growth_percentage(1, 4) == -75.0


class TestWindows:
    def test_week_window(self, now: int) -> None:
        assert window_bounds(TimeRange.WEEK, now) == (now + 1 - 7 * MS_PER_DAY, now + 1)

    def test_all_starts_at_epoch(self, now: int) -> None:
        assert window_bounds(TimeRange.ALL, now) == (0, now + 1)

    def test_half_open(self, now: int) -> None:
        profiles = [_profile(1, now - MS_PER_DAY), _profile(2, now)]
        assert count_created_between(profiles, now - MS_PER_DAY, now) == 1

    def test_parse_time_range(self) -> None:
        assert parse_time_range("30d") is TimeRange.MONTH

    def test_parse_unknown_time_range(self) -> None:
        with pytest.raises(ValidationError):
            parse_time_range("1y")


class TestBucketEdges:
    def test_hourly_for_day(self, now: int) -> None:
        edges = bucket_edges(TimeRange.DAY, now)
        assert len(edges) == 24
        assert edges[-1] == (now + 1 - MS_PER_HOUR, now + 1)

    def test_daily_for_month(self, now: int) -> None:
        edges = bucket_edges(TimeRange.MONTH, now)
        assert len(edges) == 30
        assert edges[0][0] == now + 1 - 30 * MS_PER_DAY

    def test_monthly_for_all(self, now: int) -> None:
        """12 calendar months, the last one being the current month."""
        edges = bucket_edges(TimeRange.ALL, now)
        assert len(edges) == 12
        first = datetime.fromtimestamp(edges[0][0] / 1000, tz=timezone.utc)
        last_end = datetime.fromtimestamp(edges[-1][1] / 1000, tz=timezone.utc)
        assert (first.year, first.month, first.day) == (2025, 2, 1)
        assert (last_end.year, last_end.month, last_end.day) == (2026, 2, 1)
        for (_, end), (start, _) in zip(edges, edges[1:]):
            assert end == start


class TestBuildReport:
    def test_week_scenario(self, now: int) -> None:
        """Three users 2 days old, one 10 days old."""
        profiles = [
            _profile(1, now - 2 * MS_PER_DAY, last_active=now - MS_PER_HOUR),
            _profile(2, now - 2 * MS_PER_DAY),
            _profile(3, now - 2 * MS_PER_DAY, last_active=now - 2 * MS_PER_DAY),
            _profile(4, now - 10 * MS_PER_DAY, last_active=now - 24 * MS_PER_HOUR),
        ]

        report = build_report(profiles, TimeRange.WEEK, now, total_questions=9, total_answers=4)

        assert report.total == 4
        assert report.new == 3
        assert report.active == 2
        # previous window holds the 10-day-old user
        assert report.growth_pct == 200.0
        assert report.total_questions == 9
        assert report.total_answers == 4
        assert len(report.series) == 7
        assert sum(b.count for b in report.series) == 3

    def test_growth_from_empty_previous_window(self, now: int) -> None:
        profiles = [_profile(i, now - 2 * MS_PER_DAY) for i in range(3)]

        report = build_report(profiles, TimeRange.WEEK, now)

        assert report.new == 3
        assert report.growth_pct == 100.0

    @pytest.mark.parametrize("time_range", [TimeRange.DAY, TimeRange.WEEK, TimeRange.ALL])
    def test_profile_created_at_query_instant_counts(
        self, now: int, time_range: TimeRange
    ) -> None:
        report = build_report([_profile(1, now)], time_range, now)

        assert report.new == 1
        assert report.series[-1].count == 1

    def test_empty(self, now: int) -> None:
        report = build_report([], TimeRange.DAY, now)

        assert report.total == 0
        assert report.active == 0
        assert report.growth_pct == 0.0


class TestGetAdminAnalytics:
    @pytest.mark.asyncio
    async def test_uses_ordered_profiles(
        self, service: AnalyticsService, uow: FakeUnitOfWork, now: int
    ) -> None:
        uow.profiles.list_recent.return_value = [_profile(1, now - MS_PER_DAY)]
        uow.questions.count.return_value = 5
        uow.answers.count.return_value = 2

        report = await service.get_admin_analytics("7d", now=now)

        assert report.total == 1
        assert report.new == 1
        assert report.total_questions == 5
        assert report.total_answers == 2
        uow.profiles.scan.assert_not_called()

    @pytest.mark.asyncio
    async def test_falls_back_to_scan(
        self, service: AnalyticsService, uow: FakeUnitOfWork, now: int
    ) -> None:
        uow.profiles.list_recent.side_effect = OrderedQueryUnavailable("profiles", "created_at")
        uow.profiles.scan.return_value = [_profile(1, now - MS_PER_DAY), _profile(2, now - 40 * MS_PER_DAY)]
        uow.questions.count.return_value = 0
        uow.answers.count.return_value = 0

        report = await service.get_admin_analytics(TimeRange.MONTH, now=now)

        assert report.total == 2
        assert report.new == 1
        uow.profiles.scan.assert_called_once_with(1000)

"""Admin growth analytics computed from raw profile records."""

from collections.abc import Callable, Iterable
from datetime import datetime, timezone

from core.clock import MS_PER_DAY, MS_PER_HOUR, now_ms
from core.config import settings
from core.exceptions import ValidationError
from domain.entities.analytics import AnalyticsReport, GrowthBucket, TimeRange
from domain.entities.profile import UserProfile
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.feed_service import newest_first

ACTIVE_WINDOW_MS = 24 * MS_PER_HOUR
MONTHLY_BUCKETS = 12

_WINDOW_LENGTHS = {
    TimeRange.DAY: 24 * MS_PER_HOUR,
    TimeRange.WEEK: 7 * MS_PER_DAY,
    TimeRange.MONTH: 30 * MS_PER_DAY,
}


def parse_time_range(value: str) -> TimeRange:
    try:
        return TimeRange(value)
    except ValueError:
        allowed = ", ".join(r.value for r in TimeRange)
        raise ValidationError(f"Unknown time range '{value}', expected one of: {allowed}", field="range")


def window_bounds(time_range: TimeRange, now: int) -> tuple[int, int]:
    """``[start, end)`` of the selected window; ``all`` starts at the epoch.

    ``end`` is ``now + 1`` so a record stamped at the query instant counts.
    """
    end = now + 1
    if time_range is TimeRange.ALL:
        return 0, end
    return end - _WINDOW_LENGTHS[time_range], end


def count_created_between(profiles: Iterable[UserProfile], start: int, end: int) -> int:
    return sum(1 for p in profiles if start <= p.created_at < end)


def growth_percentage(current: int, previous: int) -> float:
    """Percent change vs. the previous window; 100 when starting from zero."""
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return round((current - previous) / previous * 100, 1)


def _month_start(year: int, month: int) -> int:
    return int(datetime(year, month, 1, tzinfo=timezone.utc).timestamp() * 1000)


def _shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def bucket_edges(time_range: TimeRange, now: int) -> list[tuple[int, int]]:
    """Sub-intervals for charting.

    24 hourly buckets for ``24h``, 7 or 30 daily buckets for ``7d``/``30d``,
    tiling ``window_bounds``; 12 calendar months (UTC) ending with the
    current month for ``all``.
    """
    if time_range is TimeRange.ALL:
        current = datetime.fromtimestamp(now / 1000, tz=timezone.utc)
        edges = []
        for offset in range(-(MONTHLY_BUCKETS - 1), 1):
            year, month = _shift_month(current.year, current.month, offset)
            next_year, next_month = _shift_month(year, month, 1)
            edges.append((_month_start(year, month), _month_start(next_year, next_month)))
        return edges

    step = MS_PER_HOUR if time_range is TimeRange.DAY else MS_PER_DAY
    count = _WINDOW_LENGTHS[time_range] // step
    start, _ = window_bounds(time_range, now)
    return [(start + i * step, start + (i + 1) * step) for i in range(count)]


def growth_series(
    profiles: list[UserProfile], time_range: TimeRange, now: int
) -> list[GrowthBucket]:
    return [
        GrowthBucket(start=start, end=end, count=count_created_between(profiles, start, end))
        for start, end in bucket_edges(time_range, now)
    ]


def build_report(
    profiles: list[UserProfile],
    time_range: TimeRange,
    now: int,
    total_questions: int = 0,
    total_answers: int = 0,
) -> AnalyticsReport:
    """Pure analytics over an in-memory profile set."""
    start, end = window_bounds(time_range, now)
    length = end - start

    new = count_created_between(profiles, start, end)
    previous = count_created_between(profiles, start - length, start)
    active = sum(
        1
        for p in profiles
        if p.last_active is not None and now - p.last_active <= ACTIVE_WINDOW_MS
    )

    return AnalyticsReport(
        time_range=time_range,
        total=len(profiles),
        active=active,
        new=new,
        growth_pct=growth_percentage(new, previous),
        series=growth_series(profiles, time_range, now),
        total_questions=total_questions,
        total_answers=total_answers,
    )


class AnalyticsService:
    """Service layer for the admin dashboard."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        profile_limit: int = settings.analytics_profile_limit,
    ) -> None:
        self._uow_factory = uow_factory
        self._profile_limit = profile_limit

    async def _load_profiles(self) -> list[UserProfile]:
        async def ordered() -> list[UserProfile]:
            async with self._uow_factory() as uow:
                return await uow.profiles.list_recent(self._profile_limit)

        async def fallback() -> list[UserProfile]:
            async with self._uow_factory() as uow:
                return await uow.profiles.scan(self._profile_limit)

        return await newest_first(
            ordered,
            fallback,
            key=lambda p: p.created_at,
            limit=self._profile_limit,
            query_name="admin_profiles",
        )

    async def get_admin_analytics(
        self, time_range: TimeRange | str, now: int | None = None
    ) -> AnalyticsReport:
        """Totals, activity and growth for the selected window."""
        if not isinstance(time_range, TimeRange):
            time_range = parse_time_range(time_range)
        now = now_ms() if now is None else now

        profiles = await self._load_profiles()
        async with self._uow_factory() as uow:
            total_questions = await uow.questions.count()
            total_answers = await uow.answers.count()

        return build_report(
            profiles,
            time_range,
            now,
            total_questions=total_questions,
            total_answers=total_answers,
        )

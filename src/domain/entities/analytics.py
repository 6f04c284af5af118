"""Admin analytics value objects."""

from dataclasses import dataclass, field
from enum import StrEnum


class TimeRange(StrEnum):
    """Analytics window selector."""

    DAY = "24h"
    WEEK = "7d"
    MONTH = "30d"
    ALL = "all"


@dataclass(frozen=True, slots=True)
class GrowthBucket:
    """New-user count for the half-open interval ``[start, end)`` (epoch ms)."""

    start: int
    end: int
    count: int


@dataclass(frozen=True)
class AnalyticsReport:
    """User growth summary for one window."""

    time_range: TimeRange
    total: int
    active: int
    new: int
    growth_pct: float
    series: list[GrowthBucket] = field(default_factory=list)
    total_questions: int = 0
    total_answers: int = 0

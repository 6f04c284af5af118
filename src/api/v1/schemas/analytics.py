"""Pydantic schemas for admin analytics."""

from pydantic import BaseModel

from domain.entities.analytics import TimeRange


class GrowthBucketResponse(BaseModel):
    """New users within ``[start, end)``."""

    start: int
    end: int
    count: int


class AnalyticsResponse(BaseModel):
    """User growth summary."""

    range: TimeRange
    total: int
    active: int
    new: int
    growth_pct: float
    total_questions: int
    total_answers: int
    series: list[GrowthBucketResponse]


class AnalyticsDetailResponse(BaseModel):
    """Schema for single analytics payload."""

    data: AnalyticsResponse


class ReconcileResponse(BaseModel):
    """Number of questions repaired by a reconciliation pass."""

    repaired: int

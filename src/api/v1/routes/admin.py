"""Admin API routes."""

from fastapi import APIRouter, Depends, Query

from api.dependencies.auth import AdminUser
from api.v1.dependencies import get_analytics_service, get_answer_service
from api.v1.schemas.analytics import (
    AnalyticsDetailResponse,
    AnalyticsResponse,
    GrowthBucketResponse,
    ReconcileResponse,
)
from domain.entities.analytics import TimeRange
from domain.services.analytics_service import AnalyticsService
from domain.services.answer_service import AnswerService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get(
    "/analytics",
    response_model=AnalyticsDetailResponse,
    summary="User growth analytics",
    responses={403: {"description": "Not an admin"}},
)
async def get_analytics(
    admin: AdminUser,
    time_range: TimeRange = Query(TimeRange.WEEK, alias="range"),
    service: AnalyticsService = Depends(get_analytics_service),
) -> AnalyticsDetailResponse:
    """Totals, 24h activity, new users and growth for the window."""
    report = await service.get_admin_analytics(time_range)
    return AnalyticsDetailResponse(
        data=AnalyticsResponse(
            range=report.time_range,
            total=report.total,
            active=report.active,
            new=report.new,
            growth_pct=report.growth_pct,
            total_questions=report.total_questions,
            total_answers=report.total_answers,
            series=[
                GrowthBucketResponse(start=b.start, end=b.end, count=b.count)
                for b in report.series
            ],
        )
    )


@router.post(
    "/reconcile",
    response_model=ReconcileResponse,
    summary="Repair half-published answers",
    responses={403: {"description": "Not an admin"}},
)
async def reconcile(
    admin: AdminUser,
    service: AnswerService = Depends(get_answer_service),
) -> ReconcileResponse:
    """Run one reconciliation pass now instead of waiting for the schedule."""
    repaired = await service.reconcile_orphans()
    return ReconcileResponse(repaired=repaired)

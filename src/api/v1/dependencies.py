"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Callable

from core.config import settings
from domain.services.analytics_service import AnalyticsService
from domain.services.answer_service import AnswerService
from domain.services.engagement_service import EngagementService
from domain.services.feed_service import FeedService
from domain.services.identity_service import IdentityService
from domain.services.question_service import QuestionService
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(
            async_session_factory,
            ordered_queries=settings.ordered_queries_enabled,
        )

    return factory


@lru_cache
def get_identity_service() -> IdentityService:
    """Get Identity service instance."""
    return IdentityService(get_uow_factory())


@lru_cache
def get_question_service() -> QuestionService:
    """Get Question service instance."""
    return QuestionService(get_uow_factory())


@lru_cache
def get_answer_service() -> AnswerService:
    """Get Answer service instance."""
    return AnswerService(get_uow_factory())


@lru_cache
def get_engagement_service() -> EngagementService:
    """Get Engagement service instance."""
    return EngagementService(get_uow_factory())


@lru_cache
def get_feed_service() -> FeedService:
    """Get Feed service instance."""
    return FeedService(get_uow_factory())


@lru_cache
def get_analytics_service() -> AnalyticsService:
    """Get Analytics service instance."""
    return AnalyticsService(get_uow_factory())

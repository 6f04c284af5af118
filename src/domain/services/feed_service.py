"""Feed and per-user stats aggregation.

Every query here works without composite or ordering indexes: reads are
single-equality fetches sorted in memory, and the one query that does use
an ordered index (the global feed) degrades to a bounded scan when the
index is unavailable.
"""

from collections.abc import Awaitable, Callable
from typing import TypeVar

import structlog

from core.config import settings
from domain.entities.answer import Answer, UserStats
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()

T = TypeVar("T")


async def newest_first(
    ordered: Callable[[], Awaitable[list[T]]],
    fallback: Callable[[], Awaitable[list[T]]],
    key: Callable[[T], int],
    limit: int,
    query_name: str,
) -> list[T]:
    """Run the indexed query, or scan-then-sort if it fails.

    ``ordered`` must already return newest-first rows; ``fallback`` returns a
    bounded, unordered batch that is sorted by ``key`` here. Failures of the
    ordered path are logged and never reach the caller.
    """
    try:
        rows = await ordered()
        return rows[:limit]
    except Exception as exc:
        logger.warning(
            "ordered_query_fallback",
            query=query_name,
            error=str(exc),
            error_type=type(exc).__name__,
        )

    rows = await fallback()
    return sorted(rows, key=key, reverse=True)[:limit]


class FeedService:
    """Service layer for answer feeds and stats."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        feed_limit: int = settings.feed_limit,
        fallback_scan_limit: int = settings.feed_fallback_scan_limit,
    ) -> None:
        self._uow_factory = uow_factory
        self._feed_limit = feed_limit
        self._fallback_scan_limit = fallback_scan_limit

    async def _answers_for_user(self, uid: str) -> list[Answer]:
        async with self._uow_factory() as uow:
            return await uow.answers.list_by_user(uid)

    async def get_user_feed(self, uid: str, public_only: bool = False) -> list[Answer]:
        """A user's answers, newest first, capped at the feed limit.

        ``public_only`` hides answers the owner marked private, for visitors.
        """
        answers = await self._answers_for_user(uid)
        if public_only:
            answers = [a for a in answers if a.is_public]
        answers.sort(key=lambda a: a.timestamp, reverse=True)
        return answers[: self._feed_limit]

    async def get_user_stats(self, uid: str) -> UserStats:
        """Answer count and like total, reduced client-side."""
        answers = await self._answers_for_user(uid)
        return UserStats(
            answer_count=len(answers),
            total_likes=sum(a.likes for a in answers),
        )

    async def get_global_feed(self) -> list[Answer]:
        """Newest public answers across all users."""

        async def ordered() -> list[Answer]:
            async with self._uow_factory() as uow:
                return await uow.answers.list_recent_public(self._feed_limit)

        async def fallback() -> list[Answer]:
            async with self._uow_factory() as uow:
                return await uow.answers.scan_public(self._fallback_scan_limit)

        return await newest_first(
            ordered,
            fallback,
            key=lambda a: a.timestamp,
            limit=self._feed_limit,
            query_name="global_feed",
        )

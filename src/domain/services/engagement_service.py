"""Engagement counter: per-viewer like toggling on answers."""

from collections.abc import Callable
from uuid import UUID

import structlog

from core.exceptions import AnswerNotFoundError, ValidationError
from domain.entities.answer import LikeState
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


class EngagementService:
    """Service layer for likes.

    Membership change and counter delta commit together, and the counter
    is only ever moved by an atomic ``likes = likes + delta`` so distinct
    viewers toggling concurrently never lose updates.
    """

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def toggle_like(self, answer_id: UUID, viewer_id: str) -> LikeState:
        """Flip ``viewer_id``'s like on an answer and return the new state."""
        if not viewer_id:
            raise ValidationError("Viewer id is required", field="viewer_id")

        async with self._uow_factory() as uow:
            answer = await uow.answers.get(answer_id)
            if not answer:
                raise AnswerNotFoundError(str(answer_id))

            if viewer_id in answer.liked_by:
                if await uow.answers.remove_like(answer_id, viewer_id):
                    await uow.answers.increment_likes(answer_id, -1)
                state = LikeState.UNLIKED
            else:
                # A lost insert race means another session already liked it
                if await uow.answers.add_like(answer_id, viewer_id):
                    await uow.answers.increment_likes(answer_id, 1)
                state = LikeState.LIKED

            await uow.commit()

        logger.debug(
            "answer_like_toggled",
            answer_id=str(answer_id),
            viewer_id=viewer_id,
            state=state.value,
        )
        return state

    async def is_liked(self, answer_id: UUID, viewer_id: str) -> bool:
        """Whether ``viewer_id`` currently likes the answer."""
        async with self._uow_factory() as uow:
            return await uow.answers.has_like(answer_id, viewer_id)

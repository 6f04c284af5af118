"""Question intake service."""

from collections.abc import Callable
from uuid import UUID

import structlog

from core.config import settings
from core.exceptions import QuestionAlreadyAnsweredError, QuestionNotFoundError, ValidationError
from domain.entities.question import Question
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


class QuestionService:
    """Accepts anonymous questions and serves the receiver's inbox."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        max_length: int = settings.question_max_length,
    ) -> None:
        self._uow_factory = uow_factory
        self._max_length = max_length

    async def submit(self, receiver_id: str, text: str, theme: str = "default") -> Question:
        """Queue an anonymous question for ``receiver_id``.

        The receiver is not looked up: a submission for an unknown uid
        creates an orphaned record rather than failing.
        """
        body = text.strip()
        if not body:
            raise ValidationError("Question text cannot be empty", field="text")
        if len(body) > self._max_length:
            raise ValidationError(
                f"Question text must be at most {self._max_length} characters",
                field="text",
            )
        if not receiver_id:
            raise ValidationError("Receiver is required", field="receiver_id")

        question = Question(receiver_id=receiver_id, text=body, theme=theme or "default")

        async with self._uow_factory() as uow:
            created = await uow.questions.create(question)
            await uow.commit()

        logger.info("question_submitted", question_id=str(created.id), receiver_id=receiver_id)
        return created

    async def get(self, question_id: UUID) -> Question | None:
        """Get a question by ID, or None."""
        async with self._uow_factory() as uow:
            return await uow.questions.get(question_id)

    async def list_unanswered(self, receiver_id: str) -> list[Question]:
        """Pending questions for a receiver, newest first.

        Fetched by receiver alone, then filtered and sorted in memory so no
        composite (receiver_id, is_answered) index is needed.
        """
        async with self._uow_factory() as uow:
            questions = await uow.questions.list_by_receiver(receiver_id)

        pending = [q for q in questions if not q.is_answered]
        pending.sort(key=lambda q: q.timestamp, reverse=True)
        return pending

    async def discard(self, question_id: UUID, owner_uid: str) -> bool:
        """Delete a pending question from the owner's inbox.

        Answered questions are permanent; their answers refer back to them.
        """
        async with self._uow_factory() as uow:
            question = await uow.questions.get(question_id)
            if not question or question.receiver_id != owner_uid:
                raise QuestionNotFoundError(str(question_id))
            if question.is_answered:
                raise QuestionAlreadyAnsweredError(str(question_id))

            # A publish may land between the read and the delete
            deleted = await uow.questions.delete_pending(question_id)
            if not deleted:
                raise QuestionAlreadyAnsweredError(str(question_id))
            await uow.commit()

        logger.info("question_discarded", question_id=str(question_id))
        return deleted

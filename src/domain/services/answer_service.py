"""Answer publication service.

A question moves ``Pending -> Answered`` exactly once. Publication is a
two-phase write: the Answer is committed first, then the Question is
flipped with a conditional update. A crash between the two phases leaves
an orphan Answer next to a still-pending Question; ``reconcile_orphans``
repairs those idempotently.
"""

from collections.abc import Callable
from uuid import UUID

import structlog

from core.exceptions import (
    AnswerNotFoundError,
    PartialFailureError,
    ProfileNotFoundError,
    QuestionAlreadyAnsweredError,
    QuestionNotFoundError,
    ValidationError,
)
from domain.entities.answer import Answer, AuthorSnapshot
from domain.entities.profile import UserProfile
from domain.entities.question import Question
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()

RECONCILE_BATCH_SIZE = 100


class AnswerService:
    """Service layer for turning queued questions into answers."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def publish(
        self,
        question: Question,
        answer_text: str,
        author_profile: UserProfile | None,
        is_public: bool = True,
    ) -> Answer:
        """Publish an answer to ``question``.

        Raises:
            ValidationError: empty answer text.
            QuestionNotFoundError: the question no longer exists.
            QuestionAlreadyAnsweredError: the question was already answered.
            PartialFailureError: the answer was saved but the question
                could not be marked answered.
        """
        body = answer_text.strip()
        if not body:
            raise ValidationError("Answer text cannot be empty", field="answer_text")

        # Phase 1: optimistic re-check, then durable answer insert
        async with self._uow_factory() as uow:
            current = await uow.questions.get(question.id)
            if not current:
                raise QuestionNotFoundError(str(question.id))
            if current.is_answered:
                raise QuestionAlreadyAnsweredError(str(question.id))

            answer = Answer(
                question_id=current.id,
                user_id=current.receiver_id,
                question_text=current.text,
                answer_text=body,
                author=AuthorSnapshot.of(author_profile),
                is_public=is_public,
            )
            created = await uow.answers.create(answer)
            await uow.commit()

        # Phase 2: flip the question
        try:
            async with self._uow_factory() as uow:
                transitioned = await uow.questions.mark_answered(current.id)
                await uow.commit()
        except Exception as exc:
            logger.error(
                "answer_publish_partial_failure",
                answer_id=str(created.id),
                question_id=str(current.id),
                exc_info=True,
            )
            raise PartialFailureError(str(created.id), str(current.id)) from exc

        if not transitioned:
            logger.warning(
                "concurrent_publish_detected",
                answer_id=str(created.id),
                question_id=str(current.id),
            )

        question.mark_answered()
        logger.info(
            "answer_published",
            answer_id=str(created.id),
            question_id=str(current.id),
            user_id=created.user_id,
        )
        return created

    async def publish_for_owner(
        self,
        question_id: UUID,
        owner_uid: str,
        answer_text: str,
        is_public: bool = True,
    ) -> Answer:
        """Load the question and author profile, then :meth:`publish`."""
        async with self._uow_factory() as uow:
            question = await uow.questions.get(question_id)
            if not question or question.receiver_id != owner_uid:
                raise QuestionNotFoundError(str(question_id))
            author = await uow.profiles.get(owner_uid)
            if not author:
                raise ProfileNotFoundError(owner_uid)

        return await self.publish(question, answer_text, author, is_public=is_public)

    async def get(self, answer_id: UUID) -> Answer | None:
        """Get an answer by ID, or None."""
        async with self._uow_factory() as uow:
            return await uow.answers.get(answer_id)

    async def set_visibility(self, answer_id: UUID, owner_uid: str, is_public: bool) -> Answer:
        """Show or hide an answer from public feeds."""
        async with self._uow_factory() as uow:
            answer = await uow.answers.get(answer_id)
            if not answer or answer.user_id != owner_uid:
                raise AnswerNotFoundError(str(answer_id))

            await uow.answers.set_visibility(answer_id, is_public)
            await uow.commit()

        answer.is_public = is_public
        return answer

    async def delete(self, answer_id: UUID, owner_uid: str) -> bool:
        """Delete an answer. Its question stays answered."""
        async with self._uow_factory() as uow:
            answer = await uow.answers.get(answer_id)
            if not answer or answer.user_id != owner_uid:
                raise AnswerNotFoundError(str(answer_id))

            deleted = await uow.answers.delete(answer_id)
            await uow.commit()

        logger.info("answer_deleted", answer_id=str(answer_id))
        return deleted

    async def reconcile_orphans(self, limit: int = RECONCILE_BATCH_SIZE) -> int:
        """Mark questions answered where an answer already exists.

        Safe to run repeatedly and concurrently: the underlying transition
        is conditional, so a question is only counted once.
        """
        repaired = 0
        async with self._uow_factory() as uow:
            orphans = await uow.answers.list_orphaned(limit)
            for answer in orphans:
                if await uow.questions.mark_answered(answer.question_id):
                    repaired += 1
            await uow.commit()

        if repaired:
            logger.info("orphan_answers_reconciled", repaired_count=repaired)
        return repaired

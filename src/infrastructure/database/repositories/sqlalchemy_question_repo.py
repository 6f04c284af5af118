"""SQLAlchemy implementation of Question repository."""

from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.question import Question
from infrastructure.database.models import QuestionModel


class SQLAlchemyQuestionRepository:
    """SQLAlchemy implementation of IQuestionRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Question | None:
        """Get a question by ID."""
        stmt = select(QuestionModel).where(QuestionModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def list_by_receiver(self, receiver_id: str) -> list[Question]:
        """Single equality filter; ordering is left to the caller."""
        stmt = select(QuestionModel).where(QuestionModel.receiver_id == receiver_id)
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, question: Question) -> Question:
        """Create a new question."""
        model = self._to_model(question)
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def mark_answered(self, id: UUID) -> bool:
        """Flip ``is_answered`` only if it is still false."""
        stmt = (
            update(QuestionModel)
            .where(QuestionModel.id == id, QuestionModel.is_answered.is_(False))
            .values(is_answered=True)
        )
        result = await self._session.execute(stmt)
        return result.rowcount > 0  # type: ignore[attr-defined, no-any-return]

    async def delete_pending(self, id: UUID) -> bool:
        """Delete a question unless it has been answered."""
        stmt = (
            delete(QuestionModel)
            .where(QuestionModel.id == id, QuestionModel.is_answered.is_(False))
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount > 0  # type: ignore[attr-defined, no-any-return]

    async def count(self) -> int:
        """Total number of questions."""
        result = await self._session.execute(select(func.count()).select_from(QuestionModel))
        return int(result.scalar_one())

    def _to_entity(self, model: QuestionModel) -> Question:
        """Convert ORM model to domain entity."""
        return Question(
            id=model.id,
            receiver_id=model.receiver_id,
            text=model.text,
            theme=model.theme,
            is_answered=model.is_answered,
            timestamp=model.timestamp,
        )

    def _to_model(self, entity: Question) -> QuestionModel:
        """Convert domain entity to ORM model. ``sender_id`` is always NULL."""
        return QuestionModel(
            id=entity.id,
            receiver_id=entity.receiver_id,
            sender_id=None,
            text=entity.text,
            theme=entity.theme,
            is_answered=entity.is_answered,
            timestamp=entity.timestamp,
        )

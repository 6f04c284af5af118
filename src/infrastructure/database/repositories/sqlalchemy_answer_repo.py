"""SQLAlchemy implementation of Answer repository."""

from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.clock import now_ms
from domain.entities.answer import Answer, AuthorSnapshot
from domain.repositories.errors import OrderedQueryUnavailable
from infrastructure.database.conditional import insert_if_absent
from infrastructure.database.models import AnswerLikeModel, AnswerModel, QuestionModel


class SQLAlchemyAnswerRepository:
    """SQLAlchemy implementation of IAnswerRepository."""

    def __init__(self, session: AsyncSession, ordered_queries: bool = True) -> None:
        self._session = session
        self._ordered_queries = ordered_queries

    async def get(self, id: UUID) -> Answer | None:
        """Get an answer by ID."""
        stmt = select(AnswerModel).where(AnswerModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def list_by_user(self, user_id: str) -> list[Answer]:
        """Single equality filter; ordering is left to the caller."""
        stmt = select(AnswerModel).where(AnswerModel.user_id == user_id)
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def list_recent_public(self, limit: int) -> list[Answer]:
        """Newest public answers via the (is_public, timestamp) index."""
        if not self._ordered_queries:
            raise OrderedQueryUnavailable("answers", "timestamp")
        stmt = (
            select(AnswerModel)
            .where(AnswerModel.is_public.is_(True))
            .order_by(AnswerModel.timestamp.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def scan_public(self, limit: int) -> list[Answer]:
        """Bounded fetch of public answers in store order."""
        stmt = select(AnswerModel).where(AnswerModel.is_public.is_(True)).limit(limit)
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def list_orphaned(self, limit: int) -> list[Answer]:
        """Answers whose question exists but is still flagged unanswered."""
        stmt = (
            select(AnswerModel)
            .join(QuestionModel, QuestionModel.id == AnswerModel.question_id)
            .where(QuestionModel.is_answered.is_(False))
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, answer: Answer) -> Answer:
        """Create a new answer."""
        model = self._to_model(answer)
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def set_visibility(self, id: UUID, is_public: bool) -> bool:
        """Update ``is_public``."""
        stmt = update(AnswerModel).where(AnswerModel.id == id).values(is_public=is_public)
        result = await self._session.execute(stmt)
        return result.rowcount > 0  # type: ignore[attr-defined, no-any-return]

    async def delete(self, id: UUID) -> bool:
        """Delete an answer and its like rows."""
        await self._session.execute(delete(AnswerLikeModel).where(AnswerLikeModel.answer_id == id))
        result = await self._session.execute(delete(AnswerModel).where(AnswerModel.id == id))
        return result.rowcount > 0  # type: ignore[attr-defined, no-any-return]

    async def has_like(self, id: UUID, viewer_id: str) -> bool:
        """Membership test on the like set."""
        stmt = select(AnswerLikeModel.viewer_id).where(
            AnswerLikeModel.answer_id == id,
            AnswerLikeModel.viewer_id == viewer_id,
        )
        result = await self._session.execute(stmt)
        return result.first() is not None

    async def add_like(self, id: UUID, viewer_id: str) -> bool:
        """Set-add a viewer."""
        return await insert_if_absent(
            self._session,
            AnswerLikeModel,
            answer_id=id,
            viewer_id=viewer_id,
            created_at=now_ms(),
        )

    async def remove_like(self, id: UUID, viewer_id: str) -> bool:
        """Set-remove a viewer."""
        stmt = delete(AnswerLikeModel).where(
            AnswerLikeModel.answer_id == id,
            AnswerLikeModel.viewer_id == viewer_id,
        )
        result = await self._session.execute(stmt)
        return result.rowcount > 0  # type: ignore[attr-defined, no-any-return]

    async def increment_likes(self, id: UUID, delta: int) -> None:
        """Server-side ``likes = likes + delta``."""
        stmt = (
            update(AnswerModel)
            .where(AnswerModel.id == id)
            .values(likes=AnswerModel.likes + delta)
        )
        await self._session.execute(stmt)

    async def count(self) -> int:
        """Total number of answers."""
        result = await self._session.execute(select(func.count()).select_from(AnswerModel))
        return int(result.scalar_one())

    def _to_entity(self, model: AnswerModel) -> Answer:
        """Convert ORM model to domain entity."""
        return Answer(
            id=model.id,
            question_id=model.question_id,
            user_id=model.user_id,
            question_text=model.question_text,
            answer_text=model.answer_text,
            timestamp=model.timestamp,
            likes=model.likes,
            liked_by={like.viewer_id for like in model.liked_by},
            is_public=model.is_public,
            author=AuthorSnapshot(
                username=model.author_username,
                avatar=model.author_avatar,
                full_name=model.author_full_name,
            ),
        )

    def _to_model(self, entity: Answer) -> AnswerModel:
        """Convert domain entity to ORM model.

        New answers always start with an empty like set.
        """
        return AnswerModel(
            id=entity.id,
            question_id=entity.question_id,
            user_id=entity.user_id,
            question_text=entity.question_text,
            answer_text=entity.answer_text,
            timestamp=entity.timestamp,
            likes=0,
            is_public=entity.is_public,
            author_username=entity.author.username,
            author_avatar=entity.author.avatar,
            author_full_name=entity.author.full_name,
            liked_by=[],
        )

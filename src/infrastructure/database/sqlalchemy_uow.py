"""SQLAlchemy Unit of Work implementation."""

from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.database.repositories.sqlalchemy_answer_repo import SQLAlchemyAnswerRepository
from infrastructure.database.repositories.sqlalchemy_profile_repo import SQLAlchemyProfileRepository
from infrastructure.database.repositories.sqlalchemy_question_repo import SQLAlchemyQuestionRepository


class SQLAlchemyUnitOfWork:
    """Unit of Work implementation using SQLAlchemy.

    ``ordered_queries`` switches the indexed order-by capability of the
    repositories; when off, those queries raise and callers fall back to a
    bounded scan.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        ordered_queries: bool = True,
    ) -> None:
        self._session_factory = session_factory
        self._ordered_queries = ordered_queries
        self._session: Optional[AsyncSession] = None

    def _require_session(self) -> AsyncSession:
        if not self._session:
            raise RuntimeError("UnitOfWork not initialized. Use as context manager.")
        return self._session

    @property
    def profiles(self) -> SQLAlchemyProfileRepository:
        """Get profile repository."""
        return SQLAlchemyProfileRepository(self._require_session(), self._ordered_queries)

    @property
    def questions(self) -> SQLAlchemyQuestionRepository:
        """Get question repository."""
        return SQLAlchemyQuestionRepository(self._require_session())

    @property
    def answers(self) -> SQLAlchemyAnswerRepository:
        """Get answer repository."""
        return SQLAlchemyAnswerRepository(self._require_session(), self._ordered_queries)

    async def commit(self) -> None:
        """Commit the current transaction."""
        if self._session:
            await self._session.commit()

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        if self._session:
            await self._session.rollback()

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        """Enter the context manager and create session."""
        self._session = self._session_factory()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[Exception],
        exc_tb: Any,
    ) -> None:
        """Exit the context manager and cleanup."""
        if self._session:
            if exc_type:
                await self.rollback()
            await self._session.close()
            self._session = None

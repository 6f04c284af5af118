"""Unit of Work protocol."""

from typing import Protocol

from domain.repositories.answer_repository import IAnswerRepository
from domain.repositories.profile_repository import IProfileRepository
from domain.repositories.question_repository import IQuestionRepository


class IUnitOfWork(Protocol):
    """Unit of Work interface for managing transactions."""

    profiles: IProfileRepository
    questions: IQuestionRepository
    answers: IAnswerRepository

    async def commit(self) -> None:
        """Commit the current transaction."""
        ...

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        ...

    async def __aenter__(self) -> "IUnitOfWork":
        """Enter the context manager."""
        ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore
        """Exit the context manager."""
        ...

"""Question repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.question import Question


class IQuestionRepository(Protocol):
    """Repository interface for Question entities."""

    async def get(self, id: UUID) -> Question | None:
        """Get a question by ID."""
        ...

    async def list_by_receiver(self, receiver_id: str) -> list[Question]:
        """All questions for a receiver, single equality filter, store order."""
        ...

    async def create(self, question: Question) -> Question:
        """Create a new question."""
        ...

    async def mark_answered(self, id: UUID) -> bool:
        """Conditional false -> true transition of ``is_answered``.

        Returns True only if this call performed the transition.
        """
        ...

    async def delete_pending(self, id: UUID) -> bool:
        """Delete a question only while ``is_answered`` is still false."""
        ...

    async def count(self) -> int:
        """Total number of questions."""
        ...

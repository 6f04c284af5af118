"""Answer repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.answer import Answer


class IAnswerRepository(Protocol):
    """Repository interface for Answer entities and their like sets."""

    async def get(self, id: UUID) -> Answer | None:
        """Get an answer by ID, including ``liked_by``."""
        ...

    async def list_by_user(self, user_id: str) -> list[Answer]:
        """All answers authored by a user, single equality filter, store order."""
        ...

    async def list_recent_public(self, limit: int) -> list[Answer]:
        """Newest public answers (indexed order-by path).

        Raises OrderedQueryUnavailable when the ordered capability is off.
        """
        ...

    async def scan_public(self, limit: int) -> list[Answer]:
        """Unordered bounded fetch of public answers."""
        ...

    async def list_orphaned(self, limit: int) -> list[Answer]:
        """Answers whose source question is still flagged unanswered."""
        ...

    async def create(self, answer: Answer) -> Answer:
        """Create a new answer."""
        ...

    async def set_visibility(self, id: UUID, is_public: bool) -> bool:
        """Update ``is_public``; returns False if the answer is missing."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete an answer and its likes."""
        ...

    async def has_like(self, id: UUID, viewer_id: str) -> bool:
        """Membership test on ``liked_by``."""
        ...

    async def add_like(self, id: UUID, viewer_id: str) -> bool:
        """Set-add; returns False if the viewer was already present."""
        ...

    async def remove_like(self, id: UUID, viewer_id: str) -> bool:
        """Set-remove; returns False if the viewer was not present."""
        ...

    async def increment_likes(self, id: UUID, delta: int) -> None:
        """Atomic delta on the ``likes`` counter (no read-modify-write)."""
        ...

    async def count(self) -> int:
        """Total number of answers."""
        ...

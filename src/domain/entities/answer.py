"""Answer domain entity."""

from dataclasses import dataclass, field
from enum import StrEnum
from uuid import UUID, uuid4

from core.clock import now_ms
from domain.entities.profile import UserProfile


class LikeState(StrEnum):
    """Result of toggling a like."""

    LIKED = "liked"
    UNLIKED = "unliked"


@dataclass(frozen=True, slots=True)
class AuthorSnapshot:
    """Point-in-time copy of the author's public fields.

    This is a value, not a reference: later profile edits do not flow
    into answers that were already published.
    """

    username: str = ""
    avatar: str = ""
    full_name: str = ""

    @classmethod
    def of(cls, profile: UserProfile | None) -> "AuthorSnapshot":
        if profile is None:
            return cls()
        return cls(
            username=profile.username,
            avatar=profile.avatar or "",
            full_name=profile.full_name or "",
        )


@dataclass
class Answer:
    """Public answer to exactly one question."""

    question_id: UUID
    user_id: str
    question_text: str
    answer_text: str
    id: UUID = field(default_factory=uuid4)
    author: AuthorSnapshot = field(default_factory=AuthorSnapshot)
    is_public: bool = True
    likes: int = 0
    liked_by: set[str] = field(default_factory=set)
    timestamp: int = field(default_factory=now_ms)


@dataclass(frozen=True, slots=True)
class UserStats:
    """Per-user answer totals."""

    answer_count: int
    total_likes: int

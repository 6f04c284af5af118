"""Shared fixtures for unit tests."""

from typing import Any
from unittest.mock import AsyncMock

import pytest

from core.clock import MS_PER_DAY
from domain.entities.answer import Answer, AuthorSnapshot
from domain.entities.profile import UserProfile
from domain.entities.question import Question

# 2026-01-15T12:00:00Z
NOW = 1_768_478_400_000


class FakeUnitOfWork:
    """Fake Unit of Work with the three repository mocks for unit testing."""

    def __init__(self) -> None:
        self.profiles = AsyncMock()
        self.questions = AsyncMock()
        self.answers = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def now() -> int:
    """A fixed 'current time' in epoch ms."""
    return NOW


@pytest.fixture
def user_id() -> str:
    """A provider-style uid."""
    return "uid-alice"


@pytest.fixture
def profile(user_id: str, now: int) -> UserProfile:
    return UserProfile(
        uid=user_id,
        username="alice",
        email="alice@example.com",
        full_name="Alice",
        avatar="https://example.com/alice.png",
        created_at=now - 30 * MS_PER_DAY,
    )


@pytest.fixture
def question(user_id: str, now: int) -> Question:
    return Question(receiver_id=user_id, text="what's your favourite film?", timestamp=now)


@pytest.fixture
def answer(question: Question, profile: UserProfile, now: int) -> Answer:
    return Answer(
        question_id=question.id,
        user_id=question.receiver_id,
        question_text=question.text,
        answer_text="Paris, Texas",
        author=AuthorSnapshot.of(profile),
        timestamp=now,
    )

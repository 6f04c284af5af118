"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator, Callable
from pathlib import Path

# Test settings must be in place before the app config is imported
os.environ["ADMIN_EMAILS"] = "admin@example.com"
os.environ["RECONCILE_INTERVAL_SECONDS"] = "0"

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.entities.profile import UserProfile
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser
from infrastructure.database.models import Base
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

# Test database URL (SQLite in memory, one shared connection per test)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Fixed test user ID for consistency
TEST_USER_ID = "test-user-uid"
TEST_USERNAME = "tester"


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database for each test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
def uow_factory(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[], SQLAlchemyUnitOfWork]:
    """UoW factory bound to the test database."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    return factory


@pytest.fixture
def unordered_uow_factory(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[], SQLAlchemyUnitOfWork]:
    """UoW factory whose ordered queries are unavailable."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory, ordered_queries=False)

    return factory


@pytest.fixture
def test_user() -> TokenUser:
    """Create a test user with fixed ID."""
    return TokenUser(
        uid=TEST_USER_ID,
        email="test@example.com",
        display_name="Test User",
    )


@pytest.fixture
def admin_user() -> TokenUser:
    """A user whose email is on the admin list."""
    return TokenUser(uid="admin-uid", email="admin@example.com", display_name="Admin")


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(
        secret_key="test-secret-key",
        algorithm="HS256",
        expire_minutes=30,
    )


@pytest.fixture
def auth_token(auth_provider: JWTAuthProvider, test_user: TokenUser) -> str:
    """Create auth token for test user."""
    return str(auth_provider.create_token(test_user))


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
def admin_headers(auth_provider: JWTAuthProvider, admin_user: TokenUser) -> dict[str, str]:
    """Authorization headers for the admin user."""
    return {"Authorization": f"Bearer {auth_provider.create_token(admin_user)}"}


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client (no auth, no database overrides)."""
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def test_app(
    uow_factory: Callable[[], SQLAlchemyUnitOfWork],
    auth_provider: JWTAuthProvider,
) -> FastAPI:
    """
    App wired to the in-memory database and the test auth provider.

    Tokens are still validated end to end, so optional and required
    authentication behave exactly as in production.
    """
    from api.dependencies.auth import get_auth_provider
    from api.v1.dependencies import (
        get_analytics_service,
        get_answer_service,
        get_engagement_service,
        get_feed_service,
        get_identity_service,
        get_question_service,
    )
    from domain.services.analytics_service import AnalyticsService
    from domain.services.answer_service import AnswerService
    from domain.services.engagement_service import EngagementService
    from domain.services.feed_service import FeedService
    from domain.services.identity_service import IdentityService
    from domain.services.question_service import QuestionService
    from main import create_app

    app = create_app()
    app.dependency_overrides[get_auth_provider] = lambda: auth_provider
    app.dependency_overrides[get_identity_service] = lambda: IdentityService(uow_factory)
    app.dependency_overrides[get_question_service] = lambda: QuestionService(uow_factory)
    app.dependency_overrides[get_answer_service] = lambda: AnswerService(uow_factory)
    app.dependency_overrides[get_engagement_service] = lambda: EngagementService(uow_factory)
    app.dependency_overrides[get_feed_service] = lambda: FeedService(uow_factory)
    app.dependency_overrides[get_analytics_service] = lambda: AnalyticsService(uow_factory)
    return app


@pytest.fixture
async def anon_client(test_app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Unauthenticated client on the test database."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    test_app.dependency_overrides.clear()


@pytest.fixture
async def authenticated_client(
    test_app: FastAPI,
    uow_factory: Callable[[], SQLAlchemyUnitOfWork],
    test_user: TokenUser,
    auth_headers: dict[str, str],
) -> AsyncGenerator[AsyncClient, None]:
    """
    Authenticated client for a user with a registered profile.

    The profile is created through the identity service so its username
    claim exists, as it would after a real signup.
    """
    from domain.services.identity_service import IdentityService

    await IdentityService(uow_factory).create_profile(
        UserProfile(
            uid=test_user.uid,
            username=TEST_USERNAME,
            email=test_user.email,
            full_name=test_user.display_name or "",
        )
    )

    transport = ASGITransport(app=test_app)
    async with AsyncClient(
        transport=transport, base_url="http://test", headers=auth_headers
    ) as c:
        yield c
    test_app.dependency_overrides.clear()


@pytest.fixture
async def admin_client(
    test_app: FastAPI, admin_headers: dict[str, str]
) -> AsyncGenerator[AsyncClient, None]:
    """Client authenticated as an admin."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(
        transport=transport, base_url="http://test", headers=admin_headers
    ) as c:
        yield c
    test_app.dependency_overrides.clear()

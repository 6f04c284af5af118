"""Main FastAPI application entry point."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse

from api.exception_handlers import setup_exception_handlers
from api.middleware.logging import RequestLoggingMiddleware
from api.middleware.request_id import RequestIDMiddleware
from api.middleware.security import SecurityHeadersMiddleware
from api.routes.health import router as health_router
from api.v1 import router as v1_router
from api.v1.dependencies import get_answer_service
from core.config import settings
from core.logging import setup_logging

logger = structlog.get_logger()

# Initialize structured logging
setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager for startup/shutdown tasks."""

    async def reconcile_loop() -> None:
        """Periodically close questions left open by a half-finished publish."""
        while True:
            await asyncio.sleep(settings.reconcile_interval_seconds)
            try:
                repaired = await get_answer_service().reconcile_orphans()
                if repaired > 0:
                    logger.info("reconcile_completed", repaired_count=repaired)
            except Exception:
                logger.exception("reconcile_failed")

    reconcile_task = None
    if settings.reconcile_interval_seconds > 0:
        reconcile_task = asyncio.create_task(reconcile_loop())
    logger.info(
        "app_started",
        env=settings.app_env,
        ordered_queries=settings.ordered_queries_enabled,
    )
    yield
    if reconcile_task:
        reconcile_task.cancel()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        title=settings.app_name,
        description=(
            "## Anonymous Questions\n\n"
            "Whispers lets anyone send an anonymous question to a user, "
            "who can answer it publicly on their profile.\n\n"
            "### Features\n"
            "- **Profiles**: Unique, case-insensitive usernames with a change cooldown\n"
            "- **Questions**: Anonymous inbox, no sender is ever stored\n"
            "- **Answers**: Publish, hide, delete, and like answers\n"
            "- **Feeds**: Per-user and global newest-first feeds\n"
            "- **Admin**: User growth analytics\n\n"
            "### Authentication\n"
            "Sending questions and reading feeds is anonymous. Everything owned "
            "by a user requires a JWT in the Authorization header:\n"
            "```\nAuthorization: Bearer <your_token>\n```\n\n"
            "Anonymous viewers may like answers by sending an `X-Device-Id` header."
        ),
        version="1.0.0",
        debug=settings.debug,
        contact={
            "name": "Whispers Support",
        },
        license_info={
            "name": "MIT",
        },
        openapi_tags=[
            {
                "name": "health",
                "description": "Health check endpoints",
            },
            {
                "name": "profiles",
                "description": "Registration, usernames and profile data",
            },
            {
                "name": "questions",
                "description": "Anonymous question inbox",
            },
            {
                "name": "answers",
                "description": "Answer visibility and likes",
            },
            {
                "name": "feed",
                "description": "Per-user and global answer feeds",
            },
            {
                "name": "admin",
                "description": "Analytics and maintenance for administrators",
            },
        ],
    )

    # Security & tracking middleware (LIFO order - last added = outermost)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # GZip compression for responses > 1KB
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Setup exception handlers
    setup_exception_handlers(app)

    # Include routers
    app.include_router(health_router)
    app.include_router(v1_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
    )

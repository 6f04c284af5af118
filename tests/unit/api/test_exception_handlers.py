"""Unit tests for exception handlers."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from api.exception_handlers import setup_exception_handlers
from core.exceptions import (
    CooldownError,
    PartialFailureError,
    QuestionNotFoundError,
    UsernameTakenError,
)


def _create_test_app() -> FastAPI:
    app = FastAPI()
    setup_exception_handlers(app)
    return app


async def _get(app: FastAPI, path: str):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        return await c.get(path)


class TestExceptionHandlers:
    @pytest.mark.asyncio
    async def test_app_exception_returns_error_code_and_message(self) -> None:
        app = _create_test_app()

        @app.get("/raise-app")
        async def _() -> None:
            raise QuestionNotFoundError("some-id")

        response = await _get(app, "/raise-app")

        assert response.status_code == 404
        body = response.json()
        assert body["error_code"] == "QUESTION_NOT_FOUND"
        assert "some-id" in body["message"]
        assert body["details"]["question_id"] == "some-id"

    @pytest.mark.asyncio
    async def test_conflict_returns_409(self) -> None:
        app = _create_test_app()

        @app.get("/taken")
        async def _() -> None:
            raise UsernameTakenError("alice")

        response = await _get(app, "/taken")

        assert response.status_code == 409
        assert response.json()["error_code"] == "USERNAME_TAKEN"

    @pytest.mark.asyncio
    async def test_cooldown_sets_retry_after(self) -> None:
        app = _create_test_app()

        @app.get("/cooldown")
        async def _() -> None:
            raise CooldownError(86_400_000)

        response = await _get(app, "/cooldown")

        assert response.status_code == 429
        assert response.headers["retry-after"] == "86400"
        assert response.json()["details"]["remaining_days"] == 1.0

    @pytest.mark.asyncio
    async def test_partial_failure_names_both_records(self) -> None:
        app = _create_test_app()

        @app.get("/partial")
        async def _() -> None:
            raise PartialFailureError("answer-1", "question-1")

        response = await _get(app, "/partial")

        assert response.status_code == 500
        body = response.json()
        assert body["error_code"] == "PARTIAL_FAILURE"
        assert body["details"] == {"answer_id": "answer-1", "question_id": "question-1"}

    @pytest.mark.asyncio
    async def test_http_exception_returns_standard_format(self) -> None:
        from starlette.exceptions import HTTPException

        app = _create_test_app()

        @app.get("/raise-http")
        async def _() -> None:
            raise HTTPException(status_code=403, detail="Forbidden")

        response = await _get(app, "/raise-http")

        assert response.status_code == 403
        body = response.json()
        assert body["error_code"] == "HTTP_ERROR"
        assert body["message"] == "Forbidden"

    @pytest.mark.asyncio
    async def test_validation_error_returns_field_details(self) -> None:
        from pydantic import BaseModel

        app = _create_test_app()

        class Body(BaseModel):
            is_public: bool

        @app.post("/validate")
        async def _(body: Body) -> dict[str, bool]:
            return {"ok": True}

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            response = await c.post("/validate", json={})

        assert response.status_code == 422
        body = response.json()
        assert body["error_code"] == "VALIDATION_ERROR"
        assert isinstance(body["details"], list)
        assert body["details"][0]["field"] == "body.is_public"

    @pytest.mark.asyncio
    async def test_unhandled_exception_returns_500(self) -> None:
        import json
        from unittest.mock import MagicMock

        app = _create_test_app()

        # Build a fake request with request.state.request_id
        mock_request = MagicMock()
        mock_request.state.request_id = "test-req-id"

        exc = RuntimeError("Something went wrong")

        handler = app.exception_handlers.get(Exception)
        assert handler is not None, "Global exception handler not registered"

        response = await handler(mock_request, exc)  # type: ignore[misc]

        assert response.status_code == 500
        body = json.loads(response.body)
        assert body["error_code"] == "INTERNAL_ERROR"
        assert body["details"]["request_id"] == "test-req-id"

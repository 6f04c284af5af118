"""Integration tests for Questions API."""

from uuid import uuid4

import pytest
from httpx import AsyncClient

RECEIVER = "test-user-uid"


async def _ask(client: AsyncClient, text: str = "favourite colour?") -> str:
    response = await client.post(
        "/api/v1/questions", json={"receiver_id": RECEIVER, "text": text}
    )
    assert response.status_code == 201
    return response.json()["data"]["id"]


class TestSubmitQuestion:
    @pytest.mark.asyncio
    async def test_anonymous_submit(self, anon_client: AsyncClient) -> None:
        """Test POST /api/v1/questions without a token."""
        response = await anon_client.post(
            "/api/v1/questions",
            json={"receiver_id": RECEIVER, "text": "  what's your secret talent? "},
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["text"] == "what's your secret talent?"
        assert data["is_answered"] is False
        assert data["theme"] == "default"
        assert "sender_id" not in data

    @pytest.mark.asyncio
    async def test_rejects_blank_text(self, anon_client: AsyncClient) -> None:
        response = await anon_client.post(
            "/api/v1/questions", json={"receiver_id": RECEIVER, "text": "   "}
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_rejects_over_300_chars(self, anon_client: AsyncClient) -> None:
        response = await anon_client.post(
            "/api/v1/questions", json={"receiver_id": RECEIVER, "text": "x" * 301}
        )

        assert response.status_code == 400


class TestInbox:
    @pytest.mark.asyncio
    async def test_inbox_lists_pending_newest_first(
        self, authenticated_client: AsyncClient, anon_client: AsyncClient
    ) -> None:
        first = await _ask(anon_client, "first")
        second = await _ask(anon_client, "second")

        response = await authenticated_client.get("/api/v1/questions/inbox")

        assert response.status_code == 200
        ids = [q["id"] for q in response.json()["data"]]
        assert set(ids) == {first, second}

    @pytest.mark.asyncio
    async def test_discard(self, authenticated_client: AsyncClient, anon_client: AsyncClient) -> None:
        question_id = await _ask(anon_client)

        response = await authenticated_client.delete(f"/api/v1/questions/{question_id}")

        assert response.status_code == 204
        inbox = await authenticated_client.get("/api/v1/questions/inbox")
        assert inbox.json()["data"] == []

    @pytest.mark.asyncio
    async def test_discard_unknown(self, authenticated_client: AsyncClient) -> None:
        response = await authenticated_client.delete(f"/api/v1/questions/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["error_code"] == "QUESTION_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_discard_answered_conflicts(
        self, authenticated_client: AsyncClient, anon_client: AsyncClient
    ) -> None:
        question_id = await _ask(anon_client)
        await authenticated_client.post(
            f"/api/v1/questions/{question_id}/answer", json={"answer_text": "kept"}
        )

        response = await authenticated_client.delete(f"/api/v1/questions/{question_id}")

        assert response.status_code == 409
        assert response.json()["error_code"] == "QUESTION_ALREADY_ANSWERED"
        feed = await anon_client.get(f"/api/v1/feed/users/{RECEIVER}")
        assert [a["answer_text"] for a in feed.json()["data"]] == ["kept"]


class TestAnswerQuestion:
    @pytest.mark.asyncio
    async def test_answer_moves_question_to_feed(
        self, authenticated_client: AsyncClient, anon_client: AsyncClient
    ) -> None:
        question_id = await _ask(anon_client, "cats or dogs?")

        response = await authenticated_client.post(
            f"/api/v1/questions/{question_id}/answer", json={"answer_text": "cats"}
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["question_id"] == question_id
        assert data["question_text"] == "cats or dogs?"
        assert data["likes"] == 0
        assert data["liked_by"] == []
        assert data["author"]["username"] == "tester"

        inbox = await authenticated_client.get("/api/v1/questions/inbox")
        assert inbox.json()["data"] == []
        feed = await anon_client.get(f"/api/v1/feed/users/{RECEIVER}")
        assert [a["id"] for a in feed.json()["data"]] == [data["id"]]

    @pytest.mark.asyncio
    async def test_second_answer_conflicts(
        self, authenticated_client: AsyncClient, anon_client: AsyncClient
    ) -> None:
        question_id = await _ask(anon_client)
        await authenticated_client.post(
            f"/api/v1/questions/{question_id}/answer", json={"answer_text": "one"}
        )

        response = await authenticated_client.post(
            f"/api/v1/questions/{question_id}/answer", json={"answer_text": "two"}
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "QUESTION_ALREADY_ANSWERED"

    @pytest.mark.asyncio
    async def test_empty_answer(
        self, authenticated_client: AsyncClient, anon_client: AsyncClient
    ) -> None:
        question_id = await _ask(anon_client)

        response = await authenticated_client.post(
            f"/api/v1/questions/{question_id}/answer", json={"answer_text": "  "}
        )

        assert response.status_code == 400

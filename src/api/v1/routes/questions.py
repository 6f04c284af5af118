"""Question API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_answer_service, get_question_service
from api.v1.routes.answers import build_answer_response
from api.v1.schemas.answer import AnswerCreate, AnswerDetailResponse
from api.v1.schemas.question import (
    QuestionCreate,
    QuestionDetailResponse,
    QuestionListResponse,
    QuestionResponse,
)
from domain.entities.question import Question
from domain.services.answer_service import AnswerService
from domain.services.question_service import QuestionService

router = APIRouter(prefix="/questions", tags=["questions"])


@router.post(
    "",
    response_model=QuestionDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send an anonymous question",
    responses={
        201: {"description": "Question queued"},
        400: {"description": "Empty or too long"},
    },
)
async def submit_question(
    body: QuestionCreate,
    service: QuestionService = Depends(get_question_service),
) -> QuestionDetailResponse:
    """No authentication: the sender is never recorded."""
    question = await service.submit(body.receiver_id, body.text, body.theme)
    return QuestionDetailResponse(data=_build_question_response(question))


@router.get(
    "/inbox",
    response_model=QuestionListResponse,
    summary="List unanswered questions",
)
async def list_inbox(
    user: CurrentUser,
    service: QuestionService = Depends(get_question_service),
) -> QuestionListResponse:
    """Pending questions for the caller, newest first."""
    questions = await service.list_unanswered(user.uid)
    return QuestionListResponse(data=[_build_question_response(q) for q in questions])


@router.delete(
    "/{question_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Discard a question",
    responses={
        404: {"description": "Question not found"},
        409: {"description": "Question already answered"},
    },
)
async def discard_question(
    question_id: UUID,
    user: CurrentUser,
    service: QuestionService = Depends(get_question_service),
) -> None:
    """Remove a question from the caller's inbox."""
    await service.discard(question_id, user.uid)
    return None


@router.post(
    "/{question_id}/answer",
    response_model=AnswerDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Answer a question",
    responses={
        201: {"description": "Answer published"},
        404: {"description": "Question not found"},
        409: {"description": "Question already answered"},
        500: {"description": "Answer saved but question not marked answered"},
    },
)
async def answer_question(
    question_id: UUID,
    body: AnswerCreate,
    user: CurrentUser,
    service: AnswerService = Depends(get_answer_service),
) -> AnswerDetailResponse:
    """Publish an answer and close the question."""
    answer = await service.publish_for_owner(
        question_id,
        user.uid,
        body.answer_text,
        is_public=body.is_public,
    )
    return AnswerDetailResponse(data=build_answer_response(answer))


def _build_question_response(question: Question) -> QuestionResponse:
    """Build a QuestionResponse from a Question entity."""
    return QuestionResponse(
        id=question.id,
        receiver_id=question.receiver_id,
        text=question.text,
        theme=question.theme,
        is_answered=question.is_answered,
        timestamp=question.timestamp,
    )

"""Answer API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from api.dependencies.auth import CurrentUser, ViewerId
from api.v1.dependencies import get_answer_service, get_engagement_service
from api.v1.schemas.answer import (
    AnswerDetailResponse,
    AnswerResponse,
    AuthorResponse,
    LikeToggleResponse,
    VisibilityUpdate,
)
from core.exceptions import AnswerNotFoundError
from domain.entities.answer import Answer
from domain.services.answer_service import AnswerService
from domain.services.engagement_service import EngagementService

router = APIRouter(prefix="/answers", tags=["answers"])


@router.get(
    "/{answer_id}",
    response_model=AnswerDetailResponse,
    summary="Get an answer",
    responses={404: {"description": "Answer not found"}},
)
async def get_answer(
    answer_id: UUID,
    service: AnswerService = Depends(get_answer_service),
) -> AnswerDetailResponse:
    """Fetch a single public answer."""
    answer = await service.get(answer_id)
    if not answer or not answer.is_public:
        raise AnswerNotFoundError(str(answer_id))
    return AnswerDetailResponse(data=build_answer_response(answer))


@router.post(
    "/{answer_id}/like",
    response_model=LikeToggleResponse,
    summary="Toggle like",
    responses={404: {"description": "Answer not found"}},
)
async def toggle_like(
    answer_id: UUID,
    viewer_id: ViewerId,
    service: EngagementService = Depends(get_engagement_service),
) -> LikeToggleResponse:
    """Like or unlike as the signed-in user or the X-Device-Id device."""
    state = await service.toggle_like(answer_id, viewer_id)
    return LikeToggleResponse(answer_id=answer_id, state=state)


@router.patch(
    "/{answer_id}/visibility",
    response_model=AnswerDetailResponse,
    summary="Show or hide an answer",
    responses={404: {"description": "Answer not found"}},
)
async def update_visibility(
    answer_id: UUID,
    body: VisibilityUpdate,
    user: CurrentUser,
    service: AnswerService = Depends(get_answer_service),
) -> AnswerDetailResponse:
    """Owner-only toggle of ``is_public``."""
    answer = await service.set_visibility(answer_id, user.uid, body.is_public)
    return AnswerDetailResponse(data=build_answer_response(answer))


@router.delete(
    "/{answer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an answer",
    responses={404: {"description": "Answer not found"}},
)
async def delete_answer(
    answer_id: UUID,
    user: CurrentUser,
    service: AnswerService = Depends(get_answer_service),
) -> None:
    """Owner-only delete. The question stays answered."""
    await service.delete(answer_id, user.uid)
    return None


def build_answer_response(answer: Answer) -> AnswerResponse:
    """Build an AnswerResponse from an Answer entity."""
    return AnswerResponse(
        id=answer.id,
        question_id=answer.question_id,
        user_id=answer.user_id,
        question_text=answer.question_text,
        answer_text=answer.answer_text,
        timestamp=answer.timestamp,
        likes=answer.likes,
        liked_by=sorted(answer.liked_by),
        is_public=answer.is_public,
        author=AuthorResponse(
            username=answer.author.username,
            avatar=answer.author.avatar,
            full_name=answer.author.full_name,
        ),
    )

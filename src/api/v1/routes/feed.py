"""Feed API routes."""

from fastapi import APIRouter, Depends

from api.dependencies.auth import OptionalUser
from api.v1.dependencies import get_feed_service
from api.v1.routes.answers import build_answer_response
from api.v1.schemas.answer import AnswerListResponse
from domain.services.feed_service import FeedService

router = APIRouter(prefix="/feed", tags=["feed"])


@router.get(
    "/global",
    response_model=AnswerListResponse,
    summary="Newest public answers",
)
async def get_global_feed(
    service: FeedService = Depends(get_feed_service),
) -> AnswerListResponse:
    """Newest public answers across all users."""
    answers = await service.get_global_feed()
    return AnswerListResponse(data=[build_answer_response(a) for a in answers])


@router.get(
    "/users/{uid}",
    response_model=AnswerListResponse,
    summary="A user's answers",
)
async def get_user_feed(
    uid: str,
    user: OptionalUser,
    service: FeedService = Depends(get_feed_service),
) -> AnswerListResponse:
    """Newest answers by ``uid``; private ones only for the owner."""
    is_owner = user is not None and user.uid == uid
    answers = await service.get_user_feed(uid, public_only=not is_owner)
    return AnswerListResponse(data=[build_answer_response(a) for a in answers])

"""Pydantic schemas for Answer API."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.answer import LikeState


class AnswerCreate(BaseModel):
    """Schema for publishing an answer."""

    answer_text: str = Field(..., max_length=5000)
    is_public: bool = True


class VisibilityUpdate(BaseModel):
    """Schema for showing or hiding an answer."""

    is_public: bool


class AuthorResponse(BaseModel):
    """Author fields as they were when the answer was published."""

    username: str
    avatar: str
    full_name: str


class AnswerResponse(BaseModel):
    """Schema for Answer response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "456e4567-e89b-12d3-a456-426614174000",
                "question_id": "123e4567-e89b-12d3-a456-426614174000",
                "user_id": "k3J9aQ2xLm",
                "question_text": "favourite song?",
                "answer_text": "anything by the beatles",
                "timestamp": 1767225600000,
                "likes": 2,
                "liked_by": ["anon_x1", "k9Pq"],
                "is_public": True,
                "author": {"username": "jane", "avatar": "", "full_name": "Jane"},
            }
        },
    )

    id: UUID
    question_id: UUID
    user_id: str
    question_text: str
    answer_text: str
    timestamp: int
    likes: int
    liked_by: list[str]
    is_public: bool
    author: AuthorResponse


class AnswerListResponse(BaseModel):
    """Schema for list of Answers."""

    data: list[AnswerResponse]


class AnswerDetailResponse(BaseModel):
    """Schema for single Answer."""

    data: AnswerResponse


class LikeToggleResponse(BaseModel):
    """New like state for the calling viewer."""

    answer_id: UUID
    state: LikeState

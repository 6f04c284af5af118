"""Pydantic schemas for Question API."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class QuestionCreate(BaseModel):
    """Schema for sending an anonymous question."""

    receiver_id: str = Field(..., min_length=1, max_length=128)
    text: str = Field(..., max_length=2000)
    theme: str = Field("default", max_length=50)


class QuestionResponse(BaseModel):
    """Schema for Question response. Senders are never exposed."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    receiver_id: str
    text: str
    theme: str
    is_answered: bool
    timestamp: int


class QuestionListResponse(BaseModel):
    """Schema for list of Questions."""

    data: list[QuestionResponse]


class QuestionDetailResponse(BaseModel):
    """Schema for single Question."""

    data: QuestionResponse

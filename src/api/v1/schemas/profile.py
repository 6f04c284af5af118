"""Pydantic schemas for Profile API."""

from pydantic import BaseModel, ConfigDict, Field


class ProfileCreate(BaseModel):
    """Schema for registering the caller's profile."""

    username: str = Field(..., max_length=64)
    full_name: str = Field("", max_length=100)
    bio: str | None = Field(None, max_length=500)
    avatar: str | None = Field(None, max_length=500)


class ProfileUpdate(BaseModel):
    """Schema for editing non-username profile fields."""

    full_name: str | None = Field(None, max_length=100)
    bio: str | None = Field(None, max_length=500)
    avatar: str | None = Field(None, max_length=500)


class UsernameChange(BaseModel):
    """Schema for renaming a profile."""

    username: str = Field(..., max_length=64)


class DeviceTokenRegister(BaseModel):
    """Schema for registering a push token."""

    token: str = Field(..., min_length=1, max_length=512)


class ProfileResponse(BaseModel):
    """Schema for Profile response. ``email`` is only filled for the owner."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "uid": "k3J9aQ2xLm",
                "username": "jane",
                "full_name": "Jane Doe",
                "avatar": "https://api.dicebear.com/7.x/notionists/svg?seed=jane",
                "bio": "ask me anything",
                "premium_status": False,
                "created_at": 1767225600000,
            }
        },
    )

    uid: str
    username: str
    full_name: str
    avatar: str | None = None
    bio: str | None = None
    premium_status: bool = False
    created_at: int
    email: str | None = None
    last_active: int | None = None
    last_username_change: int | None = None


class ProfileDetailResponse(BaseModel):
    """Schema for single Profile."""

    data: ProfileResponse


class UsernameAvailabilityResponse(BaseModel):
    """Schema for username availability check."""

    username: str
    available: bool


class EmailLookupResponse(BaseModel):
    """Sign-in email resolved from a username."""

    email: str


class DeviceTokenResponse(BaseModel):
    """Result of registering a push token."""

    registered: bool


class StatsResponse(BaseModel):
    """Per-user answer totals."""

    answer_count: int
    total_likes: int


class StatsDetailResponse(BaseModel):
    """Schema for single stats payload."""

    data: StatsResponse

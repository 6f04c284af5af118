"""Profile API routes."""

from fastapi import APIRouter, Depends, Query, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_feed_service, get_identity_service
from api.v1.schemas.profile import (
    DeviceTokenRegister,
    DeviceTokenResponse,
    EmailLookupResponse,
    ProfileCreate,
    ProfileDetailResponse,
    ProfileResponse,
    ProfileUpdate,
    StatsDetailResponse,
    StatsResponse,
    UsernameAvailabilityResponse,
    UsernameChange,
)
from core.exceptions import ProfileNotFoundError
from domain.entities.profile import UserProfile, normalize_username
from domain.services.feed_service import FeedService
from domain.services.identity_service import IdentityService

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get(
    "/username-available",
    response_model=UsernameAvailabilityResponse,
    summary="Check username availability",
)
async def check_username(
    username: str = Query(..., min_length=1, max_length=30),
    service: IdentityService = Depends(get_identity_service),
) -> UsernameAvailabilityResponse:
    """Case-insensitive check against claimed usernames."""
    taken = await service.is_username_taken(username)
    return UsernameAvailabilityResponse(
        username=normalize_username(username),
        available=not taken,
    )


@router.post(
    "",
    response_model=ProfileDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register the caller's profile",
    responses={
        201: {"description": "Profile created"},
        409: {"description": "Username taken or profile already exists"},
    },
)
async def create_profile(
    body: ProfileCreate,
    user: CurrentUser,
    service: IdentityService = Depends(get_identity_service),
) -> ProfileDetailResponse:
    """Create the profile for the authenticated uid."""
    profile = await service.create_profile(
        UserProfile(
            uid=user.uid,
            email=user.email,
            username=body.username,
            full_name=body.full_name or user.display_name or "",
            bio=body.bio,
            avatar=body.avatar,
        )
    )
    return ProfileDetailResponse(data=_build_profile_response(profile, include_private=True))


@router.get(
    "/me",
    response_model=ProfileDetailResponse,
    summary="Get own profile",
    responses={404: {"description": "Profile not registered yet"}},
)
async def get_own_profile(
    user: CurrentUser,
    service: IdentityService = Depends(get_identity_service),
) -> ProfileDetailResponse:
    """Return the caller's profile, including private fields."""
    profile = await service.get_profile(user.uid)
    if not profile:
        raise ProfileNotFoundError(user.uid)
    return ProfileDetailResponse(data=_build_profile_response(profile, include_private=True))


@router.patch(
    "/me",
    response_model=ProfileDetailResponse,
    summary="Update own profile",
)
async def update_own_profile(
    body: ProfileUpdate,
    user: CurrentUser,
    service: IdentityService = Depends(get_identity_service),
) -> ProfileDetailResponse:
    """Edit display name, bio or avatar."""
    profile = await service.update_profile(
        user.uid,
        full_name=body.full_name,
        bio=body.bio,
        avatar=body.avatar,
    )
    return ProfileDetailResponse(data=_build_profile_response(profile, include_private=True))


@router.put(
    "/me/username",
    response_model=ProfileDetailResponse,
    summary="Change username",
    responses={
        409: {"description": "Username taken, or a concurrent rename won"},
        429: {"description": "Username changed too recently"},
    },
)
async def change_username(
    body: UsernameChange,
    user: CurrentUser,
    service: IdentityService = Depends(get_identity_service),
) -> ProfileDetailResponse:
    """Rename the caller. Allowed once per cooldown period."""
    profile = await service.change_username(user.uid, body.username)
    return ProfileDetailResponse(data=_build_profile_response(profile, include_private=True))


@router.post(
    "/me/activity",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Record session start",
)
async def record_activity(
    user: CurrentUser,
    service: IdentityService = Depends(get_identity_service),
) -> None:
    """Bump ``last_active``. Always succeeds from the client's point of view."""
    await service.touch_activity(user.uid)
    return None


@router.post(
    "/me/device-tokens",
    response_model=DeviceTokenResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Register a push token",
)
async def register_device_token(
    body: DeviceTokenRegister,
    user: CurrentUser,
    service: IdentityService = Depends(get_identity_service),
) -> DeviceTokenResponse:
    """Best-effort registration; failures are logged, never returned."""
    registered = await service.register_device_token(user.uid, body.token)
    return DeviceTokenResponse(registered=registered)


@router.get(
    "/by-username/{username}",
    response_model=ProfileDetailResponse,
    summary="Get public profile by username",
    responses={404: {"description": "No such username"}},
)
async def get_profile_by_username(
    username: str,
    service: IdentityService = Depends(get_identity_service),
) -> ProfileDetailResponse:
    """Public profile lookup."""
    profile = await service.get_profile_by_username(username)
    if not profile:
        raise ProfileNotFoundError(normalize_username(username))
    return ProfileDetailResponse(data=_build_profile_response(profile))


@router.get(
    "/by-username/{username}/email",
    response_model=EmailLookupResponse,
    summary="Resolve sign-in email for a username",
    responses={404: {"description": "No such username"}},
)
async def get_login_email(
    username: str,
    service: IdentityService = Depends(get_identity_service),
) -> EmailLookupResponse:
    """Lets clients sign in with a username instead of an email."""
    email = await service.get_email_by_username(username)
    if not email:
        raise ProfileNotFoundError(normalize_username(username))
    return EmailLookupResponse(email=email)


@router.get(
    "/{uid}/stats",
    response_model=StatsDetailResponse,
    summary="Get answer stats for a user",
)
async def get_profile_stats(
    uid: str,
    service: FeedService = Depends(get_feed_service),
) -> StatsDetailResponse:
    """Answer count and total likes."""
    stats = await service.get_user_stats(uid)
    return StatsDetailResponse(
        data=StatsResponse(answer_count=stats.answer_count, total_likes=stats.total_likes)
    )


def _build_profile_response(
    profile: UserProfile, include_private: bool = False
) -> ProfileResponse:
    """Build a ProfileResponse, hiding owner-only fields from visitors."""
    response = ProfileResponse(
        uid=profile.uid,
        username=profile.username,
        full_name=profile.full_name,
        avatar=profile.avatar,
        bio=profile.bio,
        premium_status=profile.premium_status,
        created_at=profile.created_at,
    )
    if include_private:
        response.email = profile.email
        response.last_active = profile.last_active
        response.last_username_change = profile.last_username_change
    return response

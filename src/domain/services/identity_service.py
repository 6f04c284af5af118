"""Identity registry: profiles and the username uniqueness invariant."""

from collections.abc import Callable

import structlog

from core.clock import now_ms
from core.config import settings
from core.exceptions import (
    CooldownError,
    ProfileChangedError,
    ProfileExistsError,
    ProfileNotFoundError,
    UsernameTakenError,
    ValidationError,
)
from domain.entities.profile import (
    UserProfile,
    normalize_username,
    username_cooldown_remaining,
)
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30
DEFAULT_AVATAR_URL = "https://api.dicebear.com/7.x/notionists/svg?seed={seed}"


def validate_username(name: str) -> str:
    """Normalize a candidate username or raise ValidationError."""
    normalized = normalize_username(name)
    if len(normalized) < USERNAME_MIN_LENGTH:
        raise ValidationError(
            f"Username must be at least {USERNAME_MIN_LENGTH} characters",
            field="username",
        )
    if len(normalized) > USERNAME_MAX_LENGTH:
        raise ValidationError(
            f"Username must be at most {USERNAME_MAX_LENGTH} characters",
            field="username",
        )
    if any(ch.isspace() for ch in normalized):
        raise ValidationError("Username cannot contain whitespace", field="username")
    return normalized


class IdentityService:
    """Service layer for profile records and username allocation.

    Uniqueness is enforced by a claim record keyed by the normalized
    username. The claim is inserted conditionally in the same transaction
    as the profile write, so two concurrent signups for one name cannot
    both commit.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        cooldown_days: int = settings.username_cooldown_days,
    ) -> None:
        self._uow_factory = uow_factory
        self._cooldown_days = cooldown_days

    async def is_username_taken(self, name: str) -> bool:
        """Case-insensitive existence check."""
        async with self._uow_factory() as uow:
            return await uow.profiles.username_exists(normalize_username(name))

    async def create_profile(self, profile: UserProfile) -> UserProfile:
        """Register a new profile, claiming its username."""
        username = validate_username(profile.username)

        async with self._uow_factory() as uow:
            if await uow.profiles.get(profile.uid):
                raise ProfileExistsError(profile.uid)

            if await uow.profiles.username_exists(username):
                raise UsernameTakenError(username)

            # The existence check above can race; the claim is the real guard
            if not await uow.profiles.claim_username(username, profile.uid):
                logger.info("username_claim_lost", username=username, uid=profile.uid)
                raise UsernameTakenError(username)

            profile.username = username
            profile.last_active = now_ms()
            if not profile.avatar:
                profile.avatar = DEFAULT_AVATAR_URL.format(seed=username)

            created = await uow.profiles.create(profile)
            await uow.commit()

        logger.info("profile_created", uid=created.uid, username=created.username)
        return created

    async def get_profile(self, uid: str) -> UserProfile | None:
        """Get a profile by uid, or None."""
        async with self._uow_factory() as uow:
            return await uow.profiles.get(uid)

    async def get_profile_by_username(self, name: str) -> UserProfile | None:
        """Get a profile by (case-insensitive) username, or None."""
        async with self._uow_factory() as uow:
            return await uow.profiles.get_by_username(normalize_username(name))

    async def get_email_by_username(self, name: str) -> str | None:
        """Resolve the sign-in email for a username."""
        profile = await self.get_profile_by_username(name)
        return profile.email if profile else None

    async def change_username(
        self, uid: str, new_name: str, now: int | None = None
    ) -> UserProfile:
        """Rename a profile, honouring the cooldown since the last rename."""
        now = now_ms() if now is None else now
        username = validate_username(new_name)

        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(uid)
            if not profile:
                raise ProfileNotFoundError(uid)

            if username == profile.username:
                return profile

            remaining = username_cooldown_remaining(
                now, profile.last_username_change, self._cooldown_days
            )
            if remaining > 0:
                raise CooldownError(remaining)

            # The conditional write goes first so a concurrent rename of the
            # same profile either waits on the row or matches nothing.
            old_username = profile.username
            renamed = await uow.profiles.rename(
                uid,
                old_username=old_username,
                new_username=username,
                previous_change=profile.last_username_change,
                changed_at=now,
            )
            if not renamed:
                raise ProfileChangedError(uid)

            if not await uow.profiles.claim_username(username, uid):
                raise UsernameTakenError(username)

            await uow.profiles.release_username(old_username, uid)
            await uow.commit()

        profile.username = username
        profile.last_username_change = now

        logger.info(
            "username_changed",
            uid=uid,
            old_username=old_username,
            new_username=username,
        )
        return profile

    async def update_profile(
        self,
        uid: str,
        full_name: str | None = None,
        bio: str | None = None,
        avatar: str | None = None,
    ) -> UserProfile:
        """Update the owner's non-username profile fields."""
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(uid)
            if not profile:
                raise ProfileNotFoundError(uid)

            if full_name is not None:
                profile.full_name = full_name.strip()
            if bio is not None:
                profile.bio = bio.strip() or None
            if avatar is not None:
                profile.avatar = avatar or DEFAULT_AVATAR_URL.format(seed=profile.username)

            updated = await uow.profiles.update(profile)
            await uow.commit()
            return updated

    async def touch_activity(self, uid: str) -> None:
        """Best-effort ``last_active`` bump. Never raises."""
        try:
            async with self._uow_factory() as uow:
                touched = await uow.profiles.touch(uid, now_ms())
                await uow.commit()
            if not touched:
                logger.debug("touch_activity_skipped", uid=uid)
        except Exception:
            logger.warning("touch_activity_failed", uid=uid, exc_info=True)

    async def register_device_token(self, uid: str, token: str) -> bool:
        """Best-effort registration of a push token. Never raises."""
        if not token:
            return False
        try:
            async with self._uow_factory() as uow:
                added = await uow.profiles.add_device_token(uid, token)
                await uow.commit()
            return added
        except Exception:
            logger.warning("device_token_registration_failed", uid=uid, exc_info=True)
            return False

    async def get_device_tokens(self, uid: str) -> list[str]:
        """Push tokens for a user, consumed by the delivery service."""
        async with self._uow_factory() as uow:
            return await uow.profiles.get_device_tokens(uid)

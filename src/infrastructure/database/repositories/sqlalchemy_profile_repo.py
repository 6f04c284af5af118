"""SQLAlchemy implementation of Profile repository."""

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.clock import now_ms
from domain.entities.profile import UserProfile
from domain.repositories.errors import OrderedQueryUnavailable
from infrastructure.database.conditional import insert_if_absent
from infrastructure.database.models import (
    DeviceTokenModel,
    ProfileModel,
    UsernameClaimModel,
)


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository."""

    def __init__(self, session: AsyncSession, ordered_queries: bool = True) -> None:
        self._session = session
        self._ordered_queries = ordered_queries

    async def get(self, uid: str) -> UserProfile | None:
        """Get a profile by uid."""
        stmt = select(ProfileModel).where(ProfileModel.uid == uid)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_username(self, username: str) -> UserProfile | None:
        """Resolve the claim, then load the profile it points at."""
        stmt = (
            select(ProfileModel)
            .join(UsernameClaimModel, UsernameClaimModel.uid == ProfileModel.uid)
            .where(UsernameClaimModel.username == username)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def username_exists(self, username: str) -> bool:
        """Check whether a username claim exists."""
        stmt = select(UsernameClaimModel.username).where(
            UsernameClaimModel.username == username
        ).limit(1)
        result = await self._session.execute(stmt)
        return result.first() is not None

    async def claim_username(self, username: str, uid: str) -> bool:
        """Conditionally insert the claim document."""
        return await insert_if_absent(
            self._session,
            UsernameClaimModel,
            username=username,
            uid=uid,
            claimed_at=now_ms(),
        )

    async def release_username(self, username: str, uid: str) -> bool:
        """Delete a claim, only if ``uid`` holds it."""
        stmt = delete(UsernameClaimModel).where(
            UsernameClaimModel.username == username,
            UsernameClaimModel.uid == uid,
        )
        result = await self._session.execute(stmt)
        return result.rowcount > 0  # type: ignore[attr-defined, no-any-return]

    async def create(self, profile: UserProfile) -> UserProfile:
        """Create a new profile."""
        model = self._to_model(profile)
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def update(self, profile: UserProfile) -> UserProfile:
        """Update the editable fields of an existing profile."""
        stmt = select(ProfileModel).where(ProfileModel.uid == profile.uid)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Profile {profile.uid} not found")

        model.full_name = profile.full_name
        model.avatar = profile.avatar
        model.bio = profile.bio
        model.premium_status = profile.premium_status

        await self._session.flush()
        return self._to_entity(model)

    async def rename(
        self,
        uid: str,
        old_username: str,
        new_username: str,
        previous_change: int | None,
        changed_at: int,
    ) -> bool:
        """Conditional username write; the row lock serializes concurrent renames."""
        stmt = (
            update(ProfileModel)
            .where(
                ProfileModel.uid == uid,
                ProfileModel.username == old_username,
                ProfileModel.last_username_change.is_not_distinct_from(previous_change),
            )
            .values(username=new_username, last_username_change=changed_at)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount > 0  # type: ignore[attr-defined, no-any-return]

    async def touch(self, uid: str, timestamp: int) -> bool:
        """Set ``last_active`` without loading the row."""
        stmt = update(ProfileModel).where(ProfileModel.uid == uid).values(last_active=timestamp)
        result = await self._session.execute(stmt)
        return result.rowcount > 0  # type: ignore[attr-defined, no-any-return]

    async def add_device_token(self, uid: str, token: str) -> bool:
        """Set-add a device token."""
        return await insert_if_absent(
            self._session,
            DeviceTokenModel,
            uid=uid,
            token=token,
            created_at=now_ms(),
        )

    async def get_device_tokens(self, uid: str) -> list[str]:
        """All device tokens for a user, oldest first."""
        stmt = (
            select(DeviceTokenModel.token)
            .where(DeviceTokenModel.uid == uid)
            .order_by(DeviceTokenModel.created_at)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars())

    async def list_recent(self, limit: int) -> list[UserProfile]:
        """Newest profiles first, via the ``created_at`` index."""
        if not self._ordered_queries:
            raise OrderedQueryUnavailable("profiles", "created_at")
        stmt = select(ProfileModel).order_by(ProfileModel.created_at.desc()).limit(limit)
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def scan(self, limit: int) -> list[UserProfile]:
        """Bounded fetch in store order."""
        stmt = select(ProfileModel).limit(limit)
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    def _to_entity(self, model: ProfileModel) -> UserProfile:
        """Convert ORM model to domain entity."""
        return UserProfile(
            uid=model.uid,
            username=model.username,
            email=model.email,
            full_name=model.full_name,
            avatar=model.avatar,
            bio=model.bio,
            premium_status=model.premium_status,
            created_at=model.created_at,
            last_active=model.last_active,
            last_username_change=model.last_username_change,
        )

    def _to_model(self, entity: UserProfile) -> ProfileModel:
        """Convert domain entity to ORM model."""
        return ProfileModel(
            uid=entity.uid,
            username=entity.username,
            email=entity.email,
            full_name=entity.full_name,
            avatar=entity.avatar,
            bio=entity.bio,
            premium_status=entity.premium_status,
            created_at=entity.created_at,
            last_active=entity.last_active,
            last_username_change=entity.last_username_change,
        )

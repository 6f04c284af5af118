"""Profile repository protocol."""

from typing import Protocol

from domain.entities.profile import UserProfile


class IProfileRepository(Protocol):
    """Repository interface for UserProfile records and the username index."""

    async def get(self, uid: str) -> UserProfile | None:
        """Get a profile by uid."""
        ...

    async def get_by_username(self, username: str) -> UserProfile | None:
        """Point lookup through the username claim index (normalized name)."""
        ...

    async def username_exists(self, username: str) -> bool:
        """Check whether a normalized username is claimed."""
        ...

    async def claim_username(self, username: str, uid: str) -> bool:
        """Conditionally insert a username claim.

        Returns False when the name is already claimed, without raising.
        """
        ...

    async def release_username(self, username: str, uid: str) -> bool:
        """Remove a claim held by ``uid``."""
        ...

    async def create(self, profile: UserProfile) -> UserProfile:
        """Insert a new profile."""
        ...

    async def update(self, profile: UserProfile) -> UserProfile:
        """Persist editable profile fields. Username fields go through ``rename``."""
        ...

    async def rename(
        self,
        uid: str,
        old_username: str,
        new_username: str,
        previous_change: int | None,
        changed_at: int,
    ) -> bool:
        """Compare-and-set the username and ``last_username_change``.

        Applies only while the row still holds ``old_username`` and
        ``previous_change``; returns False otherwise.
        """
        ...

    async def touch(self, uid: str, timestamp: int) -> bool:
        """Set ``last_active``; returns False if the profile does not exist."""
        ...

    async def add_device_token(self, uid: str, token: str) -> bool:
        """Set-add a push token; returns False if it was already registered."""
        ...

    async def get_device_tokens(self, uid: str) -> list[str]:
        """All push tokens registered for a user."""
        ...

    async def list_recent(self, limit: int) -> list[UserProfile]:
        """Profiles ordered by ``created_at`` descending (indexed path).

        Raises OrderedQueryUnavailable when the ordered capability is off.
        """
        ...

    async def scan(self, limit: int) -> list[UserProfile]:
        """Unordered bounded fetch."""
        ...

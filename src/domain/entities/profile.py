"""User profile domain entity."""

from dataclasses import dataclass, field

from core.clock import MS_PER_DAY, now_ms

USERNAME_COOLDOWN_DAYS = 7


def normalize_username(name: str) -> str:
    """Lowercase, trimmed form used as the uniqueness key."""
    return name.strip().lower()


def username_cooldown_remaining(
    now: int,
    last_change: int | None,
    cooldown_days: int = USERNAME_COOLDOWN_DAYS,
) -> int:
    """Milliseconds left before the username may change again (0 if allowed)."""
    if last_change is None:
        return 0
    remaining = last_change + cooldown_days * MS_PER_DAY - now
    return max(remaining, 0)


def cooldown_remaining_days(
    now: int,
    last_change: int | None,
    cooldown_days: int = USERNAME_COOLDOWN_DAYS,
) -> float:
    """Same as :func:`username_cooldown_remaining`, expressed in days."""
    return username_cooldown_remaining(now, last_change, cooldown_days) / MS_PER_DAY


@dataclass
class UserProfile:
    """Domain entity for a user profile keyed by the auth provider uid."""

    uid: str
    username: str
    email: str = ""
    full_name: str = ""
    avatar: str | None = None
    bio: str | None = None
    premium_status: bool = False
    created_at: int = field(default_factory=now_ms)
    last_active: int | None = None
    last_username_change: int | None = None

    def __post_init__(self) -> None:
        """Store usernames in normalized form only."""
        self.username = normalize_username(self.username)

"""JWT authentication provider implementation.

Tokens are issued by the external auth provider and verified here with a
shared secret. Expected payload:

    {
        "sub": "provider-uid",
        "email": "user@example.com",
        "name": "Jane",
        "exp": 1234567890
    }
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog
from jose import JWTError, jwt

from core.config import settings
from infrastructure.auth.provider import TokenUser

logger = structlog.get_logger()


class JWTAuthProvider:
    """JWT-based authentication provider."""

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate a JWT and extract the caller's identity.

        Args:
            token: The JWT to validate

        Returns:
            TokenUser if valid, None if invalid, expired, or missing claims
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"verify_aud": False},
            )
        except JWTError as exc:
            logger.debug("token_rejected", reason=str(exc))
            return None

        uid = payload.get("sub")
        email = payload.get("email")
        if not uid or not email:
            return None

        metadata = payload.get("user_metadata") or {}
        display_name = (
            metadata.get("display_name")
            or metadata.get("full_name")
            or payload.get("name")
        )

        return TokenUser(uid=str(uid), email=email, display_name=display_name)

    def create_token(self, user: TokenUser) -> str:
        """
        Create a JWT for a user (used by tests and local tooling).

        Args:
            user: The user to create a token for

        Returns:
            The generated JWT string
        """
        expire = datetime.now(timezone.utc) + timedelta(minutes=self._expire_minutes)

        payload: dict = {
            "sub": user.uid,
            "email": user.email,
            "exp": expire,
            "user_metadata": {
                "display_name": user.display_name,
            },
        }

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

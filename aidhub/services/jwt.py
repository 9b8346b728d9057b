"""JWT Token Service."""

import secrets
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from jose import JWTError, jwt

from aidhub.config import Settings, get_settings
from aidhub.models.user import User
from aidhub.utils import utcnow

ACCESS = "access"
REFRESH = "refresh"


@dataclass(frozen=True)
class TokenPayload:
    """Verified claims of an access or refresh token."""

    user_id: int
    email: str
    role: str
    type: str


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
    role: str
    user_id: int


class JWTService:
    """Handles JWT token creation and validation."""

    def __init__(self, settings: Settings) -> None:
        self.secret_key = settings.signing_key
        self.algorithm = settings.JWT_ALGORITHM
        self.access_ttl = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        self.refresh_ttl = timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)

    def _encode(self, user: User, token_type: str, ttl: timedelta) -> str:
        now = utcnow()
        payload = {
            "sub": str(user.id),
            "email": user.email,
            "role": user.role,
            "type": token_type,
            # Unique per token so a rotated refresh token never equals its predecessor.
            "jti": secrets.token_hex(16),
            "iat": now,
            "exp": now + ttl,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def create_access_token(self, user: User) -> str:
        """Create a short-lived access token for the given user."""
        return self._encode(user, ACCESS, self.access_ttl)

    def create_refresh_token(self, user: User) -> str:
        """Create a long-lived refresh token for the given user."""
        return self._encode(user, REFRESH, self.refresh_ttl)

    def create_token_pair(self, user: User) -> TokenPair:
        return TokenPair(
            access_token=self.create_access_token(user),
            refresh_token=self.create_refresh_token(user),
            role=user.role,
            user_id=user.id,
        )

    def decode_token(self, token: str, expected_type: str = ACCESS) -> TokenPayload | None:
        """Decode and validate a JWT token. Returns None if invalid.

        Expired, malformed, wrongly signed and wrong-type tokens are not
        distinguished from each other.
        """
        try:
            claims: dict[str, Any] = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            return None

        if claims.get("type") != expected_type:
            return None
        try:
            return TokenPayload(
                user_id=int(claims["sub"]),
                email=str(claims["email"]),
                role=str(claims["role"]),
                type=expected_type,
            )
        except (KeyError, TypeError, ValueError):
            return None

    def is_token_valid(self, token: str, expected_type: str = ACCESS) -> bool:
        """Check if a token is valid."""
        return self.decode_token(token, expected_type) is not None


_jwt_service: JWTService | None = None


def get_jwt_service() -> JWTService:
    """Get singleton JWT service instance."""
    global _jwt_service
    if _jwt_service is None:
        _jwt_service = JWTService(get_settings())
    return _jwt_service

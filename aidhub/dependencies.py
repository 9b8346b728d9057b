"""Authentication dependencies for FastAPI routes."""

from dataclasses import dataclass

from fastapi import Depends, Request

from aidhub.exceptions import UnauthorizedError
from aidhub.services.jwt import ACCESS, JWTService, get_jwt_service


@dataclass(frozen=True)
class CurrentUser:
    """Verified principal attached to an authenticated request."""

    user_id: int
    email: str
    role: str


def get_bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header[7:].strip() or None
    return None


def get_current_user(
    request: Request,
    jwt_service: JWTService = Depends(get_jwt_service),
) -> CurrentUser:
    """Extract and validate user from the Bearer access token. Raises 401 if invalid."""
    token = get_bearer_token(request)
    if not token:
        raise UnauthorizedError("Not authenticated")

    payload = jwt_service.decode_token(token, expected_type=ACCESS)
    if payload is None:
        raise UnauthorizedError("Invalid or expired token")

    return CurrentUser(user_id=payload.user_id, email=payload.email, role=payload.role)

"""Typed exceptions for auth and access-control failures.

Each error carries a stable ``kind`` and the HTTP status it maps to; the
message is safe to show to the caller.
"""


class AuthError(Exception):
    """Base class for domain errors raised by the auth services."""

    status_code = 400
    kind = "auth_error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class BadRequestError(AuthError):
    """Malformed input, invalid or expired one-time token, weak password."""

    status_code = 400
    kind = "bad_request"


class UnauthorizedError(AuthError):
    """Bad credentials, unverified email, invalid or expired access/refresh token."""

    status_code = 401
    kind = "unauthorized"


class ForbiddenError(AuthError):
    """Authenticated principal lacks the role or ability for the action."""

    status_code = 403
    kind = "forbidden"


class NotFoundError(AuthError):
    status_code = 404
    kind = "not_found"


class ConflictError(AuthError):
    """Email already registered. Reported as a bad request with its own kind."""

    status_code = 400
    kind = "conflict"

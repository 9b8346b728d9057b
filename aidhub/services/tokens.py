"""One-time tokens for email verification and password reset."""

import hmac
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta

from aidhub.utils import utcnow

TOKEN_BYTES = 32


@dataclass(frozen=True)
class OneTimeToken:
    """A random token and the moment it stops being accepted."""

    value: str
    expires_at: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        return is_expired(self.expires_at, now)


def issue_one_time_token(ttl_minutes: int, now: datetime | None = None) -> OneTimeToken:
    """Generate a hex-encoded token valid for ``ttl_minutes`` from ``now``."""
    issued_at = now or utcnow()
    return OneTimeToken(
        value=secrets.token_hex(TOKEN_BYTES),
        expires_at=issued_at + timedelta(minutes=ttl_minutes),
    )


def is_expired(expires_at: datetime | None, now: datetime | None = None) -> bool:
    """A missing expiry counts as expired."""
    if expires_at is None:
        return True
    return (now or utcnow()) > expires_at


def tokens_match(presented: str | None, stored: str | None) -> bool:
    """Constant-time comparison of a presented token against the stored one."""
    if not presented or not stored:
        return False
    return hmac.compare_digest(presented.encode("utf-8"), stored.encode("utf-8"))

"""Password hashing with bcrypt."""

import bcrypt

from aidhub.config import Settings

# bcrypt only reads the first 72 bytes of its input and newer releases reject longer ones.
MAX_PASSWORD_BYTES = 72


def exceeds_bcrypt_limit(secret: str) -> bool:
    return len(secret.encode("utf-8")) > MAX_PASSWORD_BYTES


class PasswordHasher:
    """Salted one-way hashing for passwords and password-reset tokens."""

    def __init__(self, settings: Settings) -> None:
        self.rounds = settings.BCRYPT_ROUNDS

    def hash(self, secret: str) -> str:
        """Hash a secret with a fresh salt."""
        return bcrypt.hashpw(secret.encode("utf-8"), bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, secret: str, hashed: str | None) -> bool:
        """Check a secret against a stored hash. Malformed or missing hashes never match."""
        if not hashed or exceeds_bcrypt_limit(secret):
            return False
        try:
            return bcrypt.checkpw(secret.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError:
            return False

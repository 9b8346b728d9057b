"""Configuration settings for AidHub."""

import os
import secrets
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class Settings:
    """Application settings. Built once from the environment and passed to services."""

    # Database
    DATABASE_URL: str = "sqlite:///./aidhub.db"

    # JWT
    JWT_SECRET_KEY: str = ""
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # One-time tokens
    VERIFICATION_TOKEN_EXPIRE_MINUTES: int = 30
    PASSWORD_RESET_EXPIRE_MINUTES: int = 60

    # Passwords
    BCRYPT_ROUNDS: int = 10
    MIN_PASSWORD_LENGTH: int = 6
    REVOKE_SESSIONS_ON_PASSWORD_RESET: bool = False

    # Links in outgoing email
    FRONTEND_URL: str = "http://localhost:8000"

    # Mail
    MAIL_FROM: str = "no-reply@aidhub.local"
    SMTP_HOST: str = ""
    SMTP_PORT: int = 587
    SMTP_USERNAME: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_USE_TLS: bool = True

    # Application
    APP_ENV: str = "development"
    DEBUG: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        """Read settings from environment variables, falling back to defaults."""
        return cls(
            DATABASE_URL=os.getenv("DATABASE_URL", cls.DATABASE_URL),
            JWT_SECRET_KEY=os.getenv("JWT_SECRET_KEY", ""),
            JWT_ALGORITHM=os.getenv("JWT_ALGORITHM", cls.JWT_ALGORITHM),
            ACCESS_TOKEN_EXPIRE_MINUTES=int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "15")),
            REFRESH_TOKEN_EXPIRE_DAYS=int(os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", "7")),
            VERIFICATION_TOKEN_EXPIRE_MINUTES=int(os.getenv("VERIFICATION_TOKEN_EXPIRE_MINUTES", "30")),
            PASSWORD_RESET_EXPIRE_MINUTES=int(os.getenv("PASSWORD_RESET_EXPIRE_MINUTES", "60")),
            BCRYPT_ROUNDS=int(os.getenv("BCRYPT_ROUNDS", "10")),
            MIN_PASSWORD_LENGTH=int(os.getenv("MIN_PASSWORD_LENGTH", "6")),
            REVOKE_SESSIONS_ON_PASSWORD_RESET=_env_bool("REVOKE_SESSIONS_ON_PASSWORD_RESET"),
            FRONTEND_URL=os.getenv("FRONTEND_URL", cls.FRONTEND_URL).rstrip("/"),
            MAIL_FROM=os.getenv("MAIL_FROM", cls.MAIL_FROM),
            SMTP_HOST=os.getenv("SMTP_HOST", ""),
            SMTP_PORT=int(os.getenv("SMTP_PORT", "587")),
            SMTP_USERNAME=os.getenv("SMTP_USERNAME", ""),
            SMTP_PASSWORD=os.getenv("SMTP_PASSWORD", ""),
            SMTP_USE_TLS=_env_bool("SMTP_USE_TLS", "true"),
            APP_ENV=os.getenv("APP_ENV", cls.APP_ENV),
            DEBUG=_env_bool("DEBUG"),
        )

    @property
    def is_development(self) -> bool:
        return self.APP_ENV == "development"

    @property
    def signing_key(self) -> str:
        """JWT signing secret. Only development may run on the per-process fallback."""
        if self.JWT_SECRET_KEY:
            return self.JWT_SECRET_KEY
        if not self.is_development:
            raise RuntimeError(f"JWT_SECRET_KEY must be set when APP_ENV={self.APP_ENV}")
        return _FALLBACK_SECRET

    def validate(self) -> list[str]:
        """Validate settings and return list of warnings."""
        errors = []
        if self.JWT_SECRET_KEY == "":
            errors.append("JWT_SECRET_KEY is not set - using auto-generated key (not persistent across restarts)")
        if not self.SMTP_HOST:
            errors.append("SMTP_HOST is not set - outgoing email is written to the log only")
        if self.BCRYPT_ROUNDS < 10:
            errors.append(f"BCRYPT_ROUNDS={self.BCRYPT_ROUNDS} is below the recommended minimum of 10")
        return errors


# Generated once per process so tokens stay valid until restart.
_FALLBACK_SECRET = secrets.token_urlsafe(32)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.from_env()

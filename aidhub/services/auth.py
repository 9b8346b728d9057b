"""Authentication service.

Orchestrates registration, login, token refresh, email verification and
password reset on top of the credential store, the password hasher, the JWT
service and the mailer.
"""

import logging
from urllib.parse import urlencode

from sqlalchemy.orm import Session

from aidhub.config import Settings, get_settings
from aidhub.exceptions import BadRequestError, ConflictError, NotFoundError, UnauthorizedError
from aidhub.models.user import User
from aidhub.services.jwt import REFRESH, JWTService, TokenPair, get_jwt_service
from aidhub.services.mailer import Mailer, get_mailer
from aidhub.services.password import MAX_PASSWORD_BYTES, PasswordHasher, exceeds_bcrypt_limit
from aidhub.services.tokens import is_expired, issue_one_time_token, tokens_match

logger = logging.getLogger("aidhub")

DEFAULT_ROLE = "user"


class AuthService:
    """Handles user registration, authentication and token lifecycles."""

    def __init__(self, settings: Settings, jwt_service: JWTService, mailer: Mailer) -> None:
        self.settings = settings
        self.jwt = jwt_service
        self.mailer = mailer
        self.hasher = PasswordHasher(settings)

    # --- lookups ---

    @staticmethod
    def _find_by_email(db: Session, email: str) -> User | None:
        return db.query(User).filter(User.email == email).first()

    # --- links ---

    def verification_url(self, email: str, token: str) -> str:
        query = urlencode({"token": token, "email": email})
        return f"{self.settings.FRONTEND_URL}/api/auth/verify-email?{query}"

    def password_reset_url(self, email: str, token: str) -> str:
        query = urlencode({"token": token, "email": email})
        return f"{self.settings.FRONTEND_URL}/reset-password?{query}"

    # --- best-effort notifications ---

    def _send_verification(self, user: User, token: str) -> None:
        try:
            self.mailer.send_verification_email(user.email, user.name, self.verification_url(user.email, token))
        except Exception:
            logger.exception("Failed to send verification email to user %s", user.id)

    def _send_password_reset(self, user: User, token: str) -> None:
        try:
            self.mailer.send_password_reset_email(user.email, user.name, self.password_reset_url(user.email, token))
        except Exception:
            logger.exception("Failed to send password reset email to user %s", user.id)

    def _send_welcome(self, user: User) -> None:
        try:
            self.mailer.send_welcome_email(user.email, user.name)
        except Exception:
            logger.exception("Failed to send welcome email to user %s", user.id)

    # --- flows ---

    def register(self, db: Session, email: str, name: str, password: str, phone: str | None = None) -> dict:
        """Create an unverified account and email a verification link."""
        if exceeds_bcrypt_limit(password):
            raise BadRequestError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long")

        if self._find_by_email(db, email):
            raise ConflictError("User already exists")

        verification = issue_one_time_token(self.settings.VERIFICATION_TOKEN_EXPIRE_MINUTES)
        user = User(
            email=email,
            name=name,
            phone=phone,
            password_hash=self.hasher.hash(password),
            role=DEFAULT_ROLE,
            is_email_verified=False,
            verification_token=verification.value,
            token_expires_at=verification.expires_at,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info("Registered user %s", user.id)

        self._send_verification(user, verification.value)
        return {"message": "User registered successfully. Please verify your email."}

    def login(self, db: Session, email: str, password: str) -> TokenPair:
        """Check credentials and open a new session, replacing any previous one."""
        user = self._find_by_email(db, email)
        if not user or not self.hasher.verify(password, user.password_hash):
            logger.info("Failed login attempt for %s", email)
            raise UnauthorizedError("Invalid email or password")

        if not user.is_email_verified:
            raise UnauthorizedError(
                "Email address is not verified. Please verify your email or request a new verification email."
            )

        tokens = self.jwt.create_token_pair(user)
        user.refresh_token = tokens.refresh_token
        db.commit()
        return tokens

    def refresh_token(self, db: Session, token: str) -> TokenPair:
        """Exchange a refresh token for a new pair. The presented token is revoked."""
        if not token or not token.strip():
            raise BadRequestError("Refresh token was not provided")

        payload = self.jwt.decode_token(token, expected_type=REFRESH)
        if payload is None:
            raise UnauthorizedError("Refresh token expired or invalid. Please log in again.")

        user = db.query(User).filter(User.id == payload.user_id, User.refresh_token == token).first()
        if not user:
            logger.warning("Rejected stale or revoked refresh token for user %s", payload.user_id)
            raise UnauthorizedError("Invalid refresh token. Please log in again.")

        tokens = self.jwt.create_token_pair(user)
        user.refresh_token = tokens.refresh_token
        db.commit()
        return tokens

    def logout(self, db: Session, user_id: int) -> None:
        """Revoke the stored refresh token."""
        user = db.get(User, user_id)
        if user and user.refresh_token is not None:
            user.refresh_token = None
            db.commit()

    def verify_email(self, db: Session, email: str, token: str) -> dict:
        """Consume a verification token and mark the address verified."""
        user = self._find_by_email(db, email)
        if not user or not tokens_match(token, user.verification_token):
            raise BadRequestError("Invalid verification token")

        if is_expired(user.token_expires_at):
            raise BadRequestError("Verification token expired. Please request a new verification email.")

        user.is_email_verified = True
        user.verification_token = None
        user.token_expires_at = None
        db.commit()
        logger.info("Verified email for user %s", user.id)

        self._send_welcome(user)
        return {"message": "Email verified successfully"}

    def resend_verification_email(self, db: Session, email: str) -> dict:
        """Replace the verification token and send it again.

        Callers are expected to rate-limit this operation.
        """
        user = self._find_by_email(db, email)
        if not user or user.is_email_verified:
            raise BadRequestError("Invalid request")

        verification = issue_one_time_token(self.settings.VERIFICATION_TOKEN_EXPIRE_MINUTES)
        user.verification_token = verification.value
        user.token_expires_at = verification.expires_at
        db.commit()

        self._send_verification(user, verification.value)
        return {"message": "Verification email resent successfully"}

    def request_password_reset(self, db: Session, email: str) -> None:
        """Email a password reset link.

        Does nothing for unknown or unverified addresses; callers must not
        reveal which case occurred.
        """
        user = self._find_by_email(db, email)
        if not user or not user.is_email_verified:
            return

        reset = issue_one_time_token(self.settings.PASSWORD_RESET_EXPIRE_MINUTES)
        user.password_reset_token = self.hasher.hash(reset.value)
        user.password_reset_token_expires_at = reset.expires_at
        db.commit()

        self._send_password_reset(user, reset.value)

    def reset_password(
        self,
        db: Session,
        email: str,
        new_password: str,
        current_password: str | None = None,
        token: str | None = None,
    ) -> dict:
        """Replace the password of a verified account."""
        user = self._find_by_email(db, email)
        if not user:
            raise NotFoundError("No user is registered with this email address")

        if not user.is_email_verified:
            raise BadRequestError("Email address is not verified. Please verify your email first.")

        if current_password and not self.hasher.verify(current_password, user.password_hash):
            raise BadRequestError("Current password is incorrect")

        if len(new_password) < self.settings.MIN_PASSWORD_LENGTH:
            raise BadRequestError(
                f"New password must be at least {self.settings.MIN_PASSWORD_LENGTH} characters long"
            )

        if exceeds_bcrypt_limit(new_password):
            raise BadRequestError(f"New password must be at most {MAX_PASSWORD_BYTES} bytes long")

        if token is not None:
            expired = is_expired(user.password_reset_token_expires_at)
            if expired or not self.hasher.verify(token, user.password_reset_token):
                raise BadRequestError("Invalid or expired reset link")

        user.password_hash = self.hasher.hash(new_password)
        user.password_reset_token = None
        user.password_reset_token_expires_at = None
        if self.settings.REVOKE_SESSIONS_ON_PASSWORD_RESET:
            user.refresh_token = None
        db.commit()
        logger.info("Password updated for user %s", user.id)
        return {"message": "Password updated successfully"}


_auth_service: AuthService | None = None


def get_auth_service() -> AuthService:
    """Get singleton auth service instance."""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService(get_settings(), get_jwt_service(), get_mailer())
    return _auth_service

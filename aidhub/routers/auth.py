"""Authentication API endpoints."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from aidhub.database import get_db
from aidhub.dependencies import CurrentUser, get_current_user
from aidhub.rate_limit import limiter
from aidhub.schemas.auth import (
    CurrentUserResponse,
    EmailRequest,
    LoginRequest,
    MessageResponse,
    RefreshRequest,
    RegisterRequest,
    ResetPasswordRequest,
    TokenResponse,
    VerifyEmailRequest,
)
from aidhub.services.auth import AuthService, get_auth_service
from aidhub.services.jwt import TokenPair

router = APIRouter(prefix="/api/auth", tags=["Authentication"])

PASSWORD_RESET_MESSAGE = "If an account exists with that email, a password reset link has been sent."


def _token_response(tokens: TokenPair) -> TokenResponse:
    return TokenResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        role=tokens.role,
        user_id=tokens.user_id,
    )


@router.post("/register", response_model=MessageResponse, status_code=201)
@limiter.limit("5/minute")
def register(
    request: Request,
    body: RegisterRequest,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Register a new user account. The account starts unverified with role 'user'."""
    result = auth_service.register(db, body.email, body.name, body.password, phone=body.phone)
    return MessageResponse(**result)


@router.post("/login", response_model=TokenResponse)
@limiter.limit("10/minute")
def login(
    request: Request,
    body: LoginRequest,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    """Authenticate and receive an access/refresh token pair."""
    return _token_response(auth_service.login(db, body.email, body.password))


@router.post("/refresh", response_model=TokenResponse)
def refresh(
    body: RefreshRequest,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    """Rotate a refresh token into a new token pair."""
    return _token_response(auth_service.refresh_token(db, body.refresh_token))


@router.post("/logout", response_model=MessageResponse)
def logout(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Revoke the current refresh token."""
    auth_service.logout(db, user.user_id)
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=CurrentUserResponse)
def me(user: CurrentUser = Depends(get_current_user)) -> CurrentUserResponse:
    """Return the principal carried by the access token."""
    return CurrentUserResponse(user_id=user.user_id, email=user.email, role=user.role)


@router.post("/verify-email", response_model=MessageResponse)
def verify_email(
    body: VerifyEmailRequest,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Confirm an email address with the token from the verification email."""
    return MessageResponse(**auth_service.verify_email(db, body.email, body.token))


@router.get("/verify-email", response_model=MessageResponse)
def verify_email_link(
    email: str,
    token: str,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Same as POST, for the link embedded in the verification email."""
    return MessageResponse(**auth_service.verify_email(db, email, token))


@router.post("/resend-verification", response_model=MessageResponse)
@limiter.limit("3 per 5 minutes")
def resend_verification(
    request: Request,
    body: EmailRequest,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Send a fresh verification email to an unverified account."""
    return MessageResponse(**auth_service.resend_verification_email(db, body.email))


@router.post("/request-password-reset", response_model=MessageResponse)
@limiter.limit("3/minute")
def request_password_reset(
    request: Request,
    body: EmailRequest,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Request a password reset link. The response never reveals whether the account exists."""
    auth_service.request_password_reset(db, body.email)
    return MessageResponse(message=PASSWORD_RESET_MESSAGE)


@router.post("/reset-password", response_model=MessageResponse)
@limiter.limit("5/minute")
def reset_password(
    request: Request,
    body: ResetPasswordRequest,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Set a new password, optionally proving the current password or a reset token."""
    result = auth_service.reset_password(
        db,
        body.email,
        body.new_password,
        current_password=body.current_password,
        token=body.token,
    )
    return MessageResponse(**result)

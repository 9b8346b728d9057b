"""Pytest configuration and fixtures."""

import re
from dataclasses import dataclass, replace
from urllib.parse import parse_qs, urlparse

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from aidhub.config import Settings, get_settings
from aidhub.database import Base, get_db
from aidhub.models.aid_request import AidRequest  # noqa: F401
from aidhub.models.user import User
from aidhub.services.auth import AuthService, get_auth_service
from aidhub.services.jwt import get_jwt_service
from aidhub.services.mailer import Mailer
from aidhub.services.password import PasswordHasher

PASSWORD = "password123"


@dataclass
class SentEmail:
    to: str
    subject: str
    html: str
    text: str

    @property
    def link(self) -> str:
        return re.search(r"https?://\S+", self.text).group(0)

    @property
    def params(self) -> dict[str, str]:
        """Query parameters of the link in the email."""
        return {key: values[0] for key, values in parse_qs(urlparse(self.link).query).items()}


class RecordingMailer(Mailer):
    """Keeps every rendered email instead of sending it."""

    def __init__(self, settings: Settings) -> None:
        super().__init__(settings)
        self.sent: list[SentEmail] = []
        self.fail = False

    def deliver(self, to: str, subject: str, html: str, text: str) -> None:
        if self.fail:
            raise ConnectionError("mail relay unavailable")
        self.sent.append(SentEmail(to=to, subject=subject, html=html, text=text))

    def last_to(self, email: str) -> SentEmail:
        return [m for m in self.sent if m.to == email][-1]


@pytest.fixture(name="db_session")
def db_session_fixture():
    """Create an in-memory SQLite database for tests."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(name="settings")
def settings_fixture() -> Settings:
    """Application settings with cheap hashing and a fixed frontend URL."""
    return replace(get_settings(), BCRYPT_ROUNDS=4, FRONTEND_URL="http://frontend.test")


@pytest.fixture(name="mailer")
def mailer_fixture(settings: Settings) -> RecordingMailer:
    return RecordingMailer(settings)


@pytest.fixture(name="auth_service")
def auth_service_fixture(settings: Settings, mailer: RecordingMailer) -> AuthService:
    return AuthService(settings, get_jwt_service(), mailer)


@pytest.fixture(name="client")
def client_fixture(db_session: Session, auth_service: AuthService):
    """Create a test client with overridden DB and auth dependencies and disabled rate limiting."""
    from aidhub.rate_limit import limiter
    from main import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_auth_service] = lambda: auth_service
    limiter.enabled = False
    with TestClient(app) as c:
        yield c
    limiter.enabled = True
    app.dependency_overrides.clear()


@pytest.fixture(name="make_user")
def make_user_fixture(db_session: Session, settings: Settings):
    """Insert a user directly, bypassing registration."""
    hasher = PasswordHasher(settings)

    def _make_user(email: str, role: str = "user", verified: bool = True, password: str = PASSWORD) -> User:
        user = User(
            email=email,
            name=email.split("@")[0].title(),
            password_hash=hasher.hash(password),
            role=role,
            is_email_verified=verified,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture(name="unverified_user")
def unverified_user_fixture(db_session: Session, auth_service: AuthService) -> User:
    """Register a user through the service; the account is still unverified."""
    auth_service.register(db_session, "test@example.com", "Test User", PASSWORD, phone="+905551112233")
    return db_session.query(User).filter(User.email == "test@example.com").first()


@pytest.fixture(name="test_user")
def test_user_fixture(db_session: Session, auth_service: AuthService, unverified_user: User) -> dict:
    """Registered and verified user; returns its credentials."""
    auth_service.verify_email(db_session, unverified_user.email, unverified_user.verification_token)
    return {"user_id": unverified_user.id, "email": unverified_user.email, "password": PASSWORD}


@pytest.fixture(name="tokens")
def tokens_fixture(client: TestClient, test_user: dict) -> dict:
    """Log the test user in and return the token response."""
    response = client.post(
        "/api/auth/login",
        json={"email": test_user["email"], "password": test_user["password"]},
    )
    assert response.status_code == 200
    return response.json()


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}

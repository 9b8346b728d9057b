"""Tests for JWT creation and validation."""

from dataclasses import replace

from jose import jwt

from aidhub.config import Settings
from aidhub.models.user import User
from aidhub.services.jwt import ACCESS, REFRESH, JWTService


def _user() -> User:
    return User(id=42, email="aid@example.com", role="admin")


class TestJWTService:
    """Tests for JWTService."""

    def test_access_token_claims(self, settings: Settings):
        """Access tokens carry subject, email, role and type."""
        service = JWTService(settings)
        payload = service.decode_token(service.create_access_token(_user()))
        assert payload is not None
        assert payload.user_id == 42
        assert payload.email == "aid@example.com"
        assert payload.role == "admin"
        assert payload.type == ACCESS

    def test_refresh_token_lifetime(self, settings: Settings):
        """Refresh tokens expire after the configured number of days."""
        service = JWTService(settings)
        claims = jwt.get_unverified_claims(service.create_refresh_token(_user()))
        assert claims["exp"] - claims["iat"] == settings.REFRESH_TOKEN_EXPIRE_DAYS * 86400

    def test_access_token_lifetime(self, settings: Settings):
        service = JWTService(settings)
        claims = jwt.get_unverified_claims(service.create_access_token(_user()))
        assert claims["exp"] - claims["iat"] == settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60

    def test_tokens_are_unique(self, settings: Settings):
        """Two tokens minted back to back differ."""
        service = JWTService(settings)
        assert service.create_refresh_token(_user()) != service.create_refresh_token(_user())

    def test_wrong_type_rejected(self, settings: Settings):
        service = JWTService(settings)
        assert service.decode_token(service.create_access_token(_user()), expected_type=REFRESH) is None
        assert service.decode_token(service.create_refresh_token(_user()), expected_type=ACCESS) is None

    def test_expired_token_rejected(self, settings: Settings):
        service = JWTService(replace(settings, ACCESS_TOKEN_EXPIRE_MINUTES=-1))
        assert service.decode_token(service.create_access_token(_user())) is None

    def test_foreign_secret_rejected(self, settings: Settings):
        ours = JWTService(settings)
        theirs = JWTService(replace(settings, JWT_SECRET_KEY="someone-elses-secret"))
        assert ours.decode_token(theirs.create_access_token(_user())) is None

    def test_garbage_rejected(self, settings: Settings):
        service = JWTService(settings)
        assert service.decode_token("") is None
        assert service.decode_token("invalid.token.here") is None
        assert service.is_token_valid("abc") is False

    def test_non_numeric_subject_rejected(self, settings: Settings):
        service = JWTService(settings)
        token = jwt.encode(
            {"sub": "abc", "email": "x@example.com", "role": "user", "type": ACCESS},
            service.secret_key,
            algorithm=service.algorithm,
        )
        assert service.decode_token(token) is None

    def test_token_pair(self, settings: Settings):
        pair = JWTService(settings).create_token_pair(_user())
        assert pair.role == "admin"
        assert pair.user_id == 42
        assert pair.access_token != pair.refresh_token

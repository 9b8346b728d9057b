"""Tests for one-time tokens and password hashing."""

from datetime import datetime, timedelta

from aidhub.config import Settings
from aidhub.services.password import PasswordHasher, exceeds_bcrypt_limit
from aidhub.services.tokens import is_expired, issue_one_time_token, tokens_match


class TestOneTimeToken:
    """Tests for verification/reset token generation."""

    def test_token_is_64_hex_chars(self):
        token = issue_one_time_token(30)
        assert len(token.value) == 64
        assert all(c in "0123456789abcdef" for c in token.value)

    def test_expiry_is_absolute(self):
        now = datetime(2026, 1, 1, 12, 0)
        token = issue_one_time_token(30, now=now)
        assert token.expires_at == datetime(2026, 1, 1, 12, 30)
        assert token.is_expired(now + timedelta(minutes=29)) is False
        assert token.is_expired(now + timedelta(minutes=31)) is True

    def test_tokens_are_random(self):
        assert issue_one_time_token(30).value != issue_one_time_token(30).value

    def test_missing_expiry_is_expired(self):
        assert is_expired(None) is True

    def test_tokens_match(self):
        assert tokens_match("abc", "abc") is True
        assert tokens_match("abc", "abd") is False
        assert tokens_match("abc", None) is False
        assert tokens_match("", "") is False


class TestPasswordHasher:
    """Tests for bcrypt hashing."""

    def test_hash_and_verify(self, settings: Settings):
        hasher = PasswordHasher(settings)
        hashed = hasher.hash("pw123456")
        assert hashed != "pw123456"
        assert hasher.verify("pw123456", hashed) is True
        assert hasher.verify("pw1234567", hashed) is False

    def test_salted(self, settings: Settings):
        hasher = PasswordHasher(settings)
        assert hasher.hash("same") != hasher.hash("same")

    def test_rounds_from_settings(self, settings: Settings):
        hashed = PasswordHasher(settings).hash("pw123456")
        assert hashed.split("$")[2] == f"{settings.BCRYPT_ROUNDS:02d}"

    def test_malformed_hash_never_matches(self, settings: Settings):
        hasher = PasswordHasher(settings)
        assert hasher.verify("pw123456", "not-a-bcrypt-hash") is False
        assert hasher.verify("pw123456", None) is False

    def test_oversized_secret_never_matches(self, settings: Settings):
        hasher = PasswordHasher(settings)
        hashed = hasher.hash("é" * 36)
        assert hasher.verify("é" * 36, hashed) is True
        assert hasher.verify("é" * 40, hashed) is False
        assert exceeds_bcrypt_limit("é" * 37) is True
        assert exceeds_bcrypt_limit("a" * 72) is False

"""Pydantic schemas for authentication endpoints.

JSON uses camelCase; snake_case field names are accepted on input too.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from aidhub.services.password import MAX_PASSWORD_BYTES, exceeds_bcrypt_limit


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _check_password_bytes(value: str | None) -> str | None:
    if value is not None and exceeds_bcrypt_limit(value):
        raise ValueError(f"must be at most {MAX_PASSWORD_BYTES} bytes when UTF-8 encoded")
    return value


class RegisterRequest(CamelModel):
    email: str = Field(min_length=3, max_length=256, pattern=r"^[^@\s]+@[^@\s]+$")
    name: str = Field(min_length=1, max_length=256)
    phone: str | None = Field(default=None, max_length=32)
    password: str = Field(min_length=1)

    password_fits_bcrypt = field_validator("password")(_check_password_bytes)


class LoginRequest(CamelModel):
    email: str
    password: str


class RefreshRequest(CamelModel):
    refresh_token: str = ""


class VerifyEmailRequest(CamelModel):
    email: str
    token: str


class EmailRequest(CamelModel):
    email: str


class ResetPasswordRequest(CamelModel):
    email: str
    new_password: str
    current_password: str | None = None
    token: str | None = None

    password_fits_bcrypt = field_validator("new_password", "current_password")(_check_password_bytes)


class TokenResponse(CamelModel):
    access_token: str
    refresh_token: str
    role: str
    user_id: int


class MessageResponse(BaseModel):
    message: str


class CurrentUserResponse(CamelModel):
    user_id: int
    email: str
    role: str

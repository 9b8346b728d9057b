"""User model."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from aidhub.database import Base
from aidhub.utils import utcnow


class User(Base):
    """Application user. Role changes only through scripts/promote_admin.py."""

    __tablename__ = "user"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(256), unique=True, nullable=False, index=True)
    name = Column(String(256), nullable=False)
    phone = Column(String(32), nullable=True)
    password_hash = Column(String(256), nullable=False)
    role = Column(String(32), nullable=False, default="user")
    is_email_verified = Column(Boolean, nullable=False, default=False)
    verification_token = Column(String(128), nullable=True)
    token_expires_at = Column(DateTime, nullable=True)
    password_reset_token = Column(String(256), nullable=True)
    password_reset_token_expires_at = Column(DateTime, nullable=True)
    refresh_token = Column(String(1024), nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

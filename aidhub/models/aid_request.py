"""Aid request model."""

import enum

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text

from aidhub.database import Base
from aidhub.utils import utcnow


class AidRequestStatus(str, enum.Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    DELIVERED = "Delivered"


class AidRequest(Base):
    """A request for aid submitted by a user."""

    __tablename__ = "aid_request"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    organization_id = Column(Integer, nullable=True, index=True)
    type = Column(String(64), nullable=False)
    description = Column(Text, nullable=False)
    status = Column(String(32), nullable=False, default=AidRequestStatus.PENDING.value)
    is_urgent = Column(Boolean, nullable=False, default=False)
    is_deleted = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

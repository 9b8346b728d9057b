"""Pydantic schemas for aid request endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field

from aidhub.models.aid_request import AidRequestStatus


class AidRequestCreate(BaseModel):
    type: str = Field(min_length=1, max_length=64)
    description: str = Field(min_length=1)
    organization_id: int | None = None
    is_urgent: bool = False


class AidRequestStatusUpdate(BaseModel):
    status: AidRequestStatus


class AidRequestResponse(BaseModel):
    id: int
    user_id: int
    organization_id: int | None
    type: str
    description: str
    status: str
    is_urgent: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class AidRequestListResponse(BaseModel):
    items: list[AidRequestResponse]
    total: int

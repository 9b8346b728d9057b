"""Aid request API endpoints."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from aidhub.database import get_db
from aidhub.dependencies import CurrentUser, get_current_user
from aidhub.exceptions import NotFoundError
from aidhub.policies import AID_REQUEST, Action, Role, check_policies, require_roles
from aidhub.schemas.aid_request import (
    AidRequestCreate,
    AidRequestListResponse,
    AidRequestResponse,
    AidRequestStatusUpdate,
)
from aidhub.services.aid_request import get_aid_request_service

logger = logging.getLogger("aidhub")

router = APIRouter(prefix="/api/aid-requests", tags=["Aid Requests"])


@router.get("/", response_model=AidRequestListResponse)
def list_aid_requests(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> AidRequestListResponse:
    """List the current user's aid requests."""
    service = get_aid_request_service()
    items = service.get_user_aid_requests(db, user.user_id)
    return AidRequestListResponse(
        items=[AidRequestResponse.model_validate(item) for item in items],
        total=len(items),
    )


@router.post("/", response_model=AidRequestResponse, status_code=201)
def create_aid_request(
    body: AidRequestCreate,
    user: CurrentUser = Depends(check_policies(Action.CREATE, AID_REQUEST)),
    db: Session = Depends(get_db),
) -> AidRequestResponse:
    """Submit a new aid request."""
    service = get_aid_request_service()
    aid_request = service.create_aid_request(
        db,
        user_id=user.user_id,
        type=body.type,
        description=body.description,
        organization_id=body.organization_id,
        is_urgent=body.is_urgent,
    )
    return AidRequestResponse.model_validate(aid_request)


@router.get(
    "/{aid_request_id}",
    response_model=AidRequestResponse,
    dependencies=[Depends(require_roles(Role.USER))],
)
def get_aid_request(
    aid_request_id: int,
    user: CurrentUser = Depends(check_policies(Action.READ, AID_REQUEST)),
    db: Session = Depends(get_db),
) -> AidRequestResponse:
    """Get one of the current user's aid requests."""
    service = get_aid_request_service()
    aid_request = service.get_user_aid_request(db, aid_request_id, user.user_id)
    if not aid_request:
        raise NotFoundError("Aid request not found")
    return AidRequestResponse.model_validate(aid_request)


@router.patch(
    "/{aid_request_id}/status",
    response_model=AidRequestResponse,
    dependencies=[Depends(require_roles(Role.ADMIN))],
)
def update_aid_request_status(
    aid_request_id: int,
    body: AidRequestStatusUpdate,
    user: CurrentUser = Depends(check_policies(Action.UPDATE, AID_REQUEST)),
    db: Session = Depends(get_db),
) -> AidRequestResponse:
    """Move an aid request to a new status. Admin only."""
    service = get_aid_request_service()
    aid_request = service.get_aid_request(db, aid_request_id)
    if not aid_request:
        raise NotFoundError("Aid request not found")
    aid_request = service.update_status(db, aid_request, body.status)
    logger.info("User %s set aid request %s to %s", user.user_id, aid_request.id, aid_request.status)
    return AidRequestResponse.model_validate(aid_request)


@router.patch("/{aid_request_id}/delete", dependencies=[Depends(require_roles(Role.ADMIN))])
def delete_aid_request(
    aid_request_id: int,
    user: CurrentUser = Depends(check_policies(Action.DELETE, AID_REQUEST)),
    db: Session = Depends(get_db),
) -> dict:
    """Soft-delete an aid request. Admin only."""
    service = get_aid_request_service()
    aid_request = service.get_aid_request(db, aid_request_id)
    if not aid_request:
        raise NotFoundError("Aid request not found")
    service.delete_aid_request(db, aid_request)
    logger.info("User %s deleted aid request %s", user.user_id, aid_request_id)
    return {"message": "Aid request deleted"}

"""Aid request service: repository-style access scoped to the owner."""

from sqlalchemy.orm import Session

from aidhub.models.aid_request import AidRequest, AidRequestStatus


class AidRequestService:
    """Handles aid request creation, lookup and moderation."""

    def create_aid_request(
        self,
        db: Session,
        user_id: int,
        type: str,
        description: str,
        organization_id: int | None = None,
        is_urgent: bool = False,
    ) -> AidRequest:
        """Create an aid request owned by the given user."""
        aid_request = AidRequest(
            user_id=user_id,
            type=type,
            description=description,
            organization_id=organization_id,
            is_urgent=is_urgent,
            status=AidRequestStatus.PENDING.value,
        )
        db.add(aid_request)
        db.commit()
        db.refresh(aid_request)
        return aid_request

    def get_user_aid_requests(self, db: Session, user_id: int) -> list[AidRequest]:
        """Get a user's live aid requests, newest first."""
        return (
            db.query(AidRequest)
            .filter(AidRequest.user_id == user_id, AidRequest.is_deleted.is_(False))
            .order_by(AidRequest.created_at.desc(), AidRequest.id.desc())
            .all()
        )

    def get_user_aid_request(self, db: Session, aid_request_id: int, user_id: int) -> AidRequest | None:
        """Get a single aid request by ID, scoped to user."""
        return (
            db.query(AidRequest)
            .filter(
                AidRequest.id == aid_request_id,
                AidRequest.user_id == user_id,
                AidRequest.is_deleted.is_(False),
            )
            .first()
        )

    def get_aid_request(self, db: Session, aid_request_id: int) -> AidRequest | None:
        return (
            db.query(AidRequest)
            .filter(AidRequest.id == aid_request_id, AidRequest.is_deleted.is_(False))
            .first()
        )

    def update_status(self, db: Session, aid_request: AidRequest, status: AidRequestStatus) -> AidRequest:
        aid_request.status = status.value
        db.commit()
        db.refresh(aid_request)
        return aid_request

    def delete_aid_request(self, db: Session, aid_request: AidRequest) -> None:
        """Soft-delete: the row stays for audit, hidden from every query above."""
        aid_request.is_deleted = True
        db.commit()


_aid_request_service: AidRequestService | None = None


def get_aid_request_service() -> AidRequestService:
    """Get singleton aid request service instance."""
    global _aid_request_service
    if _aid_request_service is None:
        _aid_request_service = AidRequestService()
    return _aid_request_service

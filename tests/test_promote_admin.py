"""Tests for the out-of-band role assignment script."""

from sqlalchemy.orm import Session

from aidhub.models.user import User
from aidhub.policies import Role
from scripts.promote_admin import set_role


class TestSetRole:
    """Tests for set_role."""

    def test_promotes_user(self, db_session: Session, make_user):
        user = make_user("staff@example.com")
        user.refresh_token = "old-session"
        db_session.commit()

        updated = set_role(db_session, "staff@example.com", Role.ADMIN)
        assert updated.role == "admin"
        assert updated.refresh_token is None

    def test_unknown_email(self, db_session: Session):
        assert set_role(db_session, "ghost@example.com", Role.ADMIN) is None
        assert db_session.query(User).count() == 0

"""Grant or revoke the admin role for an existing user.

Roles are never taken from API input; this script is the only path that
changes them.

    python scripts/promote_admin.py admin@example.com
    python scripts/promote_admin.py admin@example.com --role user
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy.orm import Session  # noqa: E402

from aidhub.database import SessionLocal  # noqa: E402
from aidhub.models.user import User  # noqa: E402
from aidhub.policies import Role  # noqa: E402


def set_role(db: Session, email: str, role: Role) -> User | None:
    """Set a user's role. Returns None when no user has the email."""
    user = db.query(User).filter(User.email == email).first()
    if user is None:
        return None
    user.role = role.value
    # New role must not ride on tokens minted under the old one.
    user.refresh_token = None
    db.commit()
    return user


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("email")
    parser.add_argument("--role", choices=[r.value for r in Role], default=Role.ADMIN.value)
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        user = set_role(db, args.email, Role(args.role))
    finally:
        db.close()

    if user is None:
        print(f"No user with email {args.email}", file=sys.stderr)
        return 1
    print(f"User {args.email} now has role {args.role}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

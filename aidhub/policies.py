"""
Roles, abilities and the route-level checks built on them.

Two layers gate a route:
- ``require_roles(Role.ADMIN)``: the principal's role must be one of those listed
- ``check_policies(Action.UPDATE, AID_REQUEST)``: the abilities derived from
  the principal's role must allow the action on the subject

Both return FastAPI dependencies that resolve to the ``CurrentUser`` and
raise 403 when denied.
"""

from collections.abc import Callable
from enum import Enum

from fastapi import Depends

from aidhub.dependencies import CurrentUser, get_current_user
from aidhub.exceptions import ForbiddenError


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"


class Action(str, Enum):
    MANAGE = "manage"  # any action
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


ALL = "all"
AID_REQUEST = "AidRequest"


class Ability:
    """Set of (action, subject) rules a principal is allowed."""

    def __init__(self, rules: set[tuple[Action, str]] | None = None) -> None:
        self.rules = set(rules or ())

    def allow(self, action: Action, subject: str) -> "Ability":
        self.rules.add((action, subject))
        return self

    def can(self, action: Action, subject: str) -> bool:
        for rule_action, rule_subject in self.rules:
            if rule_subject not in (subject, ALL):
                continue
            if rule_action in (action, Action.MANAGE):
                return True
        return False

    def cannot(self, action: Action, subject: str) -> bool:
        return not self.can(action, subject)


def define_abilities_for(user: CurrentUser) -> Ability:
    """Derive abilities from the principal's role. Unknown roles get nothing."""
    ability = Ability()
    if user.role == Role.ADMIN.value:
        ability.allow(Action.MANAGE, ALL)
    elif user.role == Role.USER.value:
        ability.allow(Action.CREATE, AID_REQUEST).allow(Action.READ, AID_REQUEST)
    return ability


def require_roles(*roles: Role) -> Callable[..., CurrentUser]:
    """Dependency allowing only principals whose role is listed."""
    allowed = {role.value for role in roles}

    def dependency(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in allowed:
            raise ForbiddenError("Insufficient role for this operation")
        return user

    return dependency


def check_policies(action: Action, subject: str) -> Callable[..., CurrentUser]:
    """Dependency allowing only principals able to perform ``action`` on ``subject``."""

    def dependency(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if define_abilities_for(user).cannot(action, subject):
            raise ForbiddenError(f"Not allowed to {action.value} {subject}")
        return user

    return dependency

"""Role-based authorization for project approval and task changes"""

from typing import Optional
from household_gateway.domain.models import MemberRole
from household_gateway.domain.exceptions import AuthorizationError

APPROVER_ROLES = frozenset({MemberRole.OWNER, MemberRole.CO_OWNER})
MANAGER_ROLES = frozenset({MemberRole.OWNER, MemberRole.CO_OWNER, MemberRole.MANAGER})


def can_approve(role: Optional[str]) -> bool:
    return role in APPROVER_ROLES


def can_dismiss(role: Optional[str]) -> bool:
    return role in MANAGER_ROLES


def can_complete(assigned_to: str, user_id: Optional[str]) -> bool:
    return user_id is not None and assigned_to == user_id


def require_approver(role: Optional[str]) -> None:
    if not can_approve(role):
        raise AuthorizationError("Only owners can approve projects")


def require_dismisser(role: Optional[str]) -> None:
    if not can_dismiss(role):
        raise AuthorizationError("Only managers can dismiss tasks")


def require_assignee(assigned_to: str, user_id: Optional[str]) -> None:
    if not can_complete(assigned_to, user_id):
        raise AuthorizationError("Only assigned member can complete task")

"""Accountability project state machine"""

from typing import Dict, FrozenSet, Optional
from household_gateway.domain.models import ProjectStatus
from household_gateway.domain.exceptions import InvalidPaymentError, InvalidTransitionError

# Manual status changes. Approval (pending_approval -> active) has its own operation.
MANUAL_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    ProjectStatus.PENDING_APPROVAL: frozenset({ProjectStatus.COMPLETED}),
    ProjectStatus.ACTIVE: frozenset({ProjectStatus.ON_HOLD, ProjectStatus.COMPLETED}),
    ProjectStatus.ON_HOLD: frozenset({ProjectStatus.ACTIVE, ProjectStatus.COMPLETED}),
    ProjectStatus.COMPLETED: frozenset(),
}


def initial_project_status(auto_created: bool) -> str:
    return ProjectStatus.ACTIVE if auto_created else ProjectStatus.PENDING_APPROVAL


def ensure_status_transition(current: str, new: str) -> None:
    """Raise InvalidTransitionError unless current -> new is a legal manual change"""
    if new not in MANUAL_TRANSITIONS.get(current, frozenset()):
        raise InvalidTransitionError(f"Cannot move project from {current} to {new}")


def ensure_can_approve(current: str) -> None:
    if current != ProjectStatus.PENDING_APPROVAL:
        raise InvalidTransitionError(f"Only projects pending approval can be approved (status is {current})")


def ensure_can_record_payment(current: str) -> None:
    if current == ProjectStatus.COMPLETED:
        raise InvalidTransitionError("Cannot record payments on a completed project")


def ensure_valid_payment(amount: float, week: Optional[int]) -> None:
    """Amounts must be positive; an explicit week starts at 1"""
    if isinstance(amount, bool) or not amount > 0:
        raise InvalidPaymentError(f"Payment amount must be positive (got {amount})")
    if week is not None and week < 1:
        raise InvalidPaymentError(f"Payment week must be 1 or later (got {week})")

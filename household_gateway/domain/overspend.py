"""Overspend detection and responsibility calculation - core business rules"""

import math
from typing import Any, List, Mapping, Optional
from household_gateway.domain.models import (
    Charge,
    HouseholdConfig,
    HouseholdMember,
    OverspendDetection,
    OverspendPolicy,
    Responsibility,
)
from household_gateway.domain.exceptions import InvalidChargeError, UnknownMemberError


def parse_charge(raw: Mapping[str, Any]) -> Charge:
    """
    Build a Charge from a stored statement line item.

    Raises:
        InvalidChargeError: amount is missing or not a finite number
    """
    amount = raw.get("amount")
    if isinstance(amount, bool) or not isinstance(amount, (int, float)) or not math.isfinite(amount):
        raise InvalidChargeError(f"Invalid charge amount: {amount!r}")

    return Charge(
        member_id=raw["member_id"],
        amount=float(amount),
        date=raw.get("date"),
        description=raw.get("description") or "",
    )


def resolve_member(household: HouseholdConfig, member_id: str) -> HouseholdMember:
    member = household.find_member(member_id)
    if member is None:
        raise UnknownMemberError(f"Member {member_id} is not part of household {household.household_id}")
    return member


def detect_member_overspend(
    household: HouseholdConfig,
    member_id: str,
    raw_charges: List[Mapping[str, Any]],
) -> Optional[OverspendDetection]:
    """
    Decide whether one member's charges for a statement count as an overspend.

    Requirements:
    - Total all of the member's charges
    - Overspend only when the total is strictly greater than the threshold
    - Returns None when there is no overspend

    Raises:
        UnknownMemberError: member id is not on the household roster
        InvalidChargeError: one of the member's charges is malformed
    """
    member = resolve_member(household, member_id)
    charges = [parse_charge(raw) for raw in raw_charges]

    total_charges = sum(c.amount for c in charges)
    threshold = household.policy.overspend_threshold

    if total_charges <= threshold:
        return None

    return OverspendDetection(
        member_id=member_id,
        member_name=member.name,
        total_charges=total_charges,
        threshold=threshold,
        charges=charges,
    )


def calculate_member_responsibility(
    total_charges: float,
    income_percentage: Optional[float],
    policy: OverspendPolicy,
) -> Responsibility:
    """
    Compute what a member personally repays and the weekly installment.

    The member's income percentage sets their share; households without a
    configured split fall back to the policy default (50%). Amounts are not
    rounded here, currency rounding happens at presentation.

    Example:
        $2000 charged, 50% share, 4 weeks -> $1000 owed, $250/week
    """
    percent = policy.default_income_percent if income_percentage is None else income_percentage
    responsibility_amount = total_charges * percent / 100
    weekly_contribution = responsibility_amount / policy.week_count

    return Responsibility(
        responsibility_percent=percent,
        responsibility_amount=responsibility_amount,
        weekly_contribution=weekly_contribution,
        week_count=policy.week_count,
    )


def should_auto_create(responsibility_amount: float, policy: OverspendPolicy) -> bool:
    """Projects below the auto-create threshold activate without approval"""
    return responsibility_amount < policy.auto_create_threshold

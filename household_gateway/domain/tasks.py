"""Weekly payment task generation for overspend repayment"""

from datetime import datetime
from typing import List
from household_gateway.domain.models import PlannedTask
from household_gateway.utils.date_utils import add_weeks, utc_now


def generate_payment_tasks(
    weekly_amount: float,
    week_count: int,
    initial_status: str,
    created_at: datetime | None = None,
) -> List[PlannedTask]:
    """
    Generate one payment reminder per installment week.

    Requirements:
    - Exactly week_count tasks, numbered 1..week_count
    - Week N is due N weeks after creation
    - Every task carries the same weekly amount (no remainder adjustment,
      amounts are unrounded so the weeks sum back to the responsibility)
    - Tasks start in the project's initial status

    Args:
        weekly_amount: Installment owed each week
        week_count: Number of weekly installments
        initial_status: "active" or "pending_approval", mirroring the project
        created_at: Creation timestamp (default: now, UTC)

    Returns:
        List of PlannedTask objects ordered by week number
    """
    if week_count <= 0:
        return []

    if created_at is None:
        created_at = utc_now()

    return [
        PlannedTask(
            week_number=week,
            due_date=add_weeks(created_at, week),
            weekly_amount=weekly_amount,
            status=initial_status,
        )
        for week in range(1, week_count + 1)
    ]

"""Compose notifications for newly created overspend projects"""

from datetime import datetime
from typing import List
from household_gateway.domain.models import HouseholdConfig, Notification
from household_gateway.domain.approval import MANAGER_ROLES
from household_gateway.utils.date_utils import utc_now


def manager_ids(household: HouseholdConfig) -> List[str]:
    return [m.user_id for m in household.members if m.role in MANAGER_ROLES]


def compose_notifications(
    household: HouseholdConfig,
    project,
    auto_created: bool,
    now: datetime | None = None,
) -> List[Notification]:
    """
    Build the two notifications announcing a new project.

    One goes to the household managers and one to the member who overspent.
    Auto-created projects are announced at normal priority; projects waiting
    for approval are high priority for both recipients.

    `project` needs id, member_id, member_name, original_charge_amount,
    responsibility_amount and weekly_contribution.
    """
    timestamp = now or utc_now()
    managers = manager_ids(household)

    if auto_created:
        manager_notification = Notification(
            type="overspend_auto_created",
            recipients=managers,
            title="Overspend Project Auto-Created",
            message=(
                f"{project.member_name}'s overspend project auto-created: "
                f"${project.responsibility_amount:.2f} to be paid at ${project.weekly_contribution:.2f}/week"
            ),
            project_id=project.id,
            priority="normal",
            timestamp=timestamp,
        )
        member_notification = Notification(
            type="overspend_assigned",
            recipients=[project.member_id],
            title="Overspend Tasks Created",
            message=(
                f"Weekly payment tasks created for ${project.original_charge_amount:.2f} overspend. "
                f"Start paying ${project.weekly_contribution:.2f}/week."
            ),
            project_id=project.id,
            priority="normal",
            timestamp=timestamp,
        )
    else:
        manager_notification = Notification(
            type="overspend_approval_required",
            recipients=managers,
            title="Overspend Project Requires Approval",
            message=(
                f"{project.member_name} spent ${project.original_charge_amount:.2f} on credit card. "
                f"Requires approval for overspend project "
                f"(${project.responsibility_amount:.2f} member responsibility)."
            ),
            project_id=project.id,
            priority="high",
            timestamp=timestamp,
        )
        member_notification = Notification(
            type="overspend_assigned",
            recipients=[project.member_id],
            title="Overspend Pending Approval",
            message=(
                f"Your overspend of ${project.original_charge_amount:.2f} "
                f"is pending approval from household managers."
            ),
            project_id=project.id,
            priority="high",
            timestamp=timestamp,
        )

    return [manager_notification, member_notification]

"""Statement charge processor - turns overspending members into accountability projects"""

import logging
import uuid
from typing import Any, List, Mapping, Optional
from sqlalchemy.orm import Session

from household_gateway.config import Settings, settings
from household_gateway.domain.exceptions import DomainException, HouseholdNotFoundError
from household_gateway.domain.grouping import group_charges_by_member
from household_gateway.domain.lifecycle import initial_project_status
from household_gateway.domain.models import (
    CreatedProject,
    HouseholdConfig,
    MemberError,
    OverspendPolicy,
    StatementProcessingResult,
)
from household_gateway.domain.notifications import compose_notifications
from household_gateway.domain.overspend import (
    calculate_member_responsibility,
    detect_member_overspend,
    should_auto_create,
)
from household_gateway.domain.tasks import generate_payment_tasks
from household_gateway.infrastructure.database.repositories import (
    HouseholdRepository,
    ProjectRepository,
    TaskRepository,
)
from household_gateway.infrastructure.observability.metrics import (
    member_error_counter,
    overspend_detected_counter,
    record_project_created,
)
from household_gateway.utils.date_utils import utc_now


def policy_from_settings(config: Settings = settings) -> OverspendPolicy:
    """Service-wide policy defaults, overridden per household"""
    return OverspendPolicy(
        overspend_threshold=config.default_overspend_threshold,
        auto_create_threshold=config.default_auto_create_threshold,
        default_income_percent=config.default_income_percent,
        week_count=config.default_week_count,
    )


class StatementProcessor:
    """
    Processes a statement's charges for every household member.

    Flow per member:
    1. Detect overspend against the household threshold (skip member if none)
    2. Calculate the member's responsibility and weekly installment
    3. Create the project, active or pending approval
    4. Create one payment task per week
    5. Compose manager and member notifications

    A failure in one member's branch is recorded in the result's errors and
    processing continues with the next member. Nothing is committed here;
    the caller owns the transaction.
    """

    def __init__(self, db: Session, defaults: Optional[OverspendPolicy] = None):
        self.household_repo = HouseholdRepository(db)
        self.project_repo = ProjectRepository(db)
        self.task_repo = TaskRepository(db)
        self.defaults = defaults or policy_from_settings()

    def process_statement_charges(
        self,
        household_id: str,
        charges: List[Mapping[str, Any]],
        statement_id: Optional[uuid.UUID],
    ) -> StatementProcessingResult:
        """
        Main entry point: resolve household configuration and process all charges.

        Raises:
            HouseholdNotFoundError: household has no configuration record
        """
        household = self.household_repo.get_config(household_id, self.defaults)
        if household is None:
            raise HouseholdNotFoundError(f"Household {household_id} not found")

        return self.process_for_household(household, charges, statement_id)

    def process_for_household(
        self,
        household: HouseholdConfig,
        charges: List[Mapping[str, Any]],
        statement_id: Optional[uuid.UUID],
    ) -> StatementProcessingResult:
        result = StatementProcessingResult()

        for member_id, member_charges in group_charges_by_member(charges).items():
            try:
                self._process_member(household, member_id, member_charges, statement_id, result)
            except (DomainException, KeyError, TypeError, ValueError) as e:
                member_error_counter.inc()
                logging.warning(
                    f"Overspend processing failed for member: {e}",
                    extra={"household_id": household.household_id, "member_id": member_id},
                )
                result.errors.append(MemberError(member_id=member_id, error=str(e)))

        return result

    def _process_member(
        self,
        household: HouseholdConfig,
        member_id: str,
        member_charges: List[Mapping[str, Any]],
        statement_id: Optional[uuid.UUID],
        result: StatementProcessingResult,
    ) -> None:
        detection = detect_member_overspend(household, member_id, member_charges)
        if detection is None:
            return

        overspend_detected_counter.inc()

        member = household.find_member(member_id)
        responsibility = calculate_member_responsibility(
            detection.total_charges,
            member.income_percentage,
            household.policy,
        )
        auto_created = should_auto_create(responsibility.responsibility_amount, household.policy)
        status = initial_project_status(auto_created)
        created_at = utc_now()
        planned = generate_payment_tasks(
            weekly_amount=responsibility.weekly_contribution,
            week_count=responsibility.week_count,
            initial_status=status,
            created_at=created_at,
        )

        # Everything above is pure; writes start here
        project = self.project_repo.create_project(
            household_id=household.household_id,
            statement_id=statement_id,
            detection=detection,
            responsibility=responsibility,
            status=status,
            requires_approval=not auto_created,
            created_at=created_at,
        )
        tasks = self.task_repo.create_tasks(project, planned, created_at)
        notifications = compose_notifications(household, project, auto_created, now=created_at)

        record_project_created(auto_created)
        logging.info(
            "Overspend project created",
            extra={
                "household_id": household.household_id,
                "project_id": str(project.id),
                "member_id": member_id,
                "responsibility_amount": responsibility.responsibility_amount,
                "status": status,
                "task_count": len(tasks),
            },
        )

        result.overspends.append(detection)
        result.projects.append(
            CreatedProject(
                project_id=project.id,
                member_id=member_id,
                member_responsibility=responsibility.responsibility_amount,
                auto_created=auto_created,
            )
        )
        result.notifications.extend(notifications)

"""Overspend project lifecycle: approval, payments, status changes and task updates"""

import logging
import uuid
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session

from household_gateway.domain.approval import require_approver, require_assignee, require_dismisser
from household_gateway.domain.exceptions import HouseholdNotFoundError, InvalidTransitionError, NotFoundError
from household_gateway.domain.lifecycle import (
    ensure_can_approve,
    ensure_can_record_payment,
    ensure_status_transition,
    ensure_valid_payment,
)
from household_gateway.domain.models import (
    HouseholdConfig,
    OverspendPolicy,
    OverspendSummary,
    ProjectStatus,
    TaskStatus,
)
from household_gateway.domain.summary import summarize_projects
from household_gateway.infrastructure.database.models import OverspendProject, PaymentTask
from household_gateway.infrastructure.database.repositories import (
    HouseholdRepository,
    ProjectRepository,
    TaskRepository,
)
from household_gateway.infrastructure.observability.metrics import (
    payment_amount_histogram,
    project_approved_counter,
    project_status_counter,
)
from household_gateway.services.statement_processor import policy_from_settings
from household_gateway.utils.date_utils import utc_now


class ProjectService:
    """Household-scoped operations on existing projects and their tasks"""

    def __init__(self, db: Session, defaults: Optional[OverspendPolicy] = None):
        self.household_repo = HouseholdRepository(db)
        self.project_repo = ProjectRepository(db)
        self.task_repo = TaskRepository(db)
        self.defaults = defaults or policy_from_settings()

    def _household(self, household_id: str) -> HouseholdConfig:
        household = self.household_repo.get_config(household_id, self.defaults)
        if household is None:
            raise HouseholdNotFoundError(f"Household {household_id} not found")
        return household

    def _project(self, household_id: str, project_id: uuid.UUID) -> OverspendProject:
        project = self.project_repo.get_project(household_id, project_id)
        if project is None:
            raise NotFoundError("Project not found")
        return project

    def approve_project(
        self,
        household_id: str,
        project_id: uuid.UUID,
        user_id: str,
    ) -> Tuple[OverspendProject, List[PaymentTask]]:
        """
        Approve a pending project and activate its tasks.

        Raises:
            AuthorizationError: approver is not an owner or co-owner
            NotFoundError: project is not in this household
            InvalidTransitionError: project is not pending approval
        """
        household = self._household(household_id)
        require_approver(household.role_of(user_id))

        project = self._project(household_id, project_id)
        ensure_can_approve(project.status)

        now = utc_now()
        project.status = ProjectStatus.ACTIVE
        if user_id not in project.approved_by:
            project.approved_by = list(project.approved_by) + [user_id]
        project.approval_date = now

        tasks = self.task_repo.list_for_project(household_id, project.id)
        for task in tasks:
            if task.status == TaskStatus.PENDING_APPROVAL:
                task.status = TaskStatus.ACTIVE

        project_approved_counter.inc()
        logging.info(
            "Overspend project approved",
            extra={"household_id": household_id, "project_id": str(project.id), "approved_by": user_id},
        )
        return project, tasks

    def record_payment(
        self,
        household_id: str,
        project_id: uuid.UUID,
        amount: float,
        week: Optional[int] = None,
    ) -> OverspendProject:
        """
        Add a payment to the project ledger.

        Payments never complete the project, even once the ledger covers the
        full responsibility. When the week is given explicitly, that week's
        task is marked completed.
        """
        ensure_valid_payment(amount, week)
        project = self._project(household_id, project_id)
        ensure_can_record_payment(project.status)

        now = utc_now()
        payment_week = week if week is not None else len(project.payments) + 1
        self.project_repo.add_payment(project, amount, payment_week, now)

        if week is not None:
            task = self.task_repo.get_task_for_week(household_id, project.id, week)
            if task is not None and task.status != TaskStatus.COMPLETED:
                task.status = TaskStatus.COMPLETED
                task.completed_at = now

        payment_amount_histogram.observe(amount)
        logging.info(
            "Overspend payment recorded",
            extra={"household_id": household_id, "project_id": str(project.id), "amount": amount, "week": payment_week},
        )
        return project

    def update_project_status(
        self,
        household_id: str,
        project_id: uuid.UUID,
        new_status: str,
    ) -> OverspendProject:
        """
        Apply a manual status change.

        Completing a project completes every one of its tasks regardless of
        their individual progress.
        """
        project = self._project(household_id, project_id)
        ensure_status_transition(project.status, new_status)

        project.status = new_status
        if new_status == ProjectStatus.COMPLETED:
            now = utc_now()
            project.completed_at = now
            for task in self.task_repo.list_for_project(household_id, project.id):
                task.status = TaskStatus.COMPLETED
                task.completed_at = now

        project_status_counter.labels(status=new_status).inc()
        logging.info(
            "Overspend project status updated",
            extra={"household_id": household_id, "project_id": str(project.id), "status": new_status},
        )
        return project

    def update_task_status(
        self,
        household_id: str,
        task_id: uuid.UUID,
        user_id: str,
        status: str,
        completion_notes: Optional[str] = None,
    ) -> PaymentTask:
        """Complete (assignee only) or dismiss (managers only) a payment task"""
        task = self.task_repo.get_task(household_id, task_id)
        if task is None:
            raise NotFoundError("Task not found")

        now = utc_now()
        if status == TaskStatus.COMPLETED:
            require_assignee(task.assigned_to, user_id)
            task.completed_at = now
            task.completed_by = user_id
        elif status == TaskStatus.DISMISSED:
            household = self._household(household_id)
            require_dismisser(household.role_of(user_id))
            task.dismissed_at = now
        else:
            raise InvalidTransitionError(f"Tasks can only be completed or dismissed, not set to {status}")

        task.status = status
        if completion_notes:
            task.completion_notes = completion_notes

        logging.info(
            "Payment task updated",
            extra={"household_id": household_id, "task_id": str(task.id), "status": status},
        )
        return task

    def list_projects(self, household_id: str) -> List[OverspendProject]:
        return self.project_repo.list_projects(household_id)

    def list_tasks(
        self,
        household_id: str,
        assigned_to: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[PaymentTask]:
        return self.task_repo.list_tasks(household_id, assigned_to=assigned_to, status=status)

    def get_overspend_summary(self, household_id: str) -> OverspendSummary:
        return summarize_projects(self.project_repo.list_projects(household_id))

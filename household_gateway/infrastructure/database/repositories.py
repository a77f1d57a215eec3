"""Data access layer for households, statements, projects and tasks"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session
from household_gateway.infrastructure.database.models import (
    CardStatement,
    Household,
    OverspendProject,
    PaymentTask,
    ProjectPayment,
)
from household_gateway.domain.models import (
    HouseholdConfig,
    HouseholdMember,
    OverspendDetection,
    OverspendPolicy,
    PlannedTask,
    Responsibility,
)


class HouseholdRepository:
    """Read-only access to household configuration"""

    def __init__(self, db: Session):
        self.db = db

    def get_household(self, household_id: str) -> Optional[Household]:
        return self.db.query(Household).filter(Household.id == household_id).first()

    def get_config(self, household_id: str, defaults: OverspendPolicy) -> Optional[HouseholdConfig]:
        """Resolve household settings over the service defaults"""
        household = self.get_household(household_id)
        if household is None:
            return None

        policy = OverspendPolicy(
            overspend_threshold=_or_default(household.credit_card_overspend_threshold, defaults.overspend_threshold),
            auto_create_threshold=_or_default(household.auto_create_overspend_project, defaults.auto_create_threshold),
            default_income_percent=defaults.default_income_percent,
            week_count=_or_default(household.overspend_week_count, defaults.week_count),
        )
        members = [
            HouseholdMember(
                user_id=m.user_id,
                name=m.name,
                role=m.role,
                income_percentage=m.income_percentage,
            )
            for m in household.members
        ]
        return HouseholdConfig(household_id=household.id, members=members, policy=policy)


def _or_default(value: Optional[float], default: float) -> float:
    # Zero or negative settings are treated as unset
    return value if value is not None and value > 0 else default


class StatementRepository:
    """Repository for credit card statements"""

    def __init__(self, db: Session):
        self.db = db

    def create_statement(
        self,
        household_id: str,
        card_id: str,
        statement_date: datetime,
        charges: List[Dict[str, Any]],
        submitted_by: Optional[str],
    ) -> CardStatement:
        db_statement = CardStatement(
            household_id=household_id,
            card_id=card_id,
            statement_date=statement_date,
            charges=charges,
            total_amount=sum(c.get("amount") or 0 for c in charges),
            submitted_by=submitted_by,
            processed=False,
        )
        self.db.add(db_statement)
        self.db.flush()
        return db_statement

    def get_statement(
        self,
        household_id: str,
        statement_id: uuid.UUID,
        for_update: bool = False,
    ) -> Optional[CardStatement]:
        """Load a statement; for_update holds a row lock until the transaction ends"""
        query = self.db.query(CardStatement).filter(
            CardStatement.id == statement_id, CardStatement.household_id == household_id
        )
        if for_update:
            query = query.with_for_update()
        return query.first()

    def list_statements(self, household_id: str) -> List[CardStatement]:
        return (
            self.db.query(CardStatement)
            .filter(CardStatement.household_id == household_id)
            .order_by(CardStatement.statement_date.desc())
            .all()
        )

    def mark_processed(
        self,
        statement: CardStatement,
        charges: List[Dict[str, Any]],
        processed_at: datetime,
    ) -> CardStatement:
        statement.processed = True
        statement.processed_at = processed_at
        # Reassign so the JSON column change is detected
        statement.charges = charges
        self.db.flush()
        return statement


class ProjectRepository:
    """Repository for overspend projects and their payment ledger"""

    def __init__(self, db: Session):
        self.db = db

    def create_project(
        self,
        household_id: str,
        statement_id: Optional[uuid.UUID],
        detection: OverspendDetection,
        responsibility: Responsibility,
        status: str,
        requires_approval: bool,
        created_at: datetime,
    ) -> OverspendProject:
        """Persist a new project (flushes to assign its id)"""
        db_project = OverspendProject(
            household_id=household_id,
            statement_id=statement_id,
            member_id=detection.member_id,
            member_name=detection.member_name,
            original_charge_amount=detection.total_charges,
            responsibility_percent=responsibility.responsibility_percent,
            responsibility_amount=responsibility.responsibility_amount,
            weekly_contribution=responsibility.weekly_contribution,
            week_count=responsibility.week_count,
            status=status,
            requires_approval=requires_approval,
            approved_by=[],
            total_collected=0.0,
            description=(
                f"Overspend project: {detection.member_name} charged ${detection.total_charges:.2f} "
                f"- Member responsibility: ${responsibility.responsibility_amount:.2f}"
            ),
            created_at=created_at,
        )
        self.db.add(db_project)
        self.db.flush()
        return db_project

    def get_project(self, household_id: str, project_id: uuid.UUID) -> Optional[OverspendProject]:
        return (
            self.db.query(OverspendProject)
            .filter(OverspendProject.id == project_id, OverspendProject.household_id == household_id)
            .first()
        )

    def list_projects(self, household_id: str) -> List[OverspendProject]:
        return (
            self.db.query(OverspendProject)
            .filter(OverspendProject.household_id == household_id)
            .order_by(OverspendProject.created_at.desc())
            .all()
        )

    def add_payment(
        self,
        project: OverspendProject,
        amount: float,
        week: int,
        paid_at: datetime,
    ) -> ProjectPayment:
        payment = ProjectPayment(project_id=project.id, amount=amount, week=week, paid_at=paid_at)
        project.payments.append(payment)
        project.total_collected = (project.total_collected or 0.0) + amount
        self.db.flush()
        return payment


class TaskRepository:
    """Repository for weekly payment tasks"""

    def __init__(self, db: Session):
        self.db = db

    def create_tasks(
        self,
        project: OverspendProject,
        planned: List[PlannedTask],
        created_at: datetime,
    ) -> List[PaymentTask]:
        tasks = []
        for item in planned:
            db_task = PaymentTask(
                household_id=project.household_id,
                project_id=project.id,
                type="overspend_payment",
                assigned_to=project.member_id,
                assigned_to_name=project.member_name,
                created_by="system",
                title=f"Overspend Payment - Week {item.week_number}",
                description=(
                    f"Pay ${item.weekly_amount:.2f} towards overspend project "
                    f"(Total: ${project.original_charge_amount:.2f})"
                ),
                week_number=item.week_number,
                weekly_amount=item.weekly_amount,
                due_date=item.due_date,
                priority=item.priority,
                status=item.status,
                created_at=created_at,
            )
            self.db.add(db_task)
            tasks.append(db_task)

        self.db.flush()
        return tasks

    def get_task(self, household_id: str, task_id: uuid.UUID) -> Optional[PaymentTask]:
        return (
            self.db.query(PaymentTask)
            .filter(PaymentTask.id == task_id, PaymentTask.household_id == household_id)
            .first()
        )

    def list_for_project(self, household_id: str, project_id: uuid.UUID) -> List[PaymentTask]:
        return (
            self.db.query(PaymentTask)
            .filter(PaymentTask.household_id == household_id, PaymentTask.project_id == project_id)
            .order_by(PaymentTask.week_number)
            .all()
        )

    def get_task_for_week(self, household_id: str, project_id: uuid.UUID, week: int) -> Optional[PaymentTask]:
        return (
            self.db.query(PaymentTask)
            .filter(
                PaymentTask.household_id == household_id,
                PaymentTask.project_id == project_id,
                PaymentTask.week_number == week,
            )
            .first()
        )

    def list_tasks(
        self,
        household_id: str,
        assigned_to: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[PaymentTask]:
        query = self.db.query(PaymentTask).filter(PaymentTask.household_id == household_id)
        if assigned_to:
            query = query.filter(PaymentTask.assigned_to == assigned_to)
        if status:
            query = query.filter(PaymentTask.status == status)
        return query.order_by(PaymentTask.created_at.desc(), PaymentTask.week_number).all()

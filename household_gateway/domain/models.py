"""Domain models - pure Python dataclasses representing business entities"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


class ProjectStatus:
    """Accountability project lifecycle states"""

    PENDING_APPROVAL = "pending_approval"
    ACTIVE = "active"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"

    ALL = (PENDING_APPROVAL, ACTIVE, ON_HOLD, COMPLETED)


class TaskStatus:
    """Payment task lifecycle states"""

    PENDING_APPROVAL = "pending_approval"
    ACTIVE = "active"
    COMPLETED = "completed"
    DISMISSED = "dismissed"
    OVERDUE = "overdue"  # set by an external scheduler, never by this service

    ALL = (PENDING_APPROVAL, ACTIVE, COMPLETED, DISMISSED, OVERDUE)


class MemberRole:
    """Household member roles"""

    OWNER = "owner"
    CO_OWNER = "co-owner"
    MANAGER = "manager"
    MEMBER = "member"
    VIEWER = "viewer"


@dataclass
class Charge:
    """Credit card statement line item"""

    member_id: str
    amount: float
    date: Optional[str] = None
    description: str = ""


@dataclass
class HouseholdMember:
    """Member of a household with role and income share"""

    user_id: str
    name: str
    role: str = MemberRole.MEMBER
    income_percentage: Optional[float] = None  # 0-100, None when no split is configured


@dataclass
class OverspendPolicy:
    """Thresholds driving detection and approval, with documented defaults"""

    overspend_threshold: float = 500.0
    auto_create_threshold: float = 1000.0
    default_income_percent: float = 50.0
    week_count: int = 4

    def __post_init__(self):
        if self.week_count < 1:
            raise ValueError(f"week_count must be at least 1 (got {self.week_count})")


@dataclass
class HouseholdConfig:
    """Resolved household configuration used by the statement processor"""

    household_id: str
    members: List[HouseholdMember]
    policy: OverspendPolicy = field(default_factory=OverspendPolicy)

    def find_member(self, user_id: str) -> Optional[HouseholdMember]:
        return next((m for m in self.members if m.user_id == user_id), None)

    def role_of(self, user_id: str) -> Optional[str]:
        member = self.find_member(user_id)
        return member.role if member else None


@dataclass
class OverspendDetection:
    """A member whose charges for the statement exceed the threshold"""

    member_id: str
    member_name: str
    total_charges: float
    threshold: float
    charges: List[Charge] = field(default_factory=list)


@dataclass
class Responsibility:
    """Member's share of an overspend and its weekly installment"""

    responsibility_percent: float
    responsibility_amount: float
    weekly_contribution: float
    week_count: int


@dataclass
class PlannedTask:
    """Single weekly payment reminder in a repayment plan"""

    week_number: int
    due_date: datetime
    weekly_amount: float
    status: str
    priority: str = "high"


@dataclass
class Notification:
    """Recipient-addressed message about an overspend project"""

    type: str
    recipients: List[str]
    title: str
    message: str
    project_id: Optional[uuid.UUID]
    priority: str
    timestamp: datetime

    def to_payload(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "recipients": list(self.recipients),
            "title": self.title,
            "message": self.message,
            "project_id": str(self.project_id) if self.project_id else None,
            "priority": self.priority,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class CreatedProject:
    """Reference to a project created while processing a statement"""

    project_id: uuid.UUID
    member_id: str
    member_responsibility: float
    auto_created: bool


@dataclass
class MemberError:
    """Failure isolated to one member's charges"""

    member_id: str
    error: str


@dataclass
class StatementProcessingResult:
    """Aggregate output of processing one statement"""

    overspends: List[OverspendDetection] = field(default_factory=list)
    projects: List[CreatedProject] = field(default_factory=list)
    notifications: List[Notification] = field(default_factory=list)
    errors: List[MemberError] = field(default_factory=list)


@dataclass
class MemberSummary:
    """Per-member totals across a household's projects"""

    member_name: str
    project_count: int = 0
    total_responsibility: float = 0.0
    total_collected: float = 0.0


@dataclass
class OverspendSummary:
    """Household-wide overspend totals"""

    total_projects: int
    active_projects: int
    pending_approval: int
    total_responsibility: float
    total_collected: float
    by_member: Dict[str, MemberSummary]

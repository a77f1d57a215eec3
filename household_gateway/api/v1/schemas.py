"""Pydantic schemas for API request/response validation"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field


class ChargeSchema(BaseModel):
    """Single line item on a credit card statement"""

    member_id: Optional[str] = Field(None, description="Member who incurred the charge; unattributed if omitted")
    amount: float
    date: Optional[str] = None
    description: str = ""


class StatementCreateRequest(BaseModel):
    """Request body for POST /v1/households/{household_id}/statements"""

    card_id: str = Field(..., min_length=1, description="Credit card identifier")
    statement_date: Optional[datetime] = None
    charges: List[ChargeSchema]


class StatementResponse(BaseModel):
    """Stored statement with processing flags on each charge"""

    statement_id: str
    household_id: str
    card_id: str
    statement_date: datetime
    total_amount: float
    processed: bool
    processed_at: Optional[datetime] = None
    charges: List[Dict[str, Any]]


class StatementListResponse(BaseModel):
    statements: List[StatementResponse]


class OverspendSchema(BaseModel):
    """Member detected as overspending"""

    member_id: str
    member_name: str
    total_charges: float
    threshold: float


class CreatedProjectSchema(BaseModel):
    project_id: str
    member_id: str
    member_responsibility: float
    auto_created: bool


class NotificationSchema(BaseModel):
    type: str
    recipients: List[str]
    title: str
    message: str
    project_id: Optional[str] = None
    priority: str
    timestamp: datetime


class MemberErrorSchema(BaseModel):
    member_id: str
    error: str


class ProcessStatementResponse(BaseModel):
    """Response for POST /v1/households/{household_id}/statements/{statement_id}/process"""

    statement: StatementResponse
    overspends: List[OverspendSchema]
    projects: List[CreatedProjectSchema]
    notifications: List[NotificationSchema]
    errors: List[MemberErrorSchema]


class PaymentSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    amount: float
    week: int
    paid_at: datetime


class ProjectSchema(BaseModel):
    """Accountability project with its payment ledger"""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    household_id: str
    statement_id: Optional[uuid.UUID] = None
    member_id: str
    member_name: str
    original_charge_amount: float
    responsibility_percent: float
    responsibility_amount: float
    weekly_contribution: float
    week_count: int
    status: str
    requires_approval: bool
    approved_by: List[str]
    approval_date: Optional[datetime] = None
    total_collected: float
    description: Optional[str] = None
    created_at: datetime
    completed_at: Optional[datetime] = None
    payments: List[PaymentSchema] = []


class TaskSchema(BaseModel):
    """Weekly payment task"""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    household_id: str
    project_id: uuid.UUID
    assigned_to: str
    assigned_to_name: Optional[str] = None
    title: str
    description: Optional[str] = None
    week_number: int
    weekly_amount: float
    due_date: datetime
    priority: str
    status: str
    completed_at: Optional[datetime] = None
    completed_by: Optional[str] = None
    completion_notes: Optional[str] = None
    dismissed_at: Optional[datetime] = None


class ProjectResponse(BaseModel):
    project: ProjectSchema
    message: Optional[str] = None


class ProjectListResponse(BaseModel):
    projects: List[ProjectSchema]


class ApprovalResponse(BaseModel):
    """Response for POST .../overspend-projects/{project_id}/approve"""

    project: ProjectSchema
    tasks: List[TaskSchema]
    message: str


class ProjectStatusRequest(BaseModel):
    status: Literal["active", "on_hold", "completed"]


class PaymentRequest(BaseModel):
    amount: float = Field(..., gt=0, description="Payment amount in dollars")
    week: Optional[int] = Field(None, ge=1, description="Installment week the payment covers")


class TaskUpdateRequest(BaseModel):
    status: Literal["completed", "dismissed"]
    completion_notes: Optional[str] = None


class TaskResponse(BaseModel):
    task: TaskSchema


class TaskListResponse(BaseModel):
    tasks: List[TaskSchema]


class MemberSummarySchema(BaseModel):
    member_name: str
    project_count: int
    total_responsibility: float
    total_collected: float


class SummaryResponse(BaseModel):
    """Response for GET /v1/households/{household_id}/overspend-summary"""

    total_projects: int
    active_projects: int
    pending_approval: int
    total_responsibility: float
    total_collected: float
    by_member: Dict[str, MemberSummarySchema]

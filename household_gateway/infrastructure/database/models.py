"""SQLAlchemy ORM models for households, statements and overspend projects"""

import uuid
from sqlalchemy import Column, String, Boolean, Float, DateTime, Integer, ForeignKey, Text, JSON
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class Household(Base):
    """Household and its overspend settings (owned by the household service, read here)"""

    __tablename__ = "household"

    id = Column(Text, primary_key=True)
    name = Column(Text, nullable=False)
    currency = Column(String(3), nullable=False, default="USD")
    # Unset settings fall back to the service defaults
    credit_card_overspend_threshold = Column(Float, nullable=True)
    auto_create_overspend_project = Column(Float, nullable=True)
    overspend_week_count = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    members = relationship("HouseholdMember", back_populates="household", cascade="all, delete-orphan")


class HouseholdMember(Base):
    """Household membership with role and income share"""

    __tablename__ = "household_member"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    household_id = Column(Text, ForeignKey("household.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Text, nullable=False)
    name = Column(Text, nullable=False)
    role = Column(Text, nullable=False, default="member")
    income_percentage = Column(Float, nullable=True)

    household = relationship("Household", back_populates="members")


class CardStatement(Base):
    """Submitted credit card statement with its line-item charges"""

    __tablename__ = "card_statement"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    household_id = Column(Text, nullable=False, index=True)
    card_id = Column(Text, nullable=False)
    statement_date = Column(DateTime(timezone=True), nullable=False)
    charges = Column(JSON, nullable=False)
    total_amount = Column(Float, nullable=False, default=0.0)
    submitted_by = Column(Text, nullable=True)
    processed = Column(Boolean, nullable=False, default=False)
    processed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class OverspendProject(Base):
    """Accountability project for one member's overspend"""

    __tablename__ = "overspend_project"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    household_id = Column(Text, nullable=False, index=True)
    statement_id = Column(UUID(as_uuid=True), nullable=True)
    member_id = Column(Text, nullable=False)
    member_name = Column(Text, nullable=False)
    original_charge_amount = Column(Float, nullable=False)
    responsibility_percent = Column(Float, nullable=False, default=50.0)
    responsibility_amount = Column(Float, nullable=False)
    weekly_contribution = Column(Float, nullable=False)
    week_count = Column(Integer, nullable=False, default=4)
    status = Column(Text, nullable=False, default="active")
    requires_approval = Column(Boolean, nullable=False, default=False)
    approved_by = Column(JSON, nullable=False, default=list)
    approval_date = Column(DateTime(timezone=True), nullable=True)
    total_collected = Column(Float, nullable=False, default=0.0)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    payments = relationship(
        "ProjectPayment",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="ProjectPayment.paid_at",
    )


class ProjectPayment(Base):
    """Payment recorded against an overspend project"""

    __tablename__ = "project_payment"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    project_id = Column(UUID(as_uuid=True), ForeignKey("overspend_project.id", ondelete="CASCADE"), nullable=False)
    amount = Column(Float, nullable=False)
    week = Column(Integer, nullable=False)
    paid_at = Column(DateTime(timezone=True), nullable=False)

    project = relationship("OverspendProject", back_populates="payments")


class PaymentTask(Base):
    """Weekly payment reminder; references its project by id only"""

    __tablename__ = "payment_task"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    household_id = Column(Text, nullable=False, index=True)
    project_id = Column(UUID(as_uuid=True), ForeignKey("overspend_project.id"), nullable=False, index=True)
    type = Column(Text, nullable=False, default="overspend_payment")
    assigned_to = Column(Text, nullable=False)
    assigned_to_name = Column(Text, nullable=True)
    created_by = Column(Text, nullable=False, default="system")
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    week_number = Column(Integer, nullable=False)
    weekly_amount = Column(Float, nullable=False)
    due_date = Column(DateTime(timezone=True), nullable=False)
    priority = Column(Text, nullable=False, default="high")
    status = Column(Text, nullable=False, default="active")
    completed_at = Column(DateTime(timezone=True), nullable=True)
    completed_by = Column(Text, nullable=True)
    completion_notes = Column(Text, nullable=True)
    dismissed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)

"""Integration tests for statement processing against the test database"""

import uuid
import pytest
from sqlalchemy.orm import Session
from household_gateway.domain.exceptions import HouseholdNotFoundError
from household_gateway.domain.models import OverspendPolicy
from household_gateway.infrastructure.database.models import Household, OverspendProject, PaymentTask
from household_gateway.services.statement_processor import StatementProcessor

HOUSEHOLD_ID = "hh_rivera"


def tasks_for(db: Session, project_id: uuid.UUID) -> list[PaymentTask]:
    return (
        db.query(PaymentTask)
        .filter(PaymentTask.project_id == project_id)
        .order_by(PaymentTask.week_number)
        .all()
    )


def test_maria_example_requires_approval(db: Session, household: Household):
    """$2000 charged at 50% -> $1000 owed, not below $1000, so pending approval"""
    charges = [
        {"member_id": "maria", "amount": 1200.0, "description": "Flights"},
        {"member_id": "maria", "amount": 800.0, "description": "Hotel"},
    ]

    result = StatementProcessor(db).process_statement_charges(HOUSEHOLD_ID, charges, uuid.uuid4())

    assert len(result.overspends) == 1
    assert result.errors == []
    created = result.projects[0]
    assert created.member_id == "maria"
    assert created.member_responsibility == 1000.0
    assert created.auto_created is False

    project = db.query(OverspendProject).filter(OverspendProject.id == created.project_id).one()
    assert project.status == "pending_approval"
    assert project.requires_approval is True
    assert project.original_charge_amount == 2000.0
    assert project.weekly_contribution == 250.0

    tasks = tasks_for(db, project.id)
    assert [t.week_number for t in tasks] == [1, 2, 3, 4]
    assert all(t.weekly_amount == 250.0 for t in tasks)
    assert all(t.status == "pending_approval" for t in tasks)
    assert all(t.assigned_to == "maria" for t in tasks)

    assert [n.type for n in result.notifications] == ["overspend_approval_required", "overspend_assigned"]


def test_avis_example_auto_activates(db: Session, household: Household):
    """$800 charged, no split configured (50%) -> $400 owed, active immediately"""
    charges = [{"member_id": "avis", "amount": 800.0, "description": "Electronics"}]

    result = StatementProcessor(db).process_statement_charges(HOUSEHOLD_ID, charges, uuid.uuid4())

    created = result.projects[0]
    assert created.auto_created is True
    project = db.query(OverspendProject).filter(OverspendProject.id == created.project_id).one()
    assert project.status == "active"
    assert project.requires_approval is False
    assert project.responsibility_percent == 50.0

    tasks = tasks_for(db, project.id)
    assert len(tasks) == 4
    assert all(t.weekly_amount == 100.0 for t in tasks)
    assert all(t.status == "active" for t in tasks)
    assert sum(t.weekly_amount for t in tasks) == pytest.approx(project.responsibility_amount)

    assert [n.type for n in result.notifications] == ["overspend_auto_created", "overspend_assigned"]


def test_members_within_threshold_get_nothing(db: Session, household: Household):
    charges = [
        {"member_id": "avis", "amount": 300.0},
        {"member_id": "avis", "amount": 200.0},
        {"member_id": "maria", "amount": 120.0},
    ]

    result = StatementProcessor(db).process_statement_charges(HOUSEHOLD_ID, charges, uuid.uuid4())

    assert result.overspends == []
    assert result.projects == []
    assert result.notifications == []
    assert db.query(OverspendProject).count() == 0
    assert db.query(PaymentTask).count() == 0


def test_unattributed_charges_produce_nothing(db: Session, household: Household):
    charges = [{"amount": 5000.0, "description": "Unknown"}, {"amount": 900.0}]

    result = StatementProcessor(db).process_statement_charges(HOUSEHOLD_ID, charges, uuid.uuid4())

    assert result.projects == []
    assert result.notifications == []
    assert result.errors == []


def test_member_failure_does_not_stop_siblings(db: Session, household: Household):
    charges = [
        {"member_id": "maria", "amount": "not-a-number"},
        {"member_id": "stranger", "amount": 900.0},
        {"member_id": "avis", "amount": 800.0},
    ]

    result = StatementProcessor(db).process_statement_charges(HOUSEHOLD_ID, charges, uuid.uuid4())

    assert {e.member_id for e in result.errors} == {"maria", "stranger"}
    assert [p.member_id for p in result.projects] == ["avis"]
    assert len(result.notifications) == 2


def test_household_settings_override_defaults(db: Session, household: Household):
    household.credit_card_overspend_threshold = 1000.0
    household.auto_create_overspend_project = 2000.0
    household.overspend_week_count = 8
    db.commit()

    charges = [
        {"member_id": "avis", "amount": 900.0},
        {"member_id": "maria", "amount": 3000.0},
    ]

    result = StatementProcessor(db).process_statement_charges(HOUSEHOLD_ID, charges, uuid.uuid4())

    assert [o.member_id for o in result.overspends] == ["maria"]
    created = result.projects[0]
    assert created.auto_created is True  # 1500 < 2000
    assert len(tasks_for(db, created.project_id)) == 8


def test_explicit_defaults_are_used_when_household_is_silent(db: Session, household: Household):
    defaults = OverspendPolicy(overspend_threshold=100.0, auto_create_threshold=50.0, week_count=2)

    result = StatementProcessor(db, defaults=defaults).process_statement_charges(
        HOUSEHOLD_ID, [{"member_id": "avis", "amount": 150.0}], uuid.uuid4()
    )

    created = result.projects[0]
    assert created.member_responsibility == 75.0
    assert created.auto_created is False
    assert len(tasks_for(db, created.project_id)) == 2


def test_unknown_household(db: Session):
    with pytest.raises(HouseholdNotFoundError):
        StatementProcessor(db).process_statement_charges("hh_missing", [], uuid.uuid4())


@pytest.mark.parametrize("week_count", [0, -3])
def test_non_positive_household_week_count_falls_back_to_default(db: Session, household: Household, week_count: int):
    household.overspend_week_count = week_count
    db.commit()

    charges = [
        {"member_id": "avis", "amount": 800.0},
        {"member_id": "maria", "amount": 100.0},
    ]
    result = StatementProcessor(db).process_statement_charges(HOUSEHOLD_ID, charges, uuid.uuid4())

    assert result.errors == []
    created = result.projects[0]
    assert created.member_id == "avis"
    assert len(tasks_for(db, created.project_id)) == 4


def test_failed_member_is_not_reported_as_overspend(db: Session, household: Household, household_config):
    household_config.find_member("avis").income_percentage = "half"
    charges = [
        {"member_id": "avis", "amount": 800.0},
        {"member_id": "maria", "amount": 2000.0},
    ]

    result = StatementProcessor(db).process_for_household(household_config, charges, uuid.uuid4())

    assert [e.member_id for e in result.errors] == ["avis"]
    assert [o.member_id for o in result.overspends] == ["maria"]
    assert [p.member_id for p in result.projects] == ["maria"]
    assert len(result.notifications) == 2

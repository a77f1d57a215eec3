"""Integration tests for API endpoints"""

import uuid
import pytest
from unittest.mock import MagicMock
from fastapi.testclient import TestClient
from household_gateway.infrastructure.database.models import CardStatement, Household
from household_gateway.infrastructure.database.repositories import StatementRepository
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session
from household_gateway.infrastructure.database.session import get_db

HOUSEHOLD_ID = "hh_rivera"
BASE = f"/v1/households/{HOUSEHOLD_ID}"


def submit_statement(client: TestClient, charges: list[dict]) -> str:
    response = client.post(
        f"{BASE}/statements",
        json={"card_id": "card_visa", "statement_date": "2026-02-24T00:00:00Z", "charges": charges},
        headers={"X-User-ID": "olivia"},
    )
    assert response.status_code == 201
    return response.json()["statement_id"]


def process(client: TestClient, statement_id: str):
    return client.post(f"{BASE}/statements/{statement_id}/process")


@pytest.fixture
def processed(client: TestClient, household: Household) -> dict:
    """Statement where Maria needs approval and Avis auto-activates"""
    statement_id = submit_statement(
        client,
        [
            {"member_id": "maria", "amount": 1200.0, "description": "Flights"},
            {"member_id": "avis", "amount": 800.0, "description": "Electronics"},
            {"member_id": "maria", "amount": 800.0, "description": "Hotel"},
            {"amount": 45.0, "description": "Unattributed"},
        ],
    )
    response = process(client, statement_id)
    assert response.status_code == 200
    return response.json()


def project_for(data: dict, member_id: str) -> str:
    return next(p["project_id"] for p in data["projects"] if p["member_id"] == member_id)


def test_health_endpoint(client: TestClient):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_health_reports_unreachable_database(client: TestClient):
    broken = MagicMock()
    broken.execute.side_effect = OperationalError("SELECT 1", {}, Exception("connection refused"))
    client.app.dependency_overrides[get_db] = lambda: broken

    response = client.get("/health")

    assert response.status_code == 503
    assert response.json()["database"] == "unavailable"


def test_request_id_is_echoed(client: TestClient, household: Household):
    response = client.get(f"{BASE}/statements", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"
    assert client.get("/health").headers["X-Request-ID"]


def test_metrics_endpoint(client: TestClient, processed: dict):
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "household_overspend_project_created_total" in response.text


def test_create_statement(client: TestClient, household: Household):
    statement_id = submit_statement(client, [{"member_id": "avis", "amount": 120.5}])

    response = client.get(f"{BASE}/statements")

    assert response.status_code == 200
    statements = response.json()["statements"]
    assert [s["statement_id"] for s in statements] == [statement_id]
    assert statements[0]["total_amount"] == 120.5
    assert statements[0]["processed"] is False


def test_create_statement_unknown_household(client: TestClient, household: Household):
    response = client.post(
        "/v1/households/hh_missing/statements",
        json={"card_id": "card_visa", "charges": []},
    )
    assert response.status_code == 404


def test_create_statement_validates_body(client: TestClient, household: Household):
    response = client.post(f"{BASE}/statements", json={"card_id": "card_visa"})
    assert response.status_code == 422


def test_process_statement(processed: dict, notifier: MagicMock):
    assert {o["member_id"] for o in processed["overspends"]} == {"maria", "avis"}
    assert processed["errors"] == []
    assert len(processed["notifications"]) == 4

    by_member = {p["member_id"]: p for p in processed["projects"]}
    assert by_member["maria"]["member_responsibility"] == 1000.0
    assert by_member["maria"]["auto_created"] is False
    assert by_member["avis"]["member_responsibility"] == 400.0
    assert by_member["avis"]["auto_created"] is True

    statement = processed["statement"]
    assert statement["processed"] is True
    flagged = [c for c in statement["charges"] if c.get("overspend_flag")]
    assert len(flagged) == 3
    assert all(c["project_id"] == by_member[c["member_id"]]["project_id"] for c in flagged)

    notifier.send_notifications.assert_awaited_once()
    household_id, notifications = notifier.send_notifications.call_args.args
    assert household_id == HOUSEHOLD_ID
    assert len(notifications) == 4


def test_process_statement_twice_is_rejected(client: TestClient, household: Household):
    statement_id = submit_statement(client, [{"member_id": "avis", "amount": 800.0}])

    assert process(client, statement_id).status_code == 200
    assert process(client, statement_id).status_code == 400


def test_process_statement_not_found(client: TestClient, household: Household):
    response = process(client, "00000000-0000-0000-0000-000000000000")
    assert response.status_code == 404


def test_process_statement_invalid_id(client: TestClient, household: Household):
    assert process(client, "not-a-uuid").status_code == 400


def test_list_projects_and_tasks(client: TestClient, processed: dict):
    projects = client.get(f"{BASE}/overspend-projects").json()["projects"]
    assert len(projects) == 2

    maria_tasks = client.get(f"{BASE}/tasks", params={"assigned_to": "maria"}).json()["tasks"]
    assert len(maria_tasks) == 4
    assert {t["status"] for t in maria_tasks} == {"pending_approval"}
    assert sorted(t["weekly_amount"] for t in maria_tasks) == [250.0] * 4

    active = client.get(f"{BASE}/tasks", params={"status": "active"}).json()["tasks"]
    assert {t["assigned_to"] for t in active} == {"avis"}


def test_approve_project(client: TestClient, processed: dict):
    project_id = project_for(processed, "maria")

    response = client.post(
        f"{BASE}/overspend-projects/{project_id}/approve",
        headers={"X-User-ID": "olivia"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["project"]["status"] == "active"
    assert data["project"]["approved_by"] == ["olivia"]
    assert {t["status"] for t in data["tasks"]} == {"active"}


def test_approve_project_forbidden_for_manager(client: TestClient, processed: dict):
    project_id = project_for(processed, "maria")

    response = client.post(
        f"{BASE}/overspend-projects/{project_id}/approve",
        headers={"X-User-ID": "morgan"},
    )

    assert response.status_code == 403


def test_approve_project_requires_user(client: TestClient, processed: dict):
    project_id = project_for(processed, "maria")
    assert client.post(f"{BASE}/overspend-projects/{project_id}/approve").status_code == 422


def test_approve_active_project_conflict(client: TestClient, processed: dict):
    project_id = project_for(processed, "avis")

    response = client.post(
        f"{BASE}/overspend-projects/{project_id}/approve",
        headers={"X-User-ID": "olivia"},
    )

    assert response.status_code == 409


def test_record_payment(client: TestClient, processed: dict):
    project_id = project_for(processed, "avis")

    response = client.post(f"{BASE}/overspend-projects/{project_id}/payments", json={"amount": 100.0, "week": 1})

    assert response.status_code == 200
    project = response.json()["project"]
    assert project["total_collected"] == 100.0
    assert project["payments"][0]["week"] == 1
    assert project["status"] == "active"

    completed = client.get(f"{BASE}/tasks", params={"status": "completed"}).json()["tasks"]
    assert [t["week_number"] for t in completed] == [1]


def test_record_payment_rejects_non_positive_amount(client: TestClient, processed: dict):
    project_id = project_for(processed, "avis")
    response = client.post(f"{BASE}/overspend-projects/{project_id}/payments", json={"amount": 0})
    assert response.status_code == 422


def test_update_project_status_completes_tasks(client: TestClient, processed: dict):
    project_id = project_for(processed, "maria")

    response = client.patch(f"{BASE}/overspend-projects/{project_id}/status", json={"status": "completed"})

    assert response.status_code == 200
    assert response.json()["project"]["status"] == "completed"
    tasks = client.get(f"{BASE}/tasks", params={"assigned_to": "maria"}).json()["tasks"]
    assert {t["status"] for t in tasks} == {"completed"}

    reopen = client.patch(f"{BASE}/overspend-projects/{project_id}/status", json={"status": "active"})
    assert reopen.status_code == 409


def test_update_project_status_not_found(client: TestClient, household: Household):
    response = client.patch(
        f"{BASE}/overspend-projects/00000000-0000-0000-0000-000000000000/status",
        json={"status": "on_hold"},
    )
    assert response.status_code == 404


def test_update_task(client: TestClient, processed: dict):
    tasks = client.get(f"{BASE}/tasks", params={"assigned_to": "avis"}).json()["tasks"]
    task_id = tasks[0]["id"]

    forbidden = client.patch(
        f"{BASE}/tasks/{task_id}",
        json={"status": "completed"},
        headers={"X-User-ID": "maria"},
    )
    assert forbidden.status_code == 403

    response = client.patch(
        f"{BASE}/tasks/{task_id}",
        json={"status": "completed", "completion_notes": "Transferred"},
        headers={"X-User-ID": "avis"},
    )
    assert response.status_code == 200
    assert response.json()["task"]["status"] == "completed"
    assert response.json()["task"]["completed_by"] == "avis"


def test_dismiss_task_requires_manager(client: TestClient, processed: dict):
    task_id = client.get(f"{BASE}/tasks", params={"assigned_to": "avis"}).json()["tasks"][0]["id"]

    denied = client.patch(f"{BASE}/tasks/{task_id}", json={"status": "dismissed"}, headers={"X-User-ID": "avis"})
    allowed = client.patch(f"{BASE}/tasks/{task_id}", json={"status": "dismissed"}, headers={"X-User-ID": "morgan"})

    assert denied.status_code == 403
    assert allowed.status_code == 200
    assert allowed.json()["task"]["status"] == "dismissed"


def test_overspend_summary(client: TestClient, processed: dict):
    response = client.get(f"{BASE}/overspend-summary")

    assert response.status_code == 200
    summary = response.json()
    assert summary["total_projects"] == 2
    assert summary["active_projects"] == 1
    assert summary["pending_approval"] == 1
    assert summary["total_responsibility"] == 1400.0
    assert summary["total_collected"] == 0.0
    assert summary["by_member"]["maria"]["member_name"] == "Maria"
    assert summary["by_member"]["avis"]["total_responsibility"] == 400.0


def test_process_statement_claimed_by_another_session(client: TestClient, db: Session, household: Household):
    statement_id = submit_statement(client, [{"member_id": "avis", "amount": 800.0}])

    other = Session(bind=db.get_bind())
    try:
        statement = other.query(CardStatement).filter(CardStatement.id == uuid.UUID(statement_id)).one()
        statement.processed = True
        other.commit()
    finally:
        other.close()

    response = process(client, statement_id)

    assert response.status_code == 400
    assert client.get(f"{BASE}/overspend-projects").json()["projects"] == []


def test_process_statement_locks_the_statement_row():
    db = MagicMock()

    StatementRepository(db).get_statement(HOUSEHOLD_ID, uuid.uuid4(), for_update=True)

    db.query.return_value.filter.return_value.with_for_update.assert_called_once_with()


def test_record_payment_rejects_invalid_week(client: TestClient, processed: dict):
    project_id = project_for(processed, "avis")
    response = client.post(f"{BASE}/overspend-projects/{project_id}/payments", json={"amount": 50.0, "week": 0})
    assert response.status_code == 422

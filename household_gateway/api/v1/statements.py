"""Credit card statement submission and overspend processing endpoints"""

import time
import logging
from typing import Any, Dict, List
from fastapi import APIRouter, Depends, HTTPException, BackgroundTasks, Request
from sqlalchemy.orm import Session

from household_gateway.api.v1.schemas import (
    CreatedProjectSchema,
    MemberErrorSchema,
    NotificationSchema,
    OverspendSchema,
    ProcessStatementResponse,
    StatementCreateRequest,
    StatementListResponse,
    StatementResponse,
)
from household_gateway.api.dependencies import get_notification_client, get_optional_user_id, get_request_id
from household_gateway.api.errors import parse_id, to_http_exception
from household_gateway.infrastructure.database.session import get_db
from household_gateway.infrastructure.database.models import CardStatement
from household_gateway.infrastructure.database.repositories import HouseholdRepository, StatementRepository
from household_gateway.infrastructure.clients.notifier import NotificationClient
from household_gateway.infrastructure.observability.logging import log_statement_processed
from household_gateway.domain.exceptions import (
    DomainException,
    HouseholdNotFoundError,
    NotFoundError,
    StatementAlreadyProcessedError,
)
from household_gateway.domain.models import StatementProcessingResult
from household_gateway.services.statement_processor import StatementProcessor
from household_gateway.utils.date_utils import utc_now

router = APIRouter()


def to_statement_response(statement: CardStatement) -> StatementResponse:
    return StatementResponse(
        statement_id=str(statement.id),
        household_id=statement.household_id,
        card_id=statement.card_id,
        statement_date=statement.statement_date,
        total_amount=statement.total_amount,
        processed=statement.processed,
        processed_at=statement.processed_at,
        charges=statement.charges,
    )


def flag_charges(charges: List[Dict[str, Any]], result: StatementProcessingResult) -> List[Dict[str, Any]]:
    """Mark charges belonging to overspending members and link the project created for them"""
    overspent = {o.member_id for o in result.overspends}
    project_by_member = {p.member_id: str(p.project_id) for p in result.projects}

    flagged = []
    for charge in charges:
        charge = dict(charge)
        member_id = charge.get("member_id")
        if member_id in overspent:
            charge["overspend_flag"] = True
            if member_id in project_by_member:
                charge["project_id"] = project_by_member[member_id]
        flagged.append(charge)
    return flagged


@router.post("/households/{household_id}/statements", response_model=StatementResponse, status_code=201)
def create_statement(
    household_id: str,
    request_body: StatementCreateRequest,
    request: Request,
    db: Session = Depends(get_db),
    user_id: str | None = Depends(get_optional_user_id),
):
    """Store a submitted statement; charges are processed separately"""
    request_id = get_request_id(request)

    try:
        if HouseholdRepository(db).get_household(household_id) is None:
            raise HouseholdNotFoundError("Household not found")

        statement = StatementRepository(db).create_statement(
            household_id=household_id,
            card_id=request_body.card_id,
            statement_date=request_body.statement_date or utc_now(),
            charges=[c.model_dump() for c in request_body.charges],
            submitted_by=user_id,
        )
        db.commit()

    except DomainException as e:
        db.rollback()
        raise to_http_exception(e, request_id)

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    logging.info(
        "Statement created",
        extra={"request_id": request_id, "statement_id": str(statement.id), "charge_count": len(statement.charges)},
    )
    return to_statement_response(statement)


@router.get("/households/{household_id}/statements", response_model=StatementListResponse)
def list_statements(household_id: str, db: Session = Depends(get_db)):
    statements = StatementRepository(db).list_statements(household_id)
    return StatementListResponse(statements=[to_statement_response(s) for s in statements])


@router.post(
    "/households/{household_id}/statements/{statement_id}/process",
    response_model=ProcessStatementResponse,
)
def process_statement(
    household_id: str,
    statement_id: str,
    background_tasks: BackgroundTasks,
    request: Request,
    db: Session = Depends(get_db),
    notification_client: NotificationClient = Depends(get_notification_client),
):
    """
    Run overspend detection over a statement's charges.

    Flow:
    1. Lock the statement row (must belong to the household and be unprocessed)
    2. Detect overspends and create projects, tasks and notifications
    3. Mark the statement processed and flag overspending members' charges
    4. Commit, then deliver notifications in the background
    """
    start_time = time.time()
    request_id = get_request_id(request)
    statement_uuid = parse_id(statement_id, "statement")

    try:
        statement_repo = StatementRepository(db)
        statement = statement_repo.get_statement(household_id, statement_uuid, for_update=True)
        if statement is None:
            raise NotFoundError("Statement not found")
        if statement.processed:
            raise StatementAlreadyProcessedError("Statement already processed")

        result = StatementProcessor(db).process_statement_charges(household_id, statement.charges, statement.id)
        statement_repo.mark_processed(statement, flag_charges(statement.charges, result), utc_now())
        db.commit()

    except DomainException as e:
        db.rollback()
        raise to_http_exception(e, request_id)

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    background_tasks.add_task(notification_client.send_notifications, household_id, result.notifications)

    duration_ms = (time.time() - start_time) * 1000
    log_statement_processed(
        household_id,
        statement_id,
        overspend_count=len(result.overspends),
        project_count=len(result.projects),
        notification_count=len(result.notifications),
        error_count=len(result.errors),
        duration_ms=duration_ms,
    )

    return ProcessStatementResponse(
        statement=to_statement_response(statement),
        overspends=[
            OverspendSchema(
                member_id=o.member_id,
                member_name=o.member_name,
                total_charges=o.total_charges,
                threshold=o.threshold,
            )
            for o in result.overspends
        ],
        projects=[
            CreatedProjectSchema(
                project_id=str(p.project_id),
                member_id=p.member_id,
                member_responsibility=p.member_responsibility,
                auto_created=p.auto_created,
            )
            for p in result.projects
        ],
        notifications=[NotificationSchema(**n.to_payload()) for n in result.notifications],
        errors=[MemberErrorSchema(member_id=e.member_id, error=e.error) for e in result.errors],
    )

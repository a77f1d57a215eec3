"""Overspend project endpoints - approval, payments, status and summary"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from household_gateway.api.v1.schemas import (
    ApprovalResponse,
    MemberSummarySchema,
    PaymentRequest,
    ProjectListResponse,
    ProjectResponse,
    ProjectSchema,
    ProjectStatusRequest,
    SummaryResponse,
    TaskSchema,
)
from household_gateway.api.dependencies import get_current_user_id, get_request_id
from household_gateway.api.errors import parse_id, to_http_exception
from household_gateway.infrastructure.database.session import get_db
from household_gateway.domain.exceptions import DomainException
from household_gateway.services.projects import ProjectService

router = APIRouter()


@router.get("/households/{household_id}/overspend-projects", response_model=ProjectListResponse)
def list_projects(household_id: str, db: Session = Depends(get_db)):
    """Household's projects, newest first"""
    projects = ProjectService(db).list_projects(household_id)
    return ProjectListResponse(projects=[ProjectSchema.model_validate(p) for p in projects])


@router.get("/households/{household_id}/overspend-summary", response_model=SummaryResponse)
def get_overspend_summary(household_id: str, db: Session = Depends(get_db)):
    """
    Aggregate responsibility and collections across all projects.

    Computed on every request from the household's projects.
    """
    summary = ProjectService(db).get_overspend_summary(household_id)
    return SummaryResponse(
        total_projects=summary.total_projects,
        active_projects=summary.active_projects,
        pending_approval=summary.pending_approval,
        total_responsibility=summary.total_responsibility,
        total_collected=summary.total_collected,
        by_member={
            member_id: MemberSummarySchema(
                member_name=m.member_name,
                project_count=m.project_count,
                total_responsibility=m.total_responsibility,
                total_collected=m.total_collected,
            )
            for member_id, m in summary.by_member.items()
        },
    )


@router.post("/households/{household_id}/overspend-projects/{project_id}/approve", response_model=ApprovalResponse)
def approve_project(
    household_id: str,
    project_id: str,
    request: Request,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Approve a pending project (owners and co-owners only) and activate its tasks"""
    request_id = get_request_id(request)
    project_uuid = parse_id(project_id, "project")

    try:
        project, tasks = ProjectService(db).approve_project(household_id, project_uuid, user_id)
        db.commit()

    except DomainException as e:
        db.rollback()
        raise to_http_exception(e, request_id)

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    return ApprovalResponse(
        project=ProjectSchema.model_validate(project),
        tasks=[TaskSchema.model_validate(t) for t in tasks],
        message="Project approved and tasks activated",
    )


@router.patch("/households/{household_id}/overspend-projects/{project_id}/status", response_model=ProjectResponse)
def update_project_status(
    household_id: str,
    project_id: str,
    request_body: ProjectStatusRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """Put a project on hold, resume it, or complete it (completing also completes its tasks)"""
    request_id = get_request_id(request)
    project_uuid = parse_id(project_id, "project")

    try:
        project = ProjectService(db).update_project_status(household_id, project_uuid, request_body.status)
        db.commit()

    except DomainException as e:
        db.rollback()
        raise to_http_exception(e, request_id)

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    return ProjectResponse(
        project=ProjectSchema.model_validate(project),
        message=f"Project status updated to {request_body.status}",
    )


@router.post("/households/{household_id}/overspend-projects/{project_id}/payments", response_model=ProjectResponse)
def record_payment(
    household_id: str,
    project_id: str,
    request_body: PaymentRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """Record a payment towards a project's responsibility"""
    request_id = get_request_id(request)
    project_uuid = parse_id(project_id, "project")

    try:
        project = ProjectService(db).record_payment(
            household_id,
            project_uuid,
            amount=request_body.amount,
            week=request_body.week,
        )
        db.commit()

    except DomainException as e:
        db.rollback()
        raise to_http_exception(e, request_id)

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    return ProjectResponse(project=ProjectSchema.model_validate(project), message="Payment recorded successfully")

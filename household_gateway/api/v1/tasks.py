"""Payment task endpoints"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from household_gateway.api.v1.schemas import TaskListResponse, TaskResponse, TaskSchema, TaskUpdateRequest
from household_gateway.api.dependencies import get_current_user_id, get_request_id
from household_gateway.api.errors import parse_id, to_http_exception
from household_gateway.infrastructure.database.session import get_db
from household_gateway.domain.exceptions import DomainException
from household_gateway.services.projects import ProjectService

router = APIRouter()


@router.get("/households/{household_id}/tasks", response_model=TaskListResponse)
def list_tasks(
    household_id: str,
    assigned_to: str | None = Query(None, description="Only tasks assigned to this member"),
    status: str | None = Query(None, description="Only tasks in this status"),
    db: Session = Depends(get_db),
):
    tasks = ProjectService(db).list_tasks(household_id, assigned_to=assigned_to, status=status)
    return TaskListResponse(tasks=[TaskSchema.model_validate(t) for t in tasks])


@router.patch("/households/{household_id}/tasks/{task_id}", response_model=TaskResponse)
def update_task(
    household_id: str,
    task_id: str,
    request_body: TaskUpdateRequest,
    request: Request,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """
    Complete or dismiss a payment task.

    Only the assigned member can complete a task; only owners, co-owners
    and managers can dismiss one.
    """
    request_id = get_request_id(request)
    task_uuid = parse_id(task_id, "task")

    try:
        task = ProjectService(db).update_task_status(
            household_id,
            task_uuid,
            user_id,
            request_body.status,
            completion_notes=request_body.completion_notes,
        )
        db.commit()

    except DomainException as e:
        db.rollback()
        raise to_http_exception(e, request_id)

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    return TaskResponse(task=TaskSchema.model_validate(task))

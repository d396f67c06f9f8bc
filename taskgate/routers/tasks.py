from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request, status
from sqlmodel import Session

from ..database import get_db
from ..schemas.base import parse_payload
from ..schemas.task import (
    MessageResponse,
    Task as TaskSchema,
    TaskChangeResponse,
    TaskListResponse,
    TaskResponse,
    TaskWrite,
    normalize_priority,
    normalize_status,
)
from ..schemas.user import TokenClaims
from ..stores import TaskRepository
from .auth import get_current_identity, read_json_body

router = APIRouter()


def get_task_repository(db: Session = Depends(get_db)) -> TaskRepository:
    return TaskRepository(db)


def _filter_value(request: Request, *names: str) -> Optional[str]:
    for name in names:
        value = request.query_params.get(name)
        if value:
            return value
    return None


@router.get("", response_model=TaskListResponse)
def list_tasks(
    request: Request,
    identity: TokenClaims = Depends(get_current_identity),
    tasks: TaskRepository = Depends(get_task_repository),
):
    """List the caller's tasks, newest first.

    ``estado``/``status`` and ``prioridad``/``priority`` filter by exact
    match and combine with AND. Values nobody uses just match nothing.
    """
    status_filter = _filter_value(request, "estado", "status")
    priority_filter = _filter_value(request, "prioridad", "priority")
    found = tasks.list(
        identity.id,
        status=normalize_status(status_filter),
        priority=normalize_priority(priority_filter),
    )
    return TaskListResponse(
        tasks=[TaskSchema.model_validate(task) for task in found],
        total=len(found),
    )


@router.post("", response_model=TaskChangeResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    identity: TokenClaims = Depends(get_current_identity),
    payload: Dict[str, Any] = Depends(read_json_body),
    tasks: TaskRepository = Depends(get_task_repository),
):
    """Create a new task for the caller."""
    data = parse_payload(TaskWrite, payload)
    task = tasks.create(identity.id, data)
    return TaskChangeResponse(message="Task created successfully", task=TaskSchema.model_validate(task))


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(
    task_id: int,
    identity: TokenClaims = Depends(get_current_identity),
    tasks: TaskRepository = Depends(get_task_repository),
):
    """Get a specific task by ID."""
    task = tasks.get(identity.id, task_id)
    return TaskResponse(task=TaskSchema.model_validate(task))


@router.put("/{task_id}", response_model=TaskChangeResponse)
def update_task(
    task_id: int,
    identity: TokenClaims = Depends(get_current_identity),
    payload: Dict[str, Any] = Depends(read_json_body),
    tasks: TaskRepository = Depends(get_task_repository),
):
    """Replace a task's fields; anything omitted goes back to its default."""
    data = parse_payload(TaskWrite, payload)
    task = tasks.update(identity.id, task_id, data)
    return TaskChangeResponse(message="Task updated successfully", task=TaskSchema.model_validate(task))


@router.delete("/{task_id}", response_model=MessageResponse)
def delete_task(
    task_id: int,
    identity: TokenClaims = Depends(get_current_identity),
    tasks: TaskRepository = Depends(get_task_repository),
):
    """Delete a specific task."""
    tasks.delete(identity.id, task_id)
    return MessageResponse(message="Task deleted successfully")

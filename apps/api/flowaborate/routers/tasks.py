"""Task checklist routes, scoped to a collaboration's participants."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from flowaborate.core.collaboration_access import check_collaboration_access
from flowaborate.core.deps import get_current_user_id, get_db
from flowaborate.db.enums import CollaborationRole
from flowaborate.schemas.task import (
    TaskCreate,
    TaskDefaultsRequest,
    TaskListResponse,
    TaskRead,
    TaskUpdate,
)
from flowaborate.services import task_service

from .collaborations_shared import load_collaboration

router = APIRouter()


def _task_list(tasks) -> TaskListResponse:
    return TaskListResponse(
        items=[TaskRead.model_validate(t) for t in tasks],
        total=len(tasks),
        completed=sum(1 for t in tasks if t.is_completed),
        progress=task_service.task_progress(tasks),
    )


@router.get("/{collaboration_id:uuid}/tasks", response_model=TaskListResponse)
def list_tasks(
    collaboration_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Checklist with progress. Guests only see their own tasks."""
    collaboration = load_collaboration(db, collaboration_id)
    role = check_collaboration_access(collaboration, user_id)
    return _task_list(task_service.list_tasks(db, collaboration.id, role))


@router.post(
    "/{collaboration_id:uuid}/tasks",
    response_model=TaskRead,
    status_code=status.HTTP_201_CREATED,
)
def create_task(
    collaboration_id: UUID,
    data: TaskCreate,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    collaboration = load_collaboration(db, collaboration_id)
    check_collaboration_access(collaboration, user_id, {CollaborationRole.HOST})
    return task_service.create_task(db, collaboration.id, **data.model_dump())


@router.post("/{collaboration_id:uuid}/tasks/defaults", response_model=TaskListResponse)
def seed_default_tasks(
    collaboration_id: UUID,
    data: TaskDefaultsRequest,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Append a phase's template tasks and return the full checklist."""
    collaboration = load_collaboration(db, collaboration_id)
    role = check_collaboration_access(collaboration, user_id, {CollaborationRole.HOST})
    task_service.seed_default_tasks(db, collaboration.id, data.phase)
    return _task_list(task_service.list_tasks(db, collaboration.id, role))


@router.patch("/{collaboration_id:uuid}/tasks/{task_id:uuid}", response_model=TaskRead)
def update_task(
    collaboration_id: UUID,
    task_id: UUID,
    data: TaskUpdate,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Complete, reopen, or skip a task assigned to the caller's role (host: any)."""
    collaboration = load_collaboration(db, collaboration_id)
    role = check_collaboration_access(collaboration, user_id)
    task = task_service.get_task(db, collaboration.id, task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task_service.update_task_state(
        db,
        task,
        role=role,
        user_id=user_id,
        **data.model_dump(exclude_unset=True),
    )

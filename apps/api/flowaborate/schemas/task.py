"""Pydantic schemas for the collaboration task checklist."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from flowaborate.db.enums import CollaborationRole, TaskPhase


class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    assigned_role: CollaborationRole = CollaborationRole.HOST
    assigned_user_id: UUID | None = None
    due_date: datetime | None = None


class TaskUpdate(BaseModel):
    """Omitted fields stay unchanged."""
    is_completed: bool | None = None
    is_skipped: bool | None = None


class TaskDefaultsRequest(BaseModel):
    phase: TaskPhase


class TaskRead(BaseModel):
    id: UUID
    collaboration_id: UUID
    title: str
    description: str | None
    assigned_role: CollaborationRole
    assigned_user_id: UUID | None
    due_date: datetime | None
    position: int
    is_completed: bool
    is_skipped: bool
    completed_at: datetime | None
    completed_by_user_id: UUID | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TaskListResponse(BaseModel):
    items: list[TaskRead]
    total: int
    completed: int
    progress: int

"""Pydantic schemas for API request/response models."""

from flowaborate.schemas.collaboration import (
    CollaborationRead,
    CollaborationStatusChange,
    CollaborationStatusHistoryRead,
    HostDashboardResponse,
    IntakeSubmit,
    InvitePreview,
    ScheduleRequest,
    StatusChangeResponse,
    StatusOption,
)
from flowaborate.schemas.task import (
    TaskCreate,
    TaskDefaultsRequest,
    TaskListResponse,
    TaskRead,
    TaskUpdate,
)

__all__ = [
    "CollaborationRead",
    "CollaborationStatusChange",
    "CollaborationStatusHistoryRead",
    "HostDashboardResponse",
    "IntakeSubmit",
    "InvitePreview",
    "ScheduleRequest",
    "StatusChangeResponse",
    "StatusOption",
    "TaskCreate",
    "TaskDefaultsRequest",
    "TaskListResponse",
    "TaskRead",
    "TaskUpdate",
]

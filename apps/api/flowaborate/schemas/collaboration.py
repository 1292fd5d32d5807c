"""Pydantic schemas for collaboration endpoints."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from flowaborate.db.enums import (
    CollaborationRole,
    ExceptionSeverity,
    ExceptionType,
    ResponsibleParty,
)


# =============================================================================
# Derived state
# =============================================================================


class ResponsibilityRead(BaseModel):
    responsible_party: ResponsibleParty
    label: str
    action: str

    model_config = {"from_attributes": True}


class RoleActionRead(BaseModel):
    has_action: bool
    title: str | None = None
    description: str | None = None
    waiting_on_label: str | None = None

    model_config = {"from_attributes": True}


class CollaborationExceptionRead(BaseModel):
    type: ExceptionType
    message: str
    severity: ExceptionSeverity

    model_config = {"from_attributes": True}


class StatusOption(BaseModel):
    value: str
    label: str


# =============================================================================
# Collaboration
# =============================================================================


class CollaborationRead(BaseModel):
    """Participant view of a collaboration."""

    id: UUID
    workspace_id: UUID
    status: str
    status_label: str
    scheduled_date: datetime | None
    prep_date: datetime | None
    recorded_date: datetime | None
    delivery_date: datetime | None
    reschedule_count: int
    host_id: UUID
    editor_id: UUID | None
    guest_profile_id: UUID | None
    created_at: datetime
    updated_at: datetime

    role: CollaborationRole
    responsibility: ResponsibilityRead
    role_action: RoleActionRead
    exception: CollaborationExceptionRead | None = None  # host view only
    allowed_transitions: list[str]


class CollaborationStatusChange(BaseModel):
    """Request to change collaboration status."""

    status: str
    notes: str | None = Field(None, max_length=500)


class StatusChangeResponse(BaseModel):
    collaboration: CollaborationRead
    old_status: str
    new_status: str
    notifications_sent: int
    notifications_failed: int


class CollaborationStatusHistoryRead(BaseModel):
    """Status history entry response."""

    id: UUID
    old_status: str | None
    new_status: str
    changed_by_user_id: UUID | None
    changed_at: datetime
    notes: str | None

    model_config = {"from_attributes": True}


# =============================================================================
# Dashboard
# =============================================================================


class DashboardItem(BaseModel):
    collaboration_id: UUID
    workspace_id: UUID
    guest_name: str | None
    status: str
    status_label: str
    scheduled_date: datetime | None
    updated_at: datetime
    responsibility: ResponsibilityRead
    role_action: RoleActionRead
    exception: CollaborationExceptionRead | None = None


class HostDashboardResponse(BaseModel):
    exceptions: list[DashboardItem]
    my_actions: list[DashboardItem]
    waiting: list[DashboardItem]


class RoleDashboardResponse(BaseModel):
    actions: list[DashboardItem]
    waiting: list[DashboardItem]


# =============================================================================
# Guest flows
# =============================================================================


class InvitePreview(BaseModel):
    """Public, minimal view of the collaboration behind an invite link."""

    collaboration_id: UUID
    workspace_name: str
    host_name: str | None
    status: str
    status_label: str
    intake_completed: bool


class IntakeSubmit(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr | None = None
    bio: str | None = Field(None, max_length=5000)
    topics: list[str] = Field(default_factory=list)
    links: dict[str, str] = Field(default_factory=dict)


class IntakeResponse(BaseModel):
    collaboration_id: UUID
    guest_profile_id: UUID
    status: str
    status_changed: bool


class ScheduleRequest(BaseModel):
    scheduled_date: datetime
    prep_date: datetime | None = None


class ScheduleResponse(BaseModel):
    collaboration_id: UUID
    status: str
    scheduled_date: datetime | None
    prep_date: datetime | None
    reschedule_count: int
    rescheduled: bool

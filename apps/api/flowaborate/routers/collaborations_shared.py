"""Helpers shared by collaboration routers."""

from datetime import datetime
from uuid import UUID

from fastapi import HTTPException
from sqlalchemy.orm import Session

from flowaborate.core.status_definitions import get_allowed_transition_values, get_status_label
from flowaborate.db.enums import CollaborationRole
from flowaborate.db.models import Collaboration
from flowaborate.schemas.collaboration import (
    CollaborationExceptionRead,
    CollaborationRead,
    DashboardItem,
    ResponsibilityRead,
    RoleActionRead,
)
from flowaborate.services import collaboration_service
from flowaborate.services.collaboration_exception_service import (
    ExceptionThresholds,
    detect_exception,
)
from flowaborate.services.dashboard_service import DashboardEntry
from flowaborate.services.email_sender import EmailSender, get_email_sender
from flowaborate.services.responsibility_service import resolve_responsibility
from flowaborate.services.role_action_service import resolve_role_action


def get_notification_sender() -> EmailSender:
    """Email sender dependency (overridden in tests)."""
    return get_email_sender()


def load_collaboration(db: Session, collaboration_id: UUID) -> Collaboration:
    collaboration = collaboration_service.get_collaboration(db, collaboration_id)
    if not collaboration:
        raise HTTPException(status_code=404, detail="Collaboration not found")
    return collaboration


def _exception_read(exception) -> CollaborationExceptionRead | None:
    if exception is None:
        return None
    return CollaborationExceptionRead.model_validate(exception)


def collaboration_to_read(
    collaboration: Collaboration,
    role: CollaborationRole,
    now: datetime | None = None,
) -> CollaborationRead:
    """Participant view; exceptions are only surfaced to the host."""
    exception = None
    if role is CollaborationRole.HOST:
        exception = detect_exception(collaboration, now, ExceptionThresholds.from_settings())

    return CollaborationRead(
        id=collaboration.id,
        workspace_id=collaboration.workspace_id,
        status=collaboration.status,
        status_label=get_status_label(collaboration.status),
        scheduled_date=collaboration.scheduled_date,
        prep_date=collaboration.prep_date,
        recorded_date=collaboration.recorded_date,
        delivery_date=collaboration.delivery_date,
        reschedule_count=collaboration.reschedule_count,
        host_id=collaboration.host_id,
        editor_id=collaboration.editor_id,
        guest_profile_id=collaboration.guest_profile_id,
        created_at=collaboration.created_at,
        updated_at=collaboration.updated_at,
        role=role,
        responsibility=ResponsibilityRead.model_validate(
            resolve_responsibility(collaboration.status)
        ),
        role_action=RoleActionRead.model_validate(resolve_role_action(collaboration, role)),
        exception=_exception_read(exception),
        allowed_transitions=get_allowed_transition_values(collaboration.status),
    )


def entry_to_item(entry: DashboardEntry) -> DashboardItem:
    collaboration = entry.collaboration
    guest = collaboration.guest_profile
    return DashboardItem(
        collaboration_id=collaboration.id,
        workspace_id=collaboration.workspace_id,
        guest_name=guest.name if guest else None,
        status=collaboration.status,
        status_label=get_status_label(collaboration.status),
        scheduled_date=collaboration.scheduled_date,
        updated_at=collaboration.updated_at,
        responsibility=ResponsibilityRead.model_validate(entry.responsibility),
        role_action=RoleActionRead.model_validate(entry.role_action),
        exception=_exception_read(entry.exception),
    )

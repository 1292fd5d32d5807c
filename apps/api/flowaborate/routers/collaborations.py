"""Collaboration routes: participant view, status changes, history, scheduling."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from flowaborate.core.collaboration_access import check_collaboration_access
from flowaborate.core.deps import get_current_user_id, get_db
from flowaborate.core.status_definitions import get_status_options
from flowaborate.db.enums import CollaborationRole
from flowaborate.schemas.collaboration import (
    CollaborationRead,
    CollaborationStatusChange,
    CollaborationStatusHistoryRead,
    ScheduleRequest,
    ScheduleResponse,
    StatusChangeResponse,
    StatusOption,
)
from flowaborate.services import (
    collaboration_status_service,
    notification_service,
    scheduling_service,
)
from flowaborate.services.email_sender import EmailSender

from .collaborations_shared import (
    collaboration_to_read,
    get_notification_sender,
    load_collaboration,
)

router = APIRouter()


@router.get("/statuses", response_model=list[StatusOption])
def list_statuses():
    """All statuses in lifecycle order with display labels."""
    return get_status_options()


@router.get("/{collaboration_id:uuid}", response_model=CollaborationRead)
def get_collaboration(
    collaboration_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    collaboration = load_collaboration(db, collaboration_id)
    role = check_collaboration_access(collaboration, user_id)
    return collaboration_to_read(collaboration, role)


@router.post("/{collaboration_id:uuid}/status", response_model=StatusChangeResponse)
async def change_status(
    collaboration_id: UUID,
    data: CollaborationStatusChange,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    sender: EmailSender = Depends(get_notification_sender),
):
    """
    Change collaboration status (validates edge + role, records history).

    Notifications go out after the change commits; delivery failures are
    reported in the counts but never undo the change.
    """
    collaboration = load_collaboration(db, collaboration_id)
    role = check_collaboration_access(collaboration, user_id)

    result = collaboration_status_service.change_status(
        db,
        collaboration,
        data.status,
        user_id=user_id,
        actor_role=role,
        notes=data.notes,
    )
    summary = await notification_service.dispatch_status_change(
        db, result["collaboration"], result["old_status"], result["new_status"], sender
    )
    return StatusChangeResponse(
        collaboration=collaboration_to_read(result["collaboration"], role),
        old_status=result["old_status"],
        new_status=result["new_status"],
        notifications_sent=summary.sent,
        notifications_failed=summary.failed,
    )


@router.get(
    "/{collaboration_id:uuid}/history",
    response_model=list[CollaborationStatusHistoryRead],
)
def get_status_history(
    collaboration_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Status timeline, oldest first."""
    collaboration = load_collaboration(db, collaboration_id)
    check_collaboration_access(collaboration, user_id)
    return collaboration_status_service.list_status_history(db, collaboration.id)


@router.post("/{collaboration_id:uuid}/schedule", response_model=ScheduleResponse)
async def schedule_recording(
    collaboration_id: UUID,
    data: ScheduleRequest,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    sender: EmailSender = Depends(get_notification_sender),
):
    """Guest picks (or changes) the recording date."""
    collaboration = load_collaboration(db, collaboration_id)
    check_collaboration_access(collaboration, user_id, allowed_roles={CollaborationRole.GUEST})

    result = scheduling_service.schedule_recording(
        db,
        collaboration,
        collaboration.workspace,
        scheduled_date=data.scheduled_date,
        prep_date=data.prep_date,
        guest_user_id=user_id,
    )
    if result is not None:
        await notification_service.dispatch_status_change(
            db, result["collaboration"], result["old_status"], result["new_status"], sender
        )

    return ScheduleResponse(
        collaboration_id=collaboration.id,
        status=collaboration.status,
        scheduled_date=collaboration.scheduled_date,
        prep_date=collaboration.prep_date,
        reschedule_count=collaboration.reschedule_count,
        rescheduled=result is None,
    )

"""Dashboard endpoints - attention buckets per role."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from flowaborate.core.deps import get_current_user_id, get_db
from flowaborate.db.enums import CollaborationRole
from flowaborate.schemas.collaboration import HostDashboardResponse, RoleDashboardResponse
from flowaborate.services import collaboration_service, dashboard_service
from flowaborate.services.collaboration_exception_service import ExceptionThresholds

from .collaborations_shared import entry_to_item

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/host", response_model=HostDashboardResponse)
def host_dashboard(
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Exceptions first, then what the host must do, then what they are waiting on."""
    collaborations = collaboration_service.list_host_collaborations(db, user_id)
    dashboard = dashboard_service.classify_for_host(
        collaborations, thresholds=ExceptionThresholds.from_settings()
    )
    return HostDashboardResponse(
        exceptions=[entry_to_item(e) for e in dashboard.exceptions],
        my_actions=[entry_to_item(e) for e in dashboard.my_actions],
        waiting=[entry_to_item(e) for e in dashboard.waiting],
    )


@router.get("/{role}", response_model=RoleDashboardResponse)
def participant_dashboard(
    role: CollaborationRole,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Guest or editor view: collaborations needing my action vs waiting on others."""
    if role is CollaborationRole.GUEST:
        collaborations = collaboration_service.list_guest_collaborations(db, user_id)
    elif role is CollaborationRole.EDITOR:
        collaborations = collaboration_service.list_editor_collaborations(db, user_id)
    else:
        raise HTTPException(status_code=404, detail="Use /dashboard/host")

    actions, waiting = dashboard_service.classify_for_role(collaborations, role)
    return RoleDashboardResponse(
        actions=[entry_to_item(e) for e in actions],
        waiting=[entry_to_item(e) for e in waiting],
    )

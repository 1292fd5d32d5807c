"""Invite link routes: public preview and guest intake."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from flowaborate.core.deps import get_current_user_id, get_db
from flowaborate.core.status_definitions import get_status_label
from flowaborate.db.models import Collaboration
from flowaborate.schemas.collaboration import IntakeResponse, IntakeSubmit, InvitePreview
from flowaborate.services import notification_service, scheduling_service
from flowaborate.services.email_sender import EmailSender
from flowaborate.services.invite_service import get_collaboration_by_invite_token

from .collaborations_shared import get_notification_sender

router = APIRouter(prefix="/invites")


def _load_by_token(db: Session, token: str) -> Collaboration:
    collaboration = get_collaboration_by_invite_token(db, token)
    if not collaboration:
        raise HTTPException(status_code=404, detail="Invite not found")
    return collaboration


@router.get("/{token}", response_model=InvitePreview)
def preview_invite(token: str, db: Session = Depends(get_db)):
    """
    Public endpoint - no auth required.

    Returns just enough for the guest to recognise the invite before
    signing in.
    """
    collaboration = _load_by_token(db, token)
    host = collaboration.host
    return InvitePreview(
        collaboration_id=collaboration.id,
        workspace_name=collaboration.workspace.name,
        host_name=host.full_name if host else None,
        status=collaboration.status,
        status_label=get_status_label(collaboration.status),
        intake_completed=scheduling_service.is_intake_complete(collaboration.guest_profile),
    )


@router.post("/{token}/intake", response_model=IntakeResponse)
async def submit_intake(
    token: str,
    data: IntakeSubmit,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    sender: EmailSender = Depends(get_notification_sender),
):
    """Signed-in guest saves their profile; a populated bio completes intake."""
    collaboration = _load_by_token(db, token)
    profile, result = scheduling_service.complete_intake(
        db,
        collaboration,
        guest_user_id=user_id,
        name=data.name,
        email=data.email,
        bio=data.bio,
        topics=data.topics,
        links=data.links,
    )
    if result is not None:
        await notification_service.dispatch_status_change(
            db, result["collaboration"], result["old_status"], result["new_status"], sender
        )
    return IntakeResponse(
        collaboration_id=collaboration.id,
        guest_profile_id=profile.id,
        status=collaboration.status,
        status_changed=result is not None,
    )

"""Guest-driven operations: intake completion and recording (re)scheduling."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.orm import Session

from flowaborate.core.errors import (
    InvalidTransitionError,
    InviteAlreadyClaimedError,
    ReschedulePolicyError,
    SchedulingError,
    StaleDataConflictError,
)
from flowaborate.core.status_definitions import get_allowed_transition_values
from flowaborate.db.enums import CollaborationRole, CollaborationStatus
from flowaborate.db.models import Collaboration, GuestProfile, Workspace
from flowaborate.services import collaboration_status_service
from flowaborate.services.collaboration_exception_service import as_utc
from flowaborate.services.collaboration_status_service import StatusChangeResult

logger = logging.getLogger(__name__)


# =============================================================================
# Intake
# =============================================================================


def is_intake_complete(profile: GuestProfile | None, guest_user_id: UUID | None = None) -> bool:
    """A profile with a populated bio linked to the authenticated guest."""
    if profile is None or not (profile.bio or "").strip():
        return False
    if guest_user_id is not None and profile.user_id != guest_user_id:
        return False
    return profile.user_id is not None


def complete_intake(
    db: Session,
    collaboration: Collaboration,
    *,
    guest_user_id: UUID,
    name: str,
    email: str | None = None,
    bio: str | None = None,
    topics: list[str] | None = None,
    links: dict[str, str] | None = None,
    now: datetime | None = None,
) -> tuple[GuestProfile, StatusChangeResult | None]:
    """
    Save the guest's intake profile and, once it is complete, move the
    collaboration from invited to intake_completed.

    Returns (profile, status change or None when no transition happened).
    """
    profile = collaboration.guest_profile
    if profile is not None and profile.user_id is not None and profile.user_id != guest_user_id:
        raise InviteAlreadyClaimedError("This invite has already been accepted by another account")

    if profile is None:
        profile = GuestProfile(name=name)
        db.add(profile)
    profile.user_id = guest_user_id
    profile.name = name
    profile.email = email
    profile.bio = bio
    profile.topics = list(topics or [])
    profile.links = dict(links or {})
    db.flush()
    collaboration.guest_profile_id = profile.id
    db.commit()
    db.refresh(profile)

    if collaboration.status != CollaborationStatus.INVITED.value:
        return profile, None
    if not is_intake_complete(profile, guest_user_id):
        logger.info("Intake saved without bio for collaboration %s", collaboration.id)
        return profile, None

    result = collaboration_status_service.change_status(
        db,
        collaboration,
        CollaborationStatus.INTAKE_COMPLETED,
        user_id=guest_user_id,
        actor_role=CollaborationRole.GUEST,
        notes="Guest completed intake form",
        now=now,
        guest_flow=True,
    )
    return profile, result


# =============================================================================
# Scheduling
# =============================================================================


def check_reschedule_allowed(
    collaboration: Collaboration,
    workspace: Workspace,
    now: datetime | None = None,
) -> None:
    """Raise ReschedulePolicyError when the workspace policy forbids rescheduling."""
    now = as_utc(now) or datetime.now(timezone.utc)
    count = collaboration.reschedule_count or 0
    if count >= workspace.max_reschedules:
        raise ReschedulePolicyError(
            f"Maximum reschedules ({workspace.max_reschedules}) reached. Please contact the host."
        )
    scheduled_date = as_utc(collaboration.scheduled_date)
    cutoff = now + timedelta(hours=workspace.reschedule_cutoff_hours)
    if scheduled_date is not None and scheduled_date < cutoff:
        raise ReschedulePolicyError(
            f"Cannot reschedule within {workspace.reschedule_cutoff_hours} hours "
            "of the recording. Please contact the host."
        )


def schedule_recording(
    db: Session,
    collaboration: Collaboration,
    workspace: Workspace,
    *,
    scheduled_date: datetime,
    guest_user_id: UUID,
    prep_date: datetime | None = None,
    now: datetime | None = None,
) -> StatusChangeResult | None:
    """
    Schedule (intake_completed -> scheduled) or reschedule (scheduled,
    status unchanged) the recording.

    Returns the status change for a first scheduling, None for a reschedule.
    """
    now = as_utc(now) or datetime.now(timezone.utc)
    scheduled_date = as_utc(scheduled_date)
    prep_date = as_utc(prep_date)
    if scheduled_date <= now:
        raise SchedulingError("Scheduled date must be in the future")
    if prep_date is not None and prep_date >= scheduled_date:
        raise SchedulingError("Prep session must be before the recording")

    status = collaboration.status
    if status == CollaborationStatus.INTAKE_COMPLETED.value:
        return collaboration_status_service.change_status(
            db,
            collaboration,
            CollaborationStatus.SCHEDULED,
            user_id=guest_user_id,
            actor_role=CollaborationRole.GUEST,
            notes="Guest scheduled recording",
            now=now,
            extra_values={"scheduled_date": scheduled_date, "prep_date": prep_date},
            guest_flow=True,
        )

    if status != CollaborationStatus.SCHEDULED.value:
        raise InvalidTransitionError(
            str(status),
            CollaborationStatus.SCHEDULED.value,
            get_allowed_transition_values(status),
        )

    check_reschedule_allowed(collaboration, workspace, now)
    old_count = collaboration.reschedule_count or 0
    result = db.execute(
        update(Collaboration)
        .where(
            Collaboration.id == collaboration.id,
            Collaboration.status == CollaborationStatus.SCHEDULED.value,
            Collaboration.reschedule_count == old_count,
        )
        .values(
            scheduled_date=scheduled_date,
            prep_date=prep_date,
            reschedule_count=old_count + 1,
            updated_at=now,
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        db.rollback()
        raise StaleDataConflictError(collaboration.id, CollaborationStatus.SCHEDULED.value)
    db.commit()
    db.refresh(collaboration)
    logger.info(
        "Collaboration %s rescheduled (count=%s)", collaboration.id, collaboration.reschedule_count
    )
    return None

"""Collaboration status change helpers (validate + conditional write + history)."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TypedDict
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from flowaborate.core.errors import (
    InvalidTransitionError,
    SchedulingError,
    StaleDataConflictError,
    TransitionNotPermittedError,
)
from flowaborate.core.role_rules import can_role_set_status
from flowaborate.core.status_definitions import (
    get_allowed_transition_values,
    is_valid_transition,
    parse_status,
)
from flowaborate.core.structured_logging import build_log_context
from flowaborate.db.enums import CollaborationRole, CollaborationStatus
from flowaborate.db.models import Collaboration, CollaborationStatusHistory

logger = logging.getLogger(__name__)


class StatusChangeResult(TypedDict):
    """Result of a status change operation."""

    collaboration: Collaboration
    old_status: str
    new_status: str
    history_id: UUID


def validate_transition(
    current_status: str,
    new_status: CollaborationStatus,
    actor_role: CollaborationRole | str | None,
    *,
    guest_flow: bool = False,
) -> None:
    """Raise if the edge is not in the table or the actor may not drive it."""
    if not is_valid_transition(current_status, new_status):
        raise InvalidTransitionError(
            str(current_status),
            new_status.value,
            get_allowed_transition_values(current_status),
        )
    if not can_role_set_status(actor_role, new_status, guest_flow=guest_flow):
        role_value = actor_role.value if isinstance(actor_role, CollaborationRole) else actor_role
        raise TransitionNotPermittedError(role_value, new_status.value)


def change_status(
    db: Session,
    collaboration: Collaboration,
    new_status: CollaborationStatus | str,
    *,
    user_id: UUID | None,
    actor_role: CollaborationRole | str | None,
    notes: str | None = None,
    now: datetime | None = None,
    extra_values: dict[str, object] | None = None,
    guest_flow: bool = False,
) -> StatusChangeResult:
    """
    Move a collaboration to `new_status` and record history.

    The write is conditional on the status the caller read
    (UPDATE ... WHERE status = :old), so two concurrent changes cannot both
    pass the transition check. A lost race raises StaleDataConflictError.

    `guest_flow` is set only by the intake and scheduling services, which
    own the guest-driven edges. A move to scheduled must carry a
    `scheduled_date` in `extra_values`.

    Notifications are not sent here; callers dispatch them after this
    returns (the transition is durable regardless of delivery).
    """
    now = now or datetime.now(timezone.utc)
    target = parse_status(new_status, strict=True)
    old_status = collaboration.status

    validate_transition(old_status, target, actor_role, guest_flow=guest_flow)
    if target is CollaborationStatus.SCHEDULED and not (extra_values or {}).get("scheduled_date"):
        raise SchedulingError("A recording date is required to schedule")

    values: dict[str, object] = {"status": target.value, "updated_at": now}
    if target is CollaborationStatus.RECORDED and collaboration.recorded_date is None:
        values["recorded_date"] = now
    if target is CollaborationStatus.COMPLETED and collaboration.delivery_date is None:
        values["delivery_date"] = now
    if extra_values:
        values.update(extra_values)

    result = db.execute(
        update(Collaboration)
        .where(Collaboration.id == collaboration.id, Collaboration.status == old_status)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        db.rollback()
        logger.info(
            "Stale status change rejected",
            extra=build_log_context(user_id=user_id, collaboration_id=collaboration.id),
        )
        raise StaleDataConflictError(collaboration.id, str(old_status))

    history = CollaborationStatusHistory(
        collaboration_id=collaboration.id,
        old_status=old_status,
        new_status=target.value,
        changed_by_user_id=user_id,
        changed_at=now,
        notes=notes,
    )
    db.add(history)
    db.commit()
    db.refresh(collaboration)

    logger.info(
        "Collaboration status changed %s -> %s",
        old_status,
        target.value,
        extra=build_log_context(user_id=user_id, collaboration_id=collaboration.id),
    )
    return StatusChangeResult(
        collaboration=collaboration,
        old_status=str(old_status),
        new_status=target.value,
        history_id=history.id,
    )


def list_status_history(db: Session, collaboration_id: UUID) -> list[CollaborationStatusHistory]:
    """Status timeline, oldest first."""
    return list(
        db.execute(
            select(CollaborationStatusHistory)
            .where(CollaborationStatusHistory.collaboration_id == collaboration_id)
            .order_by(CollaborationStatusHistory.changed_at.asc())
        ).scalars()
    )

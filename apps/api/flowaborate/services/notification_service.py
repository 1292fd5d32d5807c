"""Outbound collaboration emails: recipient resolution, delivery log, status-change dispatch."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from flowaborate.core.errors import NotificationDispatchError
from flowaborate.core.structured_logging import build_log_context, mask_email
from flowaborate.db.enums import CollaborationRole, NotificationLogStatus, NotificationType
from flowaborate.db.models import Collaboration, NotificationLog, Profile
from flowaborate.services import email_service
from flowaborate.services.email_sender import EmailSender
from flowaborate.services.notification_policy import decide_notifications

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Recipient:
    role: CollaborationRole
    email: str | None
    name: str


@dataclass
class DispatchSummary:
    sent: int = 0
    skipped: int = 0
    failed: int = 0


# =============================================================================
# Recipients
# =============================================================================


def _guest_recipient(db: Session, collaboration: Collaboration) -> Recipient:
    guest = collaboration.guest_profile
    if guest is None:
        return Recipient(CollaborationRole.GUEST, None, "Guest")
    email = guest.email
    if not email and guest.user_id is not None:
        account = db.get(Profile, guest.user_id)
        email = account.email if account else None
    return Recipient(CollaborationRole.GUEST, email, guest.name or "Guest")


def _profile_recipient(role: CollaborationRole, profile: Profile | None, fallback: str) -> Recipient:
    if profile is None:
        return Recipient(role, None, fallback)
    return Recipient(role, profile.email, profile.full_name or fallback)


def resolve_recipient(
    db: Session,
    collaboration: Collaboration,
    role: CollaborationRole | str,
) -> Recipient:
    """Address and display name for the participant playing `role`."""
    role = CollaborationRole(role)
    if role is CollaborationRole.GUEST:
        return _guest_recipient(db, collaboration)
    if role is CollaborationRole.HOST:
        return _profile_recipient(role, collaboration.host, "Host")
    return _profile_recipient(role, collaboration.editor, "Editor")


def _counterpart(db: Session, collaboration: Collaboration, role: CollaborationRole) -> Recipient:
    # Host emails talk about the guest; everyone else hears about the host.
    if role is CollaborationRole.HOST:
        return _guest_recipient(db, collaboration)
    return resolve_recipient(db, collaboration, CollaborationRole.HOST)


# =============================================================================
# Delivery log
# =============================================================================


def record_attempt(
    db: Session,
    *,
    collaboration_id: UUID,
    notification_type: NotificationType,
    dedupe_key: str,
    recipient: Recipient,
    error: str | None = None,
    now: datetime | None = None,
) -> NotificationLog:
    """Persist one delivery attempt (sent when `error` is None)."""
    row = NotificationLog(
        collaboration_id=collaboration_id,
        notification_type=notification_type.value,
        dedupe_key=dedupe_key,
        recipient_role=recipient.role.value,
        recipient_email=recipient.email,
        status=(NotificationLogStatus.FAILED if error else NotificationLogStatus.SENT).value,
        error=error,
        sent_at=now or datetime.now(timezone.utc),
    )
    db.add(row)
    db.commit()
    return row


def last_sent_at(
    db: Session,
    collaboration_id: UUID,
    notification_type: NotificationType,
    dedupe_key: str,
) -> datetime | None:
    """Most recent successful send for this (collaboration, type, key), if any."""
    return db.execute(
        select(NotificationLog.sent_at)
        .where(
            NotificationLog.collaboration_id == collaboration_id,
            NotificationLog.notification_type == notification_type.value,
            NotificationLog.dedupe_key == dedupe_key,
            NotificationLog.status == NotificationLogStatus.SENT.value,
        )
        .order_by(NotificationLog.sent_at.desc())
        .limit(1)
    ).scalar_one_or_none()


async def send_logged(
    db: Session,
    sender: EmailSender,
    *,
    collaboration_id: UUID,
    notification_type: NotificationType,
    dedupe_key: str,
    recipient: Recipient,
    subject: str,
    html: str,
    now: datetime | None = None,
) -> bool:
    """
    Send one email and log the attempt. Returns True on success.

    NotificationDispatchError is recorded and swallowed; the caller only
    counts the outcome.
    """
    try:
        await sender.send(to_email=recipient.email, subject=subject, html=html)
    except NotificationDispatchError as exc:
        logger.warning(
            "Notification %s to %s failed: %s",
            notification_type.value,
            mask_email(recipient.email),
            exc,
            extra=build_log_context(collaboration_id=collaboration_id),
        )
        record_attempt(
            db,
            collaboration_id=collaboration_id,
            notification_type=notification_type,
            dedupe_key=dedupe_key,
            recipient=recipient,
            error=str(exc),
            now=now,
        )
        return False

    record_attempt(
        db,
        collaboration_id=collaboration_id,
        notification_type=notification_type,
        dedupe_key=dedupe_key,
        recipient=recipient,
        now=now,
    )
    return True


# =============================================================================
# Status change
# =============================================================================


async def dispatch_status_change(
    db: Session,
    collaboration: Collaboration,
    old_status: str,
    new_status: str,
    sender: EmailSender,
    now: datetime | None = None,
) -> DispatchSummary:
    """
    Email every role the trigger policy selects for this transition.

    Called after the status change has committed; delivery problems are
    counted, never raised.
    """
    summary = DispatchSummary()
    triggers = decide_notifications(old_status, new_status)
    if not triggers.has_any:
        return summary

    template = email_service.select_template(NotificationType.STATUS_CHANGE)
    data = email_service.build_status_change_data(
        collaboration_id=collaboration.id,
        old_status=old_status,
        new_status=new_status,
        scheduled_date=collaboration.scheduled_date,
    )
    workspace_name = collaboration.workspace.name if collaboration.workspace else ""
    dedupe_key = f"{old_status}->{new_status}"

    for role in triggers.roles():
        recipient = resolve_recipient(db, collaboration, role)
        if not recipient.email:
            logger.info(
                "No %s address for status change email",
                role.value,
                extra=build_log_context(collaboration_id=collaboration.id),
            )
            summary.skipped += 1
            continue

        variables = email_service.build_status_change_variables(
            data,
            role=role,
            recipient_name=recipient.name,
            counterpart_name=_counterpart(db, collaboration, role).name,
            workspace_name=workspace_name,
            scheduled_date=collaboration.scheduled_date,
        )
        subject, html = email_service.render_template(template.subject, template.body, variables)
        ok = await send_logged(
            db,
            sender,
            collaboration_id=collaboration.id,
            notification_type=NotificationType.STATUS_CHANGE,
            dedupe_key=dedupe_key,
            recipient=recipient,
            subject=subject,
            html=html,
            now=now,
        )
        if ok:
            summary.sent += 1
        else:
            summary.failed += 1

    logger.info(
        "Status change notifications %s -> %s: sent=%s skipped=%s failed=%s",
        old_status,
        new_status,
        summary.sent,
        summary.skipped,
        summary.failed,
        extra=build_log_context(collaboration_id=collaboration.id),
    )
    return summary

"""
Scheduled sweep: recording reminders and host exception alerts.

Planning (what is due) is separated from delivery (dedupe, send, log).
Each item is sent independently; one failure never aborts the run and
failed sends are not retried within the same run.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy import and_, or_, select
from sqlalchemy.orm import Session

from flowaborate.core.config import Settings, settings
from flowaborate.db.enums import (
    CollaborationRole,
    CollaborationStatus,
    ExceptionType,
    NotificationType,
    ReminderWindow,
    SweepDedupeMode,
)
from flowaborate.db.models import Collaboration
from flowaborate.services import email_service, notification_service
from flowaborate.services.collaboration_exception_service import (
    STALLABLE_STATUSES,
    ExceptionThresholds,
    as_utc,
    detect_exception,
)
from flowaborate.services.email_sender import EmailSender, get_email_sender

logger = logging.getLogger(__name__)

# Lead time -> [start, end) offset from now.
REMINDER_WINDOWS: dict[ReminderWindow, tuple[timedelta, timedelta]] = {
    ReminderWindow.DAY_BEFORE: (timedelta(hours=24), timedelta(hours=25)),
    ReminderWindow.HOUR_BEFORE: (timedelta(hours=1), timedelta(hours=2)),
}

EXCEPTION_NOTIFICATION_TYPES: dict[ExceptionType, NotificationType] = {
    ExceptionType.NO_SHOW: NotificationType.NO_SHOW,
    ExceptionType.STALLED: NotificationType.STALLED,
    ExceptionType.MISSED_DEADLINE: NotificationType.MISSED_DEADLINE,
}

SUMMARY_KINDS = ("reminder_24h", "reminder_1h", "no_show", "stalled", "missed_deadline")


class SweepAlreadyRunning(RuntimeError):
    """Another sweep is in progress in this process."""


_sweep_lock = threading.Lock()


@dataclass(frozen=True)
class SweepItem:
    """One email the sweep intends to send."""

    notification_type: NotificationType
    collaboration: Collaboration
    recipient_role: CollaborationRole
    dedupe_key: str
    window: ReminderWindow | None = None
    details: str = ""

    @property
    def kind(self) -> str:
        if self.window is not None:
            return f"reminder_{self.window.value}"
        return self.notification_type.value


@dataclass
class KindCounts:
    sent: int = 0
    skipped: int = 0
    failed: int = 0


@dataclass
class SweepSummary:
    collaborations_with_items: int = 0
    counts: dict[str, KindCounts] = field(
        default_factory=lambda: {kind: KindCounts() for kind in SUMMARY_KINDS}
    )
    errors: list[str] = field(default_factory=list)

    def count(self, kind: str) -> KindCounts:
        return self.counts.setdefault(kind, KindCounts())

    @property
    def sent(self) -> int:
        return sum(c.sent for c in self.counts.values())

    @property
    def skipped(self) -> int:
        return sum(c.skipped for c in self.counts.values())

    @property
    def failed(self) -> int:
        return sum(c.failed for c in self.counts.values())

    def to_dict(self) -> dict[str, Any]:
        return {
            "collaborations_with_items": self.collaborations_with_items,
            "sent": self.sent,
            "skipped": self.skipped,
            "failed": self.failed,
            "by_kind": {
                kind: {"sent": c.sent, "skipped": c.skipped, "failed": c.failed}
                for kind, c in self.counts.items()
            },
            "errors": list(self.errors),
        }


# =============================================================================
# Planning
# =============================================================================


def _reminder_items(db: Session, now: datetime) -> list[SweepItem]:
    items: list[SweepItem] = []
    for window, (start, end) in REMINDER_WINDOWS.items():
        rows = db.execute(
            select(Collaboration).where(
                Collaboration.status == CollaborationStatus.SCHEDULED.value,
                Collaboration.scheduled_date >= now + start,
                Collaboration.scheduled_date < now + end,
            )
        ).scalars()
        for collaboration in rows:
            scheduled_date = as_utc(collaboration.scheduled_date)
            items.append(
                SweepItem(
                    notification_type=NotificationType.REMINDER,
                    collaboration=collaboration,
                    recipient_role=CollaborationRole.GUEST,
                    dedupe_key=f"{window.value}:{scheduled_date.isoformat()}",
                    window=window,
                )
            )
    return items


def _episode_key(exception_type: ExceptionType, collaboration: Collaboration) -> str:
    """Identifies one occurrence of a condition; changes when the underlying timestamp does."""
    anchor = {
        ExceptionType.NO_SHOW: collaboration.scheduled_date,
        ExceptionType.STALLED: collaboration.updated_at,
        ExceptionType.MISSED_DEADLINE: collaboration.recorded_date,
    }[exception_type]
    anchor = as_utc(anchor)
    return f"{exception_type.value}:{anchor.isoformat() if anchor else ''}"


def _exception_candidates(
    db: Session,
    now: datetime,
    thresholds: ExceptionThresholds,
    include_missed_deadline: bool,
) -> list[Collaboration]:
    conditions = [
        and_(
            Collaboration.status == CollaborationStatus.SCHEDULED.value,
            Collaboration.scheduled_date < now - thresholds.no_show,
        ),
        and_(
            Collaboration.status.in_([s.value for s in STALLABLE_STATUSES]),
            Collaboration.updated_at < now - thresholds.stalled,
        ),
    ]
    if include_missed_deadline:
        conditions.append(
            and_(
                Collaboration.status == CollaborationStatus.EDITING.value,
                Collaboration.recorded_date < now - thresholds.editing_deadline,
            )
        )
    return list(db.execute(select(Collaboration).where(or_(*conditions))).scalars())


def plan_sweep(
    db: Session,
    now: datetime | None = None,
    config: Settings | None = None,
) -> list[SweepItem]:
    """
    Everything due at `now`, before dedupe.

    Exception rows are narrowed in SQL and confirmed with detect_exception
    so the sweep and the dashboards agree on what counts as an exception.
    """
    now = as_utc(now) or datetime.now(timezone.utc)
    config = config or settings
    thresholds = ExceptionThresholds.from_settings(config)

    items = _reminder_items(db, now)
    for collaboration in _exception_candidates(
        db, now, thresholds, config.SWEEP_INCLUDE_MISSED_DEADLINE
    ):
        exception = detect_exception(collaboration, now, thresholds)
        if exception is None:
            continue
        items.append(
            SweepItem(
                notification_type=EXCEPTION_NOTIFICATION_TYPES[exception.type],
                collaboration=collaboration,
                recipient_role=CollaborationRole.HOST,
                dedupe_key=_episode_key(exception.type, collaboration),
                details=exception.message,
            )
        )
    return items


# =============================================================================
# Delivery
# =============================================================================


def is_duplicate(
    db: Session,
    item: SweepItem,
    now: datetime,
    config: Settings | None = None,
) -> bool:
    """
    Whether `item` was already delivered.

    Reminders go out once per (collaboration, window, scheduled_date).
    Exception alerts follow SWEEP_DEDUPE_MODE.
    """
    config = config or settings
    last = notification_service.last_sent_at(
        db, item.collaboration.id, item.notification_type, item.dedupe_key
    )
    if item.notification_type is NotificationType.REMINDER:
        return last is not None

    mode = SweepDedupeMode(config.SWEEP_DEDUPE_MODE)
    if mode is SweepDedupeMode.NONE or last is None:
        return False
    if mode is SweepDedupeMode.ONCE:
        return True
    return as_utc(last) > now - timedelta(hours=config.SWEEP_DEDUPE_COOLDOWN_HOURS)


def _render(db: Session, item: SweepItem) -> tuple[str, str]:
    collaboration = item.collaboration
    template = email_service.select_template(item.notification_type)
    workspace_name = collaboration.workspace.name if collaboration.workspace else ""
    guest = notification_service.resolve_recipient(db, collaboration, CollaborationRole.GUEST)
    host = notification_service.resolve_recipient(db, collaboration, CollaborationRole.HOST)

    if item.window is not None:
        variables = email_service.build_reminder_variables(
            window=item.window,
            guest_name=guest.name,
            host_name=host.name,
            workspace_name=workspace_name,
            scheduled_date=as_utc(collaboration.scheduled_date),
        )
    else:
        variables = email_service.build_exception_variables(
            collaboration_id=collaboration.id,
            host_name=host.name,
            guest_name=guest.name,
            workspace_name=workspace_name,
            details=item.details,
        )
    return email_service.render_template(template.subject, template.body, variables)


async def _deliver(
    db: Session,
    sender: EmailSender,
    item: SweepItem,
    now: datetime,
    config: Settings,
    summary: SweepSummary,
) -> None:
    counts = summary.count(item.kind)
    if is_duplicate(db, item, now, config):
        counts.skipped += 1
        return

    recipient = notification_service.resolve_recipient(db, item.collaboration, item.recipient_role)
    if not recipient.email:
        counts.skipped += 1
        return

    subject, html = _render(db, item)
    ok = await notification_service.send_logged(
        db,
        sender,
        collaboration_id=item.collaboration.id,
        notification_type=item.notification_type,
        dedupe_key=item.dedupe_key,
        recipient=recipient,
        subject=subject,
        html=html,
        now=now,
    )
    if ok:
        counts.sent += 1
    else:
        counts.failed += 1
        summary.errors.append(f"{item.kind} for collaboration {item.collaboration.id}: send failed")


async def run_exception_sweep(
    db: Session,
    sender: EmailSender | None = None,
    now: datetime | None = None,
    config: Settings | None = None,
) -> SweepSummary:
    """
    Run one sweep. Raises SweepAlreadyRunning if a sweep is in progress.

    Returns per-kind sent/skipped/failed counts plus error strings.
    """
    if not _sweep_lock.acquire(blocking=False):
        raise SweepAlreadyRunning("Exception sweep already running")
    try:
        now = as_utc(now) or datetime.now(timezone.utc)
        config = config or settings
        sender = sender or get_email_sender()
        summary = SweepSummary()

        items = plan_sweep(db, now, config)
        summary.collaborations_with_items = len({item.collaboration.id for item in items})

        for item in items:
            try:
                await _deliver(db, sender, item, now, config, summary)
            except Exception as e:
                db.rollback()
                summary.count(item.kind).failed += 1
                summary.errors.append(
                    f"{item.kind} for collaboration {item.collaboration.id}: {e}"
                )
                logger.exception(
                    "Sweep item failed (%s, collaboration %s)", item.kind, item.collaboration.id
                )

        logger.info(
            "Exception sweep complete: sent=%s skipped=%s failed=%s",
            summary.sent,
            summary.skipped,
            summary.failed,
        )
        return summary
    finally:
        _sweep_lock.release()

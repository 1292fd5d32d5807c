"""Time-based exception detection (no-show, stalled, missed editing deadline).

Independent of the transition table: looks only at the current status and
timestamps relative to `now`. At most one exception is reported per
collaboration, in fixed precedence order.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from flowaborate.core.config import Settings, settings
from flowaborate.core.status_definitions import parse_status
from flowaborate.db.enums import CollaborationStatus, ExceptionSeverity, ExceptionType


@dataclass(frozen=True)
class ExceptionThresholds:
    no_show: timedelta = timedelta(hours=24)
    stalled: timedelta = timedelta(days=7)
    editing_deadline: timedelta = timedelta(days=14)

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> "ExceptionThresholds":
        config = config or settings
        return cls(
            no_show=timedelta(hours=config.NO_SHOW_THRESHOLD_HOURS),
            stalled=timedelta(days=config.STALLED_THRESHOLD_DAYS),
            editing_deadline=timedelta(days=config.EDITING_DEADLINE_DAYS),
        )


DEFAULT_THRESHOLDS = ExceptionThresholds()

STALLABLE_STATUSES = frozenset(
    {CollaborationStatus.INVITED, CollaborationStatus.INTAKE_COMPLETED}
)


@dataclass(frozen=True)
class CollaborationException:
    type: ExceptionType
    message: str
    severity: ExceptionSeverity


def as_utc(value: datetime | None) -> datetime | None:
    """Treat naive datetimes from the store as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _field(collaboration: Any, name: str) -> Any:
    if isinstance(collaboration, Mapping):
        return collaboration.get(name)
    return getattr(collaboration, name, None)


def _whole_days(delta: timedelta) -> int:
    return delta // timedelta(days=1)


def detect_exception(
    collaboration: Any,
    now: datetime | None = None,
    thresholds: ExceptionThresholds | None = None,
) -> CollaborationException | None:
    """
    Return the first matching exception, or None.

    Precedence: no_show, stalled, missed_deadline. Unknown statuses fail
    closed (None); parse_status logs the defect.
    """
    now = as_utc(now) or datetime.now(timezone.utc)
    thresholds = thresholds or DEFAULT_THRESHOLDS
    status = parse_status(_field(collaboration, "status"))
    if status is None:
        return None

    scheduled_date = as_utc(_field(collaboration, "scheduled_date"))
    if (
        status is CollaborationStatus.SCHEDULED
        and scheduled_date is not None
        and scheduled_date < now
        and now - scheduled_date > thresholds.no_show
    ):
        return CollaborationException(
            type=ExceptionType.NO_SHOW,
            message=(
                f"Recording was scheduled for {scheduled_date:%b %d, %Y %H:%M} UTC "
                "but was never marked as recorded"
            ),
            severity=ExceptionSeverity.ERROR,
        )

    updated_at = as_utc(_field(collaboration, "updated_at"))
    if (
        status in STALLABLE_STATUSES
        and updated_at is not None
        and now - updated_at > thresholds.stalled
    ):
        days = _whole_days(now - updated_at)
        return CollaborationException(
            type=ExceptionType.STALLED,
            message=f"No activity for {days} days",
            severity=ExceptionSeverity.WARNING,
        )

    recorded_date = as_utc(_field(collaboration, "recorded_date"))
    if (
        status is CollaborationStatus.EDITING
        and recorded_date is not None
        and now - recorded_date > thresholds.editing_deadline
    ):
        days = _whole_days(now - recorded_date)
        return CollaborationException(
            type=ExceptionType.MISSED_DEADLINE,
            message=f"Editing overdue: recorded {days} days ago",
            severity=ExceptionSeverity.WARNING,
        )

    return None

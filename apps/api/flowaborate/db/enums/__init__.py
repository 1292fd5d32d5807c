"""Enum definitions for application constants."""

from flowaborate.db.enums.collaborations import (
    CollaborationRole,
    CollaborationStatus,
    ExceptionSeverity,
    ExceptionType,
    ResponsibleParty,
    TaskPhase,
)
from flowaborate.db.enums.notifications import (
    NotificationLogStatus,
    NotificationType,
    ReminderWindow,
    SweepDedupeMode,
)

DEFAULT_COLLABORATION_STATUS = CollaborationStatus.INVITED

__all__ = [
    "CollaborationRole",
    "CollaborationStatus",
    "DEFAULT_COLLABORATION_STATUS",
    "ExceptionSeverity",
    "ExceptionType",
    "NotificationLogStatus",
    "NotificationType",
    "ReminderWindow",
    "ResponsibleParty",
    "SweepDedupeMode",
    "TaskPhase",
]

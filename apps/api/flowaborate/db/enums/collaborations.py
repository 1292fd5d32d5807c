"""Collaboration-related enums."""

from enum import Enum


class CollaborationStatus(str, Enum):
    """
    Collaboration lifecycle.

        invited → intake_completed → scheduled → recorded
        → editing → ready → completed

    cancelled is reachable from every non-terminal status.
    completed and cancelled are terminal.
    """

    INVITED = "invited"
    INTAKE_COMPLETED = "intake_completed"
    SCHEDULED = "scheduled"
    RECORDED = "recorded"
    EDITING = "editing"
    READY = "ready"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @classmethod
    def has_value(cls, value: str) -> bool:
        """Check if value is a valid status."""
        return value in cls._value2member_map_

    @classmethod
    def terminal(cls) -> frozenset["CollaborationStatus"]:
        return frozenset({cls.COMPLETED, cls.CANCELLED})


class CollaborationRole(str, Enum):
    """Participant roles within a single collaboration."""

    HOST = "host"
    GUEST = "guest"
    EDITOR = "editor"


class ResponsibleParty(str, Enum):
    """Who must act next. NONE for terminal (or unreadable) statuses."""

    GUEST = "guest"
    HOST = "host"
    EDITOR = "editor"
    NONE = "none"


class ExceptionType(str, Enum):
    """Time-based anomalies surfaced on the host's attention list."""

    STALLED = "stalled"
    NO_SHOW = "no_show"
    MISSED_DEADLINE = "missed_deadline"


class ExceptionSeverity(str, Enum):
    WARNING = "warning"
    ERROR = "error"


class TaskPhase(str, Enum):
    """Default checklist templates: before the recording and after it."""

    PREP = "prep"
    POST = "post"

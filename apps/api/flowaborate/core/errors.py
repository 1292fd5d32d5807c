"""Domain errors for collaboration workflow operations.

All errors subclass ValueError so callers that only distinguish
"bad request" from "server fault" keep working; routers map the
specific classes to HTTP status codes.
"""

from __future__ import annotations

from uuid import UUID


class CollaborationError(ValueError):
    """Base class for collaboration workflow errors."""


class UnknownStatusError(CollaborationError):
    """A status value outside the enumeration crossed a trust boundary."""

    def __init__(self, value: object):
        super().__init__(f"Unknown collaboration status: {value!r}")
        self.value = value


class InvalidTransitionError(CollaborationError):
    """Attempted status change is not an edge of the transition table."""

    def __init__(self, from_status: str, to_status: str, allowed: list[str]):
        if allowed:
            reason = f"allowed next statuses: {', '.join(allowed)}"
        else:
            reason = f"no transitions allowed from '{from_status}'"
        super().__init__(f"Cannot change status from '{from_status}' to '{to_status}' ({reason})")
        self.from_status = from_status
        self.to_status = to_status
        self.allowed = allowed


class TransitionNotPermittedError(CollaborationError):
    """The acting participant may not drive this transition."""

    def __init__(self, role: str | None, to_status: str):
        super().__init__(f"Role '{role or 'none'}' cannot set status to '{to_status}'")
        self.role = role
        self.to_status = to_status


class StaleDataConflictError(CollaborationError):
    """Concurrent modification detected by the conditional status update.

    Retryable: reload the collaboration and re-apply.
    """

    retryable = True

    def __init__(self, collaboration_id: UUID, expected_status: str):
        super().__init__(
            f"Collaboration {collaboration_id} changed concurrently "
            f"(expected status '{expected_status}'); reload and retry"
        )
        self.collaboration_id = collaboration_id
        self.expected_status = expected_status


class SchedulingError(CollaborationError):
    """Requested recording time is not acceptable."""


class ReschedulePolicyError(SchedulingError):
    """Workspace reschedule policy forbids this scheduling change."""


class InviteAlreadyClaimedError(CollaborationError):
    """The invite's guest profile belongs to a different account."""


class NotificationDispatchError(Exception):
    """A single outbound email failed. Always handled by the dispatch layer."""

    def __init__(self, message: str, *, to_email: str | None = None):
        super().__init__(message)
        self.to_email = to_email


class TaskNotPermittedError(CollaborationError):
    """The acting participant may not update this task."""

    def __init__(self, role: str, assigned_role: str):
        super().__init__(f"Role '{role}' cannot update a task assigned to '{assigned_role}'")
        self.role = role
        self.assigned_role = assigned_role

"""Role-scoped "what do I do next" copy for a collaboration.

Pure function of (status, role). Whether the viewer has an action is
decided by resolve_responsibility(); this module only adds the richer
copy each role sees.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from flowaborate.core.status_definitions import TERMINAL_STATUSES, parse_status
from flowaborate.db.enums import CollaborationRole, CollaborationStatus
from flowaborate.services.responsibility_service import resolve_responsibility


@dataclass(frozen=True)
class RoleAction:
    has_action: bool
    title: str | None = None
    description: str | None = None
    waiting_on_label: str | None = None


NO_ACTION = RoleAction(has_action=False)

# (role, status) -> (title, description). Only pairs where the role is
# the responsible party appear here.
ACTION_COPY: dict[tuple[CollaborationRole, CollaborationStatus], tuple[str, str]] = {
    (CollaborationRole.GUEST, CollaborationStatus.INVITED): (
        "Complete Your Profile",
        "Fill out the intake form so your host can prepare for your conversation.",
    ),
    (CollaborationRole.GUEST, CollaborationStatus.INTAKE_COMPLETED): (
        "Schedule Your Recording",
        "Pick a date and time that works for your recording session.",
    ),
    (CollaborationRole.HOST, CollaborationStatus.SCHEDULED): (
        "Complete the Recording",
        "Record the session, then mark the collaboration as recorded.",
    ),
    (CollaborationRole.HOST, CollaborationStatus.READY): (
        "Publish Content",
        "Editing is finished. Review the final cut and publish it.",
    ),
    (CollaborationRole.EDITOR, CollaborationStatus.RECORDED): (
        "Start Editing",
        "A new recording is available. Begin editing when you're ready.",
    ),
    (CollaborationRole.EDITOR, CollaborationStatus.EDITING): (
        "Finish Editing",
        "Wrap up the edit and mark the content as ready for review.",
    ),
}

WAITING_LABELS: dict[CollaborationStatus, str] = {
    CollaborationStatus.INVITED: "Waiting on guest to complete intake",
    CollaborationStatus.INTAKE_COMPLETED: "Waiting on guest to schedule recording",
    CollaborationStatus.SCHEDULED: "Waiting on host to complete recording",
    CollaborationStatus.RECORDED: "Waiting on editor to begin editing",
    CollaborationStatus.EDITING: "Waiting on editor to complete editing",
    CollaborationStatus.READY: "Waiting on host to publish content",
}

# Hosts see which of the two guest steps is outstanding.
HOST_WAITING_LABELS: dict[CollaborationStatus, str] = {
    CollaborationStatus.INVITED: "Waiting on guest to accept the invite and complete intake",
    CollaborationStatus.INTAKE_COMPLETED: "Intake received. Waiting on guest to pick a recording date",
}


def _status_of(collaboration: Any) -> Any:
    if isinstance(collaboration, Mapping):
        return collaboration.get("status")
    return getattr(collaboration, "status", None)


def resolve_role_action(collaboration: Any, role: CollaborationRole | str) -> RoleAction:
    """
    Decide what `role` sees for this collaboration.

    - has_action iff the role is the responsible party for the status
    - otherwise, for non-terminal statuses, a waiting-on label
    - terminal or unreadable statuses: no action, nothing to wait for
    """
    role = CollaborationRole(role)
    status = parse_status(_status_of(collaboration))
    if status is None or status in TERMINAL_STATUSES:
        return NO_ACTION

    responsibility = resolve_responsibility(status)
    if responsibility.responsible_party.value == role.value:
        title, description = ACTION_COPY.get(
            (role, status), (responsibility.action, responsibility.action)
        )
        return RoleAction(has_action=True, title=title, description=description)

    if role is CollaborationRole.HOST and status in HOST_WAITING_LABELS:
        return RoleAction(has_action=False, waiting_on_label=HOST_WAITING_LABELS[status])
    return RoleAction(has_action=False, waiting_on_label=WAITING_LABELS[status])

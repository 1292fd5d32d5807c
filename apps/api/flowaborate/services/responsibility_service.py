"""Who must act next on a collaboration.

resolve_responsibility() is the single authoritative answer to "who are we
waiting on". Badges, dashboards, role-scoped copy, and the notification
policy all go through it.
"""

from __future__ import annotations

from dataclasses import dataclass

from flowaborate.core.status_definitions import parse_status
from flowaborate.db.enums import CollaborationStatus, ResponsibleParty


@dataclass(frozen=True)
class Responsibility:
    responsible_party: ResponsibleParty
    label: str
    action: str


_RESPONSIBILITY: dict[CollaborationStatus, Responsibility] = {
    CollaborationStatus.INVITED: Responsibility(
        ResponsibleParty.GUEST, "Guest", "Complete intake form"
    ),
    CollaborationStatus.INTAKE_COMPLETED: Responsibility(
        ResponsibleParty.GUEST, "Guest", "Schedule recording"
    ),
    CollaborationStatus.SCHEDULED: Responsibility(
        ResponsibleParty.HOST, "Host", "Complete recording"
    ),
    CollaborationStatus.RECORDED: Responsibility(
        ResponsibleParty.EDITOR, "Editor", "Begin editing"
    ),
    CollaborationStatus.EDITING: Responsibility(
        ResponsibleParty.EDITOR, "Editor", "Finish editing"
    ),
    CollaborationStatus.READY: Responsibility(
        ResponsibleParty.HOST, "Host", "Publish content"
    ),
    CollaborationStatus.COMPLETED: Responsibility(
        ResponsibleParty.NONE, "Complete", "All done"
    ),
    CollaborationStatus.CANCELLED: Responsibility(
        ResponsibleParty.NONE, "Cancelled", "No action needed"
    ),
}

UNKNOWN_RESPONSIBILITY = Responsibility(ResponsibleParty.NONE, "Unknown", "No action needed")


def resolve_responsibility(status: CollaborationStatus | str | None) -> Responsibility:
    """
    Map a status to the party who must act next.

    Total: unknown values fail closed to UNKNOWN_RESPONSIBILITY (the
    defect is logged by parse_status) instead of raising.
    """
    parsed = parse_status(status)
    if parsed is None:
        return UNKNOWN_RESPONSIBILITY
    return _RESPONSIBILITY[parsed]


def get_next_action_for_role(status: CollaborationStatus | str | None, role: str) -> str | None:
    """The bare action text when `role` is the responsible party, else None."""
    info = resolve_responsibility(status)
    if info.responsible_party.value == role:
        return info.action
    return None

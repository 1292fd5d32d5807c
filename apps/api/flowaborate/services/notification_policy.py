"""Which roles get a status-change email for an old -> new status pair."""

from __future__ import annotations

from dataclasses import dataclass

from flowaborate.core.status_definitions import TERMINAL_STATUSES, parse_status
from flowaborate.db.enums import CollaborationRole, CollaborationStatus, ResponsibleParty
from flowaborate.services.responsibility_service import resolve_responsibility

# Guest hears about progress even when there is nothing for them to do.
GUEST_INTEREST_STATUSES = frozenset(
    {CollaborationStatus.RECORDED, CollaborationStatus.READY, CollaborationStatus.COMPLETED}
)
# Host follows the guest's early steps.
HOST_INTEREST_STATUSES = frozenset(
    {CollaborationStatus.INTAKE_COMPLETED, CollaborationStatus.SCHEDULED}
)


@dataclass(frozen=True)
class NotificationTriggers:
    notify_guest: bool = False
    notify_host: bool = False
    notify_editor: bool = False

    def roles(self) -> list[CollaborationRole]:
        """Roles to notify, one entry per role (flags are ORed, never duplicated)."""
        roles: list[CollaborationRole] = []
        if self.notify_guest:
            roles.append(CollaborationRole.GUEST)
        if self.notify_host:
            roles.append(CollaborationRole.HOST)
        if self.notify_editor:
            roles.append(CollaborationRole.EDITOR)
        return roles

    @property
    def has_any(self) -> bool:
        return self.notify_guest or self.notify_host or self.notify_editor


NO_NOTIFICATIONS = NotificationTriggers()


def decide_notifications(
    old_status: CollaborationStatus | str | None,
    new_status: CollaborationStatus | str | None,
) -> NotificationTriggers:
    """
    Base rule: notify whoever must act on the new status. Overrides add the
    guest for progress milestones and the host for guest progress and for
    ready. No notifications for no-ops, unknown statuses, or when the old
    status was already terminal.
    """
    old = parse_status(old_status)
    new = parse_status(new_status)
    if old is None or new is None or old == new or old in TERMINAL_STATUSES:
        return NO_NOTIFICATIONS

    responsible = resolve_responsibility(new).responsible_party
    notify_guest = responsible is ResponsibleParty.GUEST
    notify_host = responsible is ResponsibleParty.HOST
    notify_editor = responsible is ResponsibleParty.EDITOR

    if new in GUEST_INTEREST_STATUSES:
        notify_guest = True
    if new in HOST_INTEREST_STATUSES:
        notify_host = True
    if new is CollaborationStatus.READY:
        notify_host = True

    return NotificationTriggers(
        notify_guest=notify_guest,
        notify_host=notify_host,
        notify_editor=notify_editor,
    )

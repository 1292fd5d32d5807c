"""Dashboard buckets: what needs attention, what is mine to do, what I am waiting on."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable

from flowaborate.core.status_definitions import requires_action
from flowaborate.db.enums import CollaborationRole, ResponsibleParty
from flowaborate.services.collaboration_exception_service import (
    CollaborationException,
    ExceptionThresholds,
    detect_exception,
)
from flowaborate.services.responsibility_service import Responsibility, resolve_responsibility
from flowaborate.services.role_action_service import RoleAction, resolve_role_action


@dataclass(frozen=True)
class DashboardEntry:
    collaboration: Any
    responsibility: Responsibility
    role_action: RoleAction
    exception: CollaborationException | None = None


@dataclass
class HostDashboard:
    exceptions: list[DashboardEntry] = field(default_factory=list)
    my_actions: list[DashboardEntry] = field(default_factory=list)
    waiting: list[DashboardEntry] = field(default_factory=list)


def _entry(collaboration: Any, role: CollaborationRole, exception=None) -> DashboardEntry:
    return DashboardEntry(
        collaboration=collaboration,
        responsibility=resolve_responsibility(collaboration.status),
        role_action=resolve_role_action(collaboration, role),
        exception=exception,
    )


def classify_for_host(
    collaborations: Iterable[Any],
    now: datetime | None = None,
    thresholds: ExceptionThresholds | None = None,
) -> HostDashboard:
    """
    Split a host's collaborations into exceptions, host actions and waiting.

    Each collaboration lands in at most one bucket (exceptions first);
    terminal and unknown ones land nowhere. Input order is preserved within a bucket.
    """
    dashboard = HostDashboard()
    for collaboration in collaborations:
        exception = detect_exception(collaboration, now, thresholds)
        if exception is not None:
            dashboard.exceptions.append(_entry(collaboration, CollaborationRole.HOST, exception))
            continue
        if not requires_action(collaboration.status):
            continue
        entry = _entry(collaboration, CollaborationRole.HOST)
        if entry.responsibility.responsible_party is ResponsibleParty.HOST:
            dashboard.my_actions.append(entry)
        else:
            dashboard.waiting.append(entry)
    return dashboard


def classify_for_role(
    collaborations: Iterable[Any],
    role: CollaborationRole,
) -> tuple[list[DashboardEntry], list[DashboardEntry]]:
    """(actions, waiting) for a guest or editor view; only collaborations still in flight count."""
    actions: list[DashboardEntry] = []
    waiting: list[DashboardEntry] = []
    for collaboration in collaborations:
        if not requires_action(collaboration.status):
            continue
        entry = _entry(collaboration, role)
        if entry.role_action.has_action:
            actions.append(entry)
        else:
            waiting.append(entry)
    return actions, waiting

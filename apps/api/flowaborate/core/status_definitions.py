"""Collaboration status registry and transition table.

This is the only definition of status labels, lifecycle order, and legal
status edges. UI payloads, the notification policy, and the scheduled
sweep all import from here.
"""

from __future__ import annotations

import logging

from flowaborate.core.errors import UnknownStatusError
from flowaborate.db.enums import CollaborationStatus

logger = logging.getLogger(__name__)


STATUS_ORDER: tuple[CollaborationStatus, ...] = (
    CollaborationStatus.INVITED,
    CollaborationStatus.INTAKE_COMPLETED,
    CollaborationStatus.SCHEDULED,
    CollaborationStatus.RECORDED,
    CollaborationStatus.EDITING,
    CollaborationStatus.READY,
    CollaborationStatus.COMPLETED,
    CollaborationStatus.CANCELLED,
)

STATUS_LABELS: dict[CollaborationStatus, str] = {
    CollaborationStatus.INVITED: "Invited",
    CollaborationStatus.INTAKE_COMPLETED: "Intake Completed",
    CollaborationStatus.SCHEDULED: "Scheduled",
    CollaborationStatus.RECORDED: "Recorded",
    CollaborationStatus.EDITING: "Editing",
    CollaborationStatus.READY: "Ready",
    CollaborationStatus.COMPLETED: "Completed",
    CollaborationStatus.CANCELLED: "Cancelled",
}

ALLOWED_TRANSITIONS: dict[CollaborationStatus, frozenset[CollaborationStatus]] = {
    CollaborationStatus.INVITED: frozenset(
        {CollaborationStatus.INTAKE_COMPLETED, CollaborationStatus.CANCELLED}
    ),
    CollaborationStatus.INTAKE_COMPLETED: frozenset(
        {CollaborationStatus.SCHEDULED, CollaborationStatus.CANCELLED}
    ),
    CollaborationStatus.SCHEDULED: frozenset(
        {CollaborationStatus.RECORDED, CollaborationStatus.CANCELLED}
    ),
    CollaborationStatus.RECORDED: frozenset(
        {CollaborationStatus.EDITING, CollaborationStatus.CANCELLED}
    ),
    CollaborationStatus.EDITING: frozenset(
        {CollaborationStatus.READY, CollaborationStatus.CANCELLED}
    ),
    CollaborationStatus.READY: frozenset(
        {CollaborationStatus.COMPLETED, CollaborationStatus.CANCELLED}
    ),
    CollaborationStatus.COMPLETED: frozenset(),
    CollaborationStatus.CANCELLED: frozenset(),
}

TERMINAL_STATUSES = CollaborationStatus.terminal()


def parse_status(value: object, *, strict: bool = False) -> CollaborationStatus | None:
    """
    Coerce a raw (persisted or request) value into a CollaborationStatus.

    Lenient mode returns None for unknown values and logs the data-integrity
    defect; strict mode raises UnknownStatusError.
    """
    if isinstance(value, CollaborationStatus):
        return value
    if isinstance(value, str) and CollaborationStatus.has_value(value):
        return CollaborationStatus(value)
    if strict:
        raise UnknownStatusError(value)
    logger.warning("Unknown collaboration status encountered: %r", value)
    return None


def _sorted(statuses: frozenset[CollaborationStatus]) -> list[CollaborationStatus]:
    return sorted(statuses, key=STATUS_ORDER.index)


def get_allowed_transitions(from_status: object) -> frozenset[CollaborationStatus]:
    """Legal next statuses. Empty for terminal or unknown statuses."""
    status = parse_status(from_status)
    if status is None:
        return frozenset()
    return ALLOWED_TRANSITIONS[status]


def get_allowed_transition_values(from_status: object) -> list[str]:
    """Allowed next statuses as plain values in lifecycle order."""
    return [s.value for s in _sorted(get_allowed_transitions(from_status))]


def is_valid_transition(from_status: object, to_status: object) -> bool:
    """True only for edges of the transition table (no self-transitions)."""
    target = parse_status(to_status)
    if target is None:
        return False
    return target in get_allowed_transitions(from_status)


def is_terminal_status(status: object) -> bool:
    return parse_status(status) in TERMINAL_STATUSES


def requires_action(status: object) -> bool:
    """Non-terminal, known statuses still need someone to act."""
    parsed = parse_status(status)
    return parsed is not None and parsed not in TERMINAL_STATUSES


def get_status_label(status: object) -> str:
    parsed = parse_status(status)
    if parsed is None:
        return "Unknown"
    return STATUS_LABELS[parsed]


def get_status_options() -> list[dict[str, str]]:
    """Status options for dropdowns, in lifecycle order."""
    return [{"value": status.value, "label": STATUS_LABELS[status]} for status in STATUS_ORDER]

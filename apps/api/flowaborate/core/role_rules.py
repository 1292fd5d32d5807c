"""Which participant role may drive which status transition."""

from flowaborate.db.enums import CollaborationRole, CollaborationStatus

ROLE_TRANSITION_TARGETS: dict[CollaborationRole, frozenset[CollaborationStatus]] = {
    # Guests never set a status directly; see GUEST_FLOW_TARGETS.
    CollaborationRole.GUEST: frozenset(),
    CollaborationRole.EDITOR: frozenset(
        {CollaborationStatus.EDITING, CollaborationStatus.READY}
    ),
    # Intake and scheduling belong to the guest flows; the host drives the rest.
    CollaborationRole.HOST: frozenset(
        {
            CollaborationStatus.RECORDED,
            CollaborationStatus.EDITING,
            CollaborationStatus.READY,
            CollaborationStatus.COMPLETED,
            CollaborationStatus.CANCELLED,
        }
    ),
}

# Applied only by the intake and scheduling services, after their own checks
# (populated bio, future recording date) have passed.
GUEST_FLOW_TARGETS: frozenset[CollaborationStatus] = frozenset(
    {CollaborationStatus.INTAKE_COMPLETED, CollaborationStatus.SCHEDULED}
)


def can_role_set_status(
    role: CollaborationRole | str | None,
    to_status: CollaborationStatus,
    *,
    guest_flow: bool = False,
) -> bool:
    if role is None:
        return False
    try:
        role = CollaborationRole(role)
    except ValueError:
        return False
    if guest_flow:
        return role is CollaborationRole.GUEST and to_status in GUEST_FLOW_TARGETS
    return to_status in ROLE_TRANSITION_TARGETS.get(role, frozenset())

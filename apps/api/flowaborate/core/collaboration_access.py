"""Collaboration access control - who the current user is within a collaboration.

Roles are per collaboration, derived from the record itself:
- host: collaboration.host_id (or the owning workspace's owner)
- editor: collaboration.editor_id
- guest: the linked guest profile's user_id
"""

from uuid import UUID

from fastapi import HTTPException, status

from flowaborate.db.enums import CollaborationRole
from flowaborate.db.models import Collaboration


def resolve_collaboration_role(
    collaboration: Collaboration,
    user_id: UUID | None,
) -> CollaborationRole | None:
    """Classify the user as host, editor, or guest (in that precedence), else None."""
    if user_id is None:
        return None
    if collaboration.host_id == user_id:
        return CollaborationRole.HOST
    if collaboration.workspace is not None and collaboration.workspace.owner_id == user_id:
        return CollaborationRole.HOST
    if collaboration.editor_id is not None and collaboration.editor_id == user_id:
        return CollaborationRole.EDITOR
    guest_profile = collaboration.guest_profile
    if guest_profile is not None and guest_profile.user_id == user_id:
        return CollaborationRole.GUEST
    return None


def check_collaboration_access(
    collaboration: Collaboration,
    user_id: UUID | None,
    allowed_roles: set[CollaborationRole] | None = None,
) -> CollaborationRole:
    """
    Return the user's role or raise 403.

    Args:
        allowed_roles: restrict to these roles (default: any participant)
    """
    role = resolve_collaboration_role(collaboration, user_id)
    if role is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not a participant in this collaboration",
        )
    if allowed_roles is not None and role not in allowed_roles:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Action not available to {role.value}",
        )
    return role

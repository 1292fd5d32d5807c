"""Collaboration lookups and creation."""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from flowaborate.db.enums import DEFAULT_COLLABORATION_STATUS, TaskPhase
from flowaborate.db.models import Collaboration, GuestProfile, Workspace
from flowaborate.services import invite_service, task_service

logger = logging.getLogger(__name__)


def create_collaboration(
    db: Session,
    workspace: Workspace,
    host_id: UUID,
    *,
    editor_id: UUID | None = None,
    guest_profile_id: UUID | None = None,
) -> Collaboration:
    """
    Create a collaboration in the initial (invited) status with a fresh invite
    token and the default prep checklist.
    """
    collaboration = Collaboration(
        workspace_id=workspace.id,
        host_id=host_id,
        editor_id=editor_id,
        guest_profile_id=guest_profile_id,
        status=DEFAULT_COLLABORATION_STATUS.value,
        invite_token=invite_service.new_invite_token(db),
    )
    db.add(collaboration)
    db.flush()
    task_service.seed_default_tasks(db, collaboration.id, TaskPhase.PREP, commit=False)
    db.commit()
    db.refresh(collaboration)
    logger.info("Collaboration %s created in workspace %s", collaboration.id, workspace.id)
    return collaboration


def get_collaboration(db: Session, collaboration_id: UUID) -> Collaboration | None:
    return db.get(Collaboration, collaboration_id)


def list_host_collaborations(db: Session, host_id: UUID) -> list[Collaboration]:
    """Collaborations the user hosts directly or through workspace ownership."""
    stmt = (
        select(Collaboration)
        .join(Workspace, Workspace.id == Collaboration.workspace_id)
        .where(or_(Collaboration.host_id == host_id, Workspace.owner_id == host_id))
        .order_by(Collaboration.updated_at.desc())
    )
    return list(db.execute(stmt).scalars().unique())


def list_editor_collaborations(db: Session, editor_id: UUID) -> list[Collaboration]:
    stmt = (
        select(Collaboration)
        .where(Collaboration.editor_id == editor_id)
        .order_by(Collaboration.updated_at.desc())
    )
    return list(db.execute(stmt).scalars())


def list_guest_collaborations(db: Session, user_id: UUID) -> list[Collaboration]:
    stmt = (
        select(Collaboration)
        .join(GuestProfile, GuestProfile.id == Collaboration.guest_profile_id)
        .where(GuestProfile.user_id == user_id)
        .order_by(Collaboration.updated_at.desc())
    )
    return list(db.execute(stmt).scalars())

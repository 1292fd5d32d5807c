"""SQLAlchemy ORM models for workspaces, collaborations, and notification bookkeeping."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON, Boolean, CheckConstraint, ForeignKey, Index, Integer, String, Text, UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from flowaborate.db.base import Base
from flowaborate.db.enums import (
    DEFAULT_COLLABORATION_STATUS,
    CollaborationRole,
    CollaborationStatus,
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


_STATUS_VALUES = ", ".join(f"'{status.value}'" for status in CollaborationStatus)
_ROLE_VALUES = ", ".join(f"'{role.value}'" for role in CollaborationRole)


# =============================================================================
# Identity & Tenant Models
# =============================================================================

class Profile(Base):
    """
    An authenticated person, keyed by the identity provider's subject id.

    Hosts, editors, and signed-up guests are all profiles; the role a
    profile plays is per collaboration, not global.
    """
    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)


class Workspace(Base):
    """
    A show/podcast owned by a host.

    Owns the guest-facing scheduling policy (reschedule limits).
    """
    __tablename__ = "workspaces"
    __table_args__ = (
        CheckConstraint("max_reschedules >= 0", name="ck_workspaces_max_reschedules"),
        CheckConstraint(
            "reschedule_cutoff_hours >= 0", name="ck_workspaces_reschedule_cutoff_hours"
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    max_reschedules: Mapped[int] = mapped_column(Integer, default=2, nullable=False)
    reschedule_cutoff_hours: Mapped[int] = mapped_column(Integer, default=24, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)

    owner: Mapped["Profile"] = relationship()


class GuestProfile(Base):
    """Guest intake data. A populated bio linked to the guest's user marks intake complete."""
    __tablename__ = "guest_profiles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    topics: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    links: Mapped[dict[str, str]] = mapped_column(JSON, default=dict, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow, nullable=False)


# =============================================================================
# Collaboration Models
# =============================================================================

class Collaboration(Base):
    """
    One host-guest content production engagement.

    `status` is the sole driver of workflow state and only changes through
    collaboration_status_service (conditional update + history row).
    `updated_at` is the basis for stall detection.
    """
    __tablename__ = "collaborations"
    __table_args__ = (
        CheckConstraint(f"status IN ({_STATUS_VALUES})", name="ck_collaborations_status"),
        CheckConstraint("reschedule_count >= 0", name="ck_collaborations_reschedule_count"),
        UniqueConstraint("invite_token", name="uq_collaborations_invite_token"),
        Index("idx_collaborations_status_scheduled", "status", "scheduled_date"),
        Index("idx_collaborations_status_updated", "status", "updated_at"),
        Index("idx_collaborations_host", "host_id"),
        Index("idx_collaborations_editor", "editor_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    workspace_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False
    )
    status: Mapped[str] = mapped_column(
        String(32), default=DEFAULT_COLLABORATION_STATUS.value, nullable=False
    )

    scheduled_date: Mapped[datetime | None] = mapped_column(nullable=True)
    prep_date: Mapped[datetime | None] = mapped_column(nullable=True)
    recorded_date: Mapped[datetime | None] = mapped_column(nullable=True)
    delivery_date: Mapped[datetime | None] = mapped_column(nullable=True)
    reschedule_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    host_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    editor_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True
    )
    guest_profile_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("guest_profiles.id", ondelete="SET NULL"), nullable=True
    )

    invite_token: Mapped[str] = mapped_column(String(64), nullable=False)

    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow, nullable=False)

    workspace: Mapped["Workspace"] = relationship()
    host: Mapped["Profile"] = relationship(foreign_keys=[host_id])
    editor: Mapped["Profile | None"] = relationship(foreign_keys=[editor_id])
    guest_profile: Mapped["GuestProfile | None"] = relationship()


class CollaborationStatusHistory(Base):
    """Append-only audit record, one row per status change. Never updated or deleted."""
    __tablename__ = "collaboration_status_history"
    __table_args__ = (
        Index("idx_collab_status_history_collab", "collaboration_id", "changed_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    collaboration_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("collaborations.id", ondelete="CASCADE"), nullable=False
    )
    old_status: Mapped[str | None] = mapped_column(String(32), nullable=True)
    new_status: Mapped[str] = mapped_column(String(32), nullable=False)
    changed_by_user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True
    )
    changed_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)


class NotificationLog(Base):
    """
    One row per outbound email attempt.

    Doubles as the sweep's "already notified" marker: the sweep looks up
    prior rows by (collaboration_id, notification_type, dedupe_key).
    """
    __tablename__ = "notification_logs"
    __table_args__ = (
        Index(
            "idx_notification_logs_dedupe",
            "collaboration_id",
            "notification_type",
            "dedupe_key",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    collaboration_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("collaborations.id", ondelete="CASCADE"), nullable=False
    )
    notification_type: Mapped[str] = mapped_column(String(32), nullable=False)
    dedupe_key: Mapped[str] = mapped_column(String(255), nullable=False)
    recipient_role: Mapped[str] = mapped_column(String(16), nullable=False)
    recipient_email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    error: Mapped[str | None] = mapped_column(Text, nullable=True)
    sent_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)


class Task(Base):
    """
    Checklist item on a collaboration, assigned to a participant role.

    Independent of status: tasks never move the workflow, they only track
    the work each role does around a phase.
    """
    __tablename__ = "collaboration_tasks"
    __table_args__ = (
        CheckConstraint(f"assigned_role IN ({_ROLE_VALUES})", name="ck_collaboration_tasks_role"),
        Index("idx_collaboration_tasks_collab", "collaboration_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    collaboration_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("collaborations.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    assigned_role: Mapped[str] = mapped_column(String(16), nullable=False)
    assigned_user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True
    )
    due_date: Mapped[datetime | None] = mapped_column(nullable=True)
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    is_completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_skipped: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(nullable=True)
    completed_by_user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow, nullable=False)

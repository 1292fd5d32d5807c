"""Task checklist - role-assigned work items on a collaboration."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from flowaborate.core.errors import TaskNotPermittedError
from flowaborate.db.enums import CollaborationRole, TaskPhase
from flowaborate.db.models import Task

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaskTemplate:
    title: str
    description: str
    assigned_role: CollaborationRole


DEFAULT_PREP_TASKS: tuple[TaskTemplate, ...] = (
    TaskTemplate(
        "Review guest intake form",
        "Check bio, topics, and pronunciation notes",
        CollaborationRole.HOST,
    ),
    TaskTemplate(
        "Prepare interview questions",
        "Create tailored questions based on guest expertise",
        CollaborationRole.HOST,
    ),
    TaskTemplate(
        "Send calendar invite",
        "Include meeting link and preparation tips",
        CollaborationRole.HOST,
    ),
    TaskTemplate(
        "Test recording equipment",
        "Check audio/video quality before session",
        CollaborationRole.HOST,
    ),
)

DEFAULT_POST_TASKS: tuple[TaskTemplate, ...] = (
    TaskTemplate("Edit raw footage", "Clean up audio, remove filler words", CollaborationRole.EDITOR),
    TaskTemplate("Create show notes", "Write episode summary and timestamps", CollaborationRole.EDITOR),
    TaskTemplate("Design thumbnail", "Create eye-catching episode artwork", CollaborationRole.EDITOR),
    TaskTemplate(
        "Upload to platforms",
        "Publish to podcast hosting and YouTube",
        CollaborationRole.HOST,
    ),
    TaskTemplate(
        "Notify guest of publication",
        "Send guest the links and promotional materials",
        CollaborationRole.HOST,
    ),
    TaskTemplate("Share on social media", "Post clips and announcements", CollaborationRole.HOST),
)

DEFAULT_TASKS: dict[TaskPhase, tuple[TaskTemplate, ...]] = {
    TaskPhase.PREP: DEFAULT_PREP_TASKS,
    TaskPhase.POST: DEFAULT_POST_TASKS,
}


def _next_position(db: Session, collaboration_id: UUID) -> int:
    current = db.execute(
        select(func.max(Task.position)).where(Task.collaboration_id == collaboration_id)
    ).scalar_one_or_none()
    return 0 if current is None else current + 1


def seed_default_tasks(
    db: Session,
    collaboration_id: UUID,
    phase: TaskPhase | str,
    *,
    commit: bool = True,
) -> list[Task]:
    """
    Add the template checklist for a phase.

    Args:
        commit: If False, uses flush instead of commit (caller commits).
    """
    phase = TaskPhase(phase)
    start = _next_position(db, collaboration_id)
    now = datetime.now(timezone.utc)
    tasks = [
        Task(
            collaboration_id=collaboration_id,
            title=template.title,
            description=template.description,
            assigned_role=template.assigned_role.value,
            position=start + offset,
            created_at=now,
            updated_at=now,
        )
        for offset, template in enumerate(DEFAULT_TASKS[phase])
    ]
    db.add_all(tasks)
    if commit:
        db.commit()
    else:
        db.flush()
    logger.info("Seeded %s %s tasks for collaboration %s", len(tasks), phase.value, collaboration_id)
    return tasks


def create_task(
    db: Session,
    collaboration_id: UUID,
    *,
    title: str,
    assigned_role: CollaborationRole | str,
    description: str | None = None,
    assigned_user_id: UUID | None = None,
    due_date: datetime | None = None,
) -> Task:
    """Create a new task."""
    task = Task(
        collaboration_id=collaboration_id,
        title=title,
        description=description,
        assigned_role=CollaborationRole(assigned_role).value,
        assigned_user_id=assigned_user_id,
        due_date=due_date,
        position=_next_position(db, collaboration_id),
    )
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


def get_task(db: Session, collaboration_id: UUID, task_id: UUID) -> Task | None:
    """Get task by ID (collaboration-scoped)."""
    return db.execute(
        select(Task).where(Task.id == task_id, Task.collaboration_id == collaboration_id)
    ).scalar_one_or_none()


def list_tasks(
    db: Session,
    collaboration_id: UUID,
    role: CollaborationRole | None = None,
) -> list[Task]:
    """
    Checklist in display order.

    Guests only see the tasks assigned to them; hosts and editors see all.
    """
    stmt = select(Task).where(Task.collaboration_id == collaboration_id)
    if role is CollaborationRole.GUEST:
        stmt = stmt.where(Task.assigned_role == CollaborationRole.GUEST.value)
    stmt = stmt.order_by(Task.position.asc(), Task.created_at.asc())
    return list(db.execute(stmt).scalars())


def can_update_task(task: Task, role: CollaborationRole) -> bool:
    """Host may update any task; everyone else only their own role's tasks."""
    return role is CollaborationRole.HOST or task.assigned_role == role.value


def update_task_state(
    db: Session,
    task: Task,
    *,
    role: CollaborationRole,
    user_id: UUID,
    is_completed: bool | None = None,
    is_skipped: bool | None = None,
    now: datetime | None = None,
) -> Task:
    """Complete/reopen and skip/unskip a task. Fields left as None are unchanged."""
    if not can_update_task(task, role):
        raise TaskNotPermittedError(role.value, task.assigned_role)

    if is_completed is not None and is_completed != task.is_completed:
        task.is_completed = is_completed
        if is_completed:
            task.completed_at = now or datetime.now(timezone.utc)
            task.completed_by_user_id = user_id
        else:
            task.completed_at = None
            task.completed_by_user_id = None
    if is_skipped is not None:
        task.is_skipped = is_skipped

    db.commit()
    db.refresh(task)
    return task


def task_progress(tasks: list[Task]) -> int:
    """Completed share of the checklist as a whole percentage (0 when empty)."""
    if not tasks:
        return 0
    completed = sum(1 for task in tasks if task.is_completed)
    return round(completed * 100 / len(tasks))

from datetime import datetime, timezone

import pytest

from flowaborate.core.errors import TaskNotPermittedError
from flowaborate.db.enums import CollaborationRole, TaskPhase
from flowaborate.db.models import Task
from flowaborate.services import collaboration_service, task_service


def test_create_collaboration_seeds_prep_checklist(db, people):
    collab = collaboration_service.create_collaboration(db, people.workspace, people.host.id)

    tasks = task_service.list_tasks(db, collab.id)

    assert [t.title for t in tasks] == [
        "Review guest intake form",
        "Prepare interview questions",
        "Send calendar invite",
        "Test recording equipment",
    ]
    assert {t.assigned_role for t in tasks} == {"host"}
    assert [t.position for t in tasks] == [0, 1, 2, 3]
    assert not any(t.is_completed for t in tasks)


def test_post_defaults_append_after_existing(db, factory, people):
    collab = factory.collaboration(people)
    task_service.seed_default_tasks(db, collab.id, TaskPhase.PREP)

    task_service.seed_default_tasks(db, collab.id, "post")

    tasks = task_service.list_tasks(db, collab.id)
    assert len(tasks) == 10
    assert tasks[4].title == "Edit raw footage"
    assert tasks[4].assigned_role == "editor"
    assert tasks[-1].title == "Share on social media"
    assert tasks[-1].position == 9


def test_guest_sees_only_guest_tasks(db, factory, people):
    collab = factory.collaboration(people)
    task_service.seed_default_tasks(db, collab.id, TaskPhase.PREP)
    guest_task = task_service.create_task(
        db, collab.id, title="Send headshot", assigned_role=CollaborationRole.GUEST
    )

    guest_view = task_service.list_tasks(db, collab.id, CollaborationRole.GUEST)
    editor_view = task_service.list_tasks(db, collab.id, CollaborationRole.EDITOR)

    assert [t.id for t in guest_view] == [guest_task.id]
    assert len(editor_view) == 5


def test_complete_and_reopen(db, factory, people):
    collab = factory.collaboration(people)
    task = task_service.create_task(
        db, collab.id, title="Edit raw footage", assigned_role="editor"
    )
    done_at = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

    task_service.update_task_state(
        db, task, role=CollaborationRole.EDITOR, user_id=people.editor.id,
        is_completed=True, now=done_at,
    )
    assert task.is_completed is True
    assert task.completed_at is not None
    assert task.completed_by_user_id == people.editor.id

    task_service.update_task_state(
        db, task, role=CollaborationRole.EDITOR, user_id=people.editor.id, is_completed=False
    )
    assert task.is_completed is False
    assert task.completed_at is None
    assert task.completed_by_user_id is None


def test_editor_cannot_touch_host_task(db, factory, people):
    collab = factory.collaboration(people)
    task = task_service.create_task(db, collab.id, title="Send calendar invite", assigned_role="host")

    with pytest.raises(TaskNotPermittedError):
        task_service.update_task_state(
            db, task, role=CollaborationRole.EDITOR, user_id=people.editor.id, is_completed=True
        )

    db.refresh(task)
    assert task.is_completed is False


def test_host_can_update_any_task(db, factory, people):
    collab = factory.collaboration(people)
    task = task_service.create_task(db, collab.id, title="Design thumbnail", assigned_role="editor")

    task_service.update_task_state(
        db, task, role=CollaborationRole.HOST, user_id=people.host.id, is_skipped=True
    )

    assert task.is_skipped is True
    assert task.is_completed is False


def test_get_task_is_collaboration_scoped(db, factory, people):
    first = factory.collaboration(people)
    second = factory.collaboration(people)
    task = task_service.create_task(db, first.id, title="Prep", assigned_role="host")

    assert task_service.get_task(db, first.id, task.id) is task
    assert task_service.get_task(db, second.id, task.id) is None


@pytest.mark.parametrize(
    "completed,total,expected",
    [(0, 0, 0), (0, 4, 0), (1, 3, 33), (2, 3, 67), (4, 4, 100)],
)
def test_task_progress(completed, total, expected):
    tasks = [Task(title=str(i), assigned_role="host", is_completed=i < completed) for i in range(total)]
    assert task_service.task_progress(tasks) == expected

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from flowaborate.db.enums import CollaborationRole, CollaborationStatus, ExceptionType
from flowaborate.services.dashboard_service import classify_for_host, classify_for_role

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)
S = CollaborationStatus


def _collab(status, **fields):
    values = {
        "status": status.value if isinstance(status, CollaborationStatus) else status,
        "scheduled_date": None,
        "recorded_date": None,
        "updated_at": NOW,
    }
    values.update(fields)
    return SimpleNamespace(**values)


def test_host_buckets_are_disjoint_and_ordered():
    no_show = _collab(S.SCHEDULED, scheduled_date=NOW - timedelta(hours=30))
    recording = _collab(S.SCHEDULED, scheduled_date=NOW + timedelta(days=1))
    publish = _collab(S.READY)
    editing = _collab(S.EDITING)
    invited = _collab(S.INVITED)
    done = _collab(S.COMPLETED)

    dashboard = classify_for_host(
        [no_show, recording, editing, publish, invited, done], now=NOW
    )

    assert [e.collaboration for e in dashboard.exceptions] == [no_show]
    assert dashboard.exceptions[0].exception.type is ExceptionType.NO_SHOW
    assert [e.collaboration for e in dashboard.my_actions] == [recording, publish]
    assert [e.collaboration for e in dashboard.waiting] == [editing, invited]
    assert dashboard.waiting[1].role_action.waiting_on_label == (
        "Waiting on guest to accept the invite and complete intake"
    )


def test_stalled_invite_is_an_exception_not_waiting():
    stale = _collab(S.INVITED, updated_at=NOW - timedelta(days=9))

    dashboard = classify_for_host([stale], now=NOW)

    assert dashboard.exceptions[0].exception.message == "No activity for 9 days"
    assert dashboard.waiting == []


def test_unknown_status_waits_nowhere():
    dashboard = classify_for_host([_collab("archived")], now=NOW)

    assert dashboard.exceptions == []
    assert dashboard.my_actions == []
    assert dashboard.waiting == []


def test_editor_view():
    recorded = _collab(S.RECORDED)
    scheduled = _collab(S.SCHEDULED)
    cancelled = _collab(S.CANCELLED)

    actions, waiting = classify_for_role(
        [recorded, scheduled, cancelled], CollaborationRole.EDITOR
    )

    assert [e.role_action.title for e in actions] == ["Start Editing"]
    assert [e.role_action.waiting_on_label for e in waiting] == [
        "Waiting on host to complete recording"
    ]


def test_guest_view():
    actions, waiting = classify_for_role(
        [_collab(S.INTAKE_COMPLETED), _collab(S.READY)], CollaborationRole.GUEST
    )

    assert actions[0].role_action.title == "Schedule Your Recording"
    assert waiting[0].role_action.waiting_on_label == "Waiting on host to publish content"

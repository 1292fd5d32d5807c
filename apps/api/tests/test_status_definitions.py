import logging

import pytest

from flowaborate.core.errors import UnknownStatusError
from flowaborate.core.status_definitions import (
    ALLOWED_TRANSITIONS,
    STATUS_ORDER,
    get_allowed_transition_values,
    get_status_label,
    get_status_options,
    is_terminal_status,
    is_valid_transition,
    parse_status,
    requires_action,
)
from flowaborate.db.enums import CollaborationStatus

S = CollaborationStatus

TABLE_EDGES = {
    (S.INVITED, S.INTAKE_COMPLETED),
    (S.INVITED, S.CANCELLED),
    (S.INTAKE_COMPLETED, S.SCHEDULED),
    (S.INTAKE_COMPLETED, S.CANCELLED),
    (S.SCHEDULED, S.RECORDED),
    (S.SCHEDULED, S.CANCELLED),
    (S.RECORDED, S.EDITING),
    (S.RECORDED, S.CANCELLED),
    (S.EDITING, S.READY),
    (S.EDITING, S.CANCELLED),
    (S.READY, S.COMPLETED),
    (S.READY, S.CANCELLED),
}


def test_every_status_has_a_table_row_and_label():
    assert set(STATUS_ORDER) == set(CollaborationStatus)
    assert set(ALLOWED_TRANSITIONS) == set(CollaborationStatus)
    assert [get_status_label(s) for s in STATUS_ORDER] == [
        "Invited",
        "Intake Completed",
        "Scheduled",
        "Recorded",
        "Editing",
        "Ready",
        "Completed",
        "Cancelled",
    ]


def test_is_valid_transition_matches_table_exactly():
    for from_status in CollaborationStatus:
        for to_status in CollaborationStatus:
            expected = (from_status, to_status) in TABLE_EDGES
            assert is_valid_transition(from_status, to_status) is expected, (from_status, to_status)


def test_no_self_transitions():
    for status in CollaborationStatus:
        assert not is_valid_transition(status, status)


def test_terminal_statuses_have_no_exits():
    for terminal in (S.COMPLETED, S.CANCELLED):
        assert is_terminal_status(terminal)
        assert get_allowed_transition_values(terminal) == []
        assert not requires_action(terminal)


def test_scheduled_cannot_skip_to_editing():
    assert not is_valid_transition("scheduled", "editing")
    assert get_allowed_transition_values("scheduled") == ["recorded", "cancelled"]


def test_string_values_are_accepted():
    assert is_valid_transition("invited", "intake_completed")
    assert requires_action("editing")


def test_unknown_status_fails_closed_and_logs(caplog):
    with caplog.at_level(logging.WARNING):
        assert parse_status("archived") is None
        assert get_allowed_transition_values("archived") == []
        assert not is_valid_transition("archived", "cancelled")
        assert not is_valid_transition("invited", "archived")
        assert get_status_label("archived") == "Unknown"
    assert "Unknown collaboration status" in caplog.text


def test_strict_parse_raises_for_unknown_status():
    with pytest.raises(UnknownStatusError):
        parse_status("published", strict=True)
    assert parse_status("ready", strict=True) is S.READY


def test_status_options_follow_lifecycle_order():
    options = get_status_options()
    assert options[0] == {"value": "invited", "label": "Invited"}
    assert [o["value"] for o in options] == [s.value for s in STATUS_ORDER]

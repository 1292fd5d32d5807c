from datetime import datetime, timedelta, timezone

import pytest

from flowaborate.core.errors import (
    InvalidTransitionError,
    InviteAlreadyClaimedError,
    ReschedulePolicyError,
    SchedulingError,
)
from flowaborate.db.enums import CollaborationStatus
from flowaborate.services import collaboration_status_service, scheduling_service

NOW = datetime(2026, 5, 1, 9, 0, tzinfo=timezone.utc)


def _utc(value):
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


# =============================================================================
# Intake
# =============================================================================


def test_intake_with_bio_completes_intake(db, factory, people):
    collab = factory.collaboration(people, CollaborationStatus.INVITED, with_guest=False)

    profile, result = scheduling_service.complete_intake(
        db,
        collab,
        guest_user_id=people.guest.id,
        name="Grace Guest",
        email="grace@example.com",
        bio="Writes about audio craft",
        topics=["audio", "craft"],
        links={"site": "https://grace.example.com"},
    )

    assert result is not None
    assert result["new_status"] == "intake_completed"
    assert collab.status == "intake_completed"
    assert collab.guest_profile_id == profile.id
    assert profile.user_id == people.guest.id
    assert profile.topics == ["audio", "craft"]

    history = collaboration_status_service.list_status_history(db, collab.id)
    assert [h.changed_by_user_id for h in history] == [people.guest.id]


def test_intake_without_bio_saves_profile_only(db, factory, people):
    collab = factory.collaboration(people, CollaborationStatus.INVITED, with_guest=False)

    profile, result = scheduling_service.complete_intake(
        db, collab, guest_user_id=people.guest.id, name="Grace Guest", bio="   "
    )

    assert result is None
    assert collab.status == "invited"
    assert collab.guest_profile_id == profile.id
    assert not scheduling_service.is_intake_complete(profile)


def test_intake_after_invited_updates_profile_without_transition(db, factory, people):
    collab = factory.collaboration(people, CollaborationStatus.SCHEDULED)

    profile, result = scheduling_service.complete_intake(
        db, collab, guest_user_id=people.guest.id, name="Grace G.", bio="Updated bio"
    )

    assert result is None
    assert profile.id == people.guest_profile.id
    assert profile.name == "Grace G."
    assert collab.status == "scheduled"


def test_intake_rejects_other_account(db, factory, people):
    collab = factory.collaboration(people, CollaborationStatus.INVITED)
    stranger = factory.profile()

    with pytest.raises(InviteAlreadyClaimedError):
        scheduling_service.complete_intake(
            db, collab, guest_user_id=stranger.id, name="Not Grace", bio="Hi"
        )


# =============================================================================
# Scheduling
# =============================================================================


def test_first_schedule_transitions_and_sets_dates(db, factory, people):
    collab = factory.collaboration(people, CollaborationStatus.INTAKE_COMPLETED)
    when = NOW + timedelta(days=7)
    prep = NOW + timedelta(days=6)

    result = scheduling_service.schedule_recording(
        db,
        collab,
        people.workspace,
        scheduled_date=when,
        prep_date=prep,
        guest_user_id=people.guest.id,
        now=NOW,
    )

    assert result["old_status"] == "intake_completed"
    assert result["new_status"] == "scheduled"
    assert _utc(collab.scheduled_date) == when
    assert _utc(collab.prep_date) == prep
    assert collab.reschedule_count == 0


def test_reschedule_increments_count_without_history(db, factory, people):
    collab = factory.collaboration(
        people, CollaborationStatus.SCHEDULED, scheduled_date=NOW + timedelta(days=5)
    )
    new_date = NOW + timedelta(days=9)

    result = scheduling_service.schedule_recording(
        db,
        collab,
        people.workspace,
        scheduled_date=new_date,
        guest_user_id=people.guest.id,
        now=NOW,
    )

    assert result is None
    assert collab.status == "scheduled"
    assert collab.reschedule_count == 1
    assert _utc(collab.scheduled_date) == new_date
    assert collaboration_status_service.list_status_history(db, collab.id) == []


def test_reschedule_limit(db, factory, people):
    collab = factory.collaboration(
        people,
        CollaborationStatus.SCHEDULED,
        scheduled_date=NOW + timedelta(days=5),
        reschedule_count=2,
    )

    with pytest.raises(ReschedulePolicyError, match=r"Maximum reschedules \(2\) reached"):
        scheduling_service.schedule_recording(
            db,
            collab,
            people.workspace,
            scheduled_date=NOW + timedelta(days=10),
            guest_user_id=people.guest.id,
            now=NOW,
        )


def test_reschedule_cutoff(db, factory, people):
    collab = factory.collaboration(
        people, CollaborationStatus.SCHEDULED, scheduled_date=NOW + timedelta(hours=12)
    )

    with pytest.raises(ReschedulePolicyError, match="within 24 hours"):
        scheduling_service.check_reschedule_allowed(collab, people.workspace, NOW)


def test_schedule_in_the_past_is_rejected(db, factory, people):
    collab = factory.collaboration(people, CollaborationStatus.INTAKE_COMPLETED)

    with pytest.raises(SchedulingError, match="future"):
        scheduling_service.schedule_recording(
            db,
            collab,
            people.workspace,
            scheduled_date=NOW - timedelta(hours=1),
            guest_user_id=people.guest.id,
            now=NOW,
        )


def test_schedule_before_intake_is_invalid(db, factory, people):
    collab = factory.collaboration(people, CollaborationStatus.INVITED)

    with pytest.raises(InvalidTransitionError):
        scheduling_service.schedule_recording(
            db,
            collab,
            people.workspace,
            scheduled_date=NOW + timedelta(days=3),
            guest_user_id=people.guest.id,
            now=NOW,
        )

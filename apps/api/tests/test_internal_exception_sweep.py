from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from flowaborate.db.enums import CollaborationStatus


@pytest.fixture
def sweep_session(db, monkeypatch):
    from flowaborate.core.config import settings
    from flowaborate.routers import internal as internal_router

    monkeypatch.setattr(settings, "INTERNAL_SECRET", "secret")

    class _TestSession:
        def __enter__(self):
            return db

        def __exit__(self, exc_type, exc, tb):
            return False

    monkeypatch.setattr(internal_router, "SessionLocal", lambda: _TestSession())
    return db


@pytest.mark.asyncio
async def test_exception_sweep_endpoint_runs_sweep(client, sweep_session, factory, people, outbox):
    now = datetime.now(timezone.utc)
    factory.collaboration(
        people, CollaborationStatus.INVITED, updated_at=now - timedelta(days=10)
    )

    response = await client.post(
        "/internal/scheduled/exception-sweep",
        headers={"X-Internal-Secret": "secret"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["collaborations_with_items"] == 1
    assert data["sent"] == 1
    assert data["by_kind"]["stalled"] == {"sent": 1, "skipped": 0, "failed": 0}
    assert data["errors"] == []
    assert [m.to_email for m in outbox.sent] == ["host@example.com"]
    assert outbox.sent[0].subject.startswith("Stalled Collaboration")


@pytest.mark.asyncio
async def test_exception_sweep_rejects_wrong_secret(client, sweep_session):
    response = await client.post(
        "/internal/scheduled/exception-sweep",
        headers={"X-Internal-Secret": "nope"},
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_exception_sweep_requires_configured_secret(client, db, monkeypatch):
    from flowaborate.core.config import settings

    monkeypatch.setattr(settings, "INTERNAL_SECRET", "")

    response = await client.post(
        "/internal/scheduled/exception-sweep",
        headers={"X-Internal-Secret": "anything"},
    )
    assert response.status_code == 501


@pytest.mark.asyncio
async def test_exception_sweep_conflict_while_running(client, sweep_session):
    from flowaborate.services import exception_sweep_service

    assert exception_sweep_service._sweep_lock.acquire(blocking=False)
    try:
        response = await client.post(
            "/internal/scheduled/exception-sweep",
            headers={"X-Internal-Secret": "secret"},
        )
    finally:
        exception_sweep_service._sweep_lock.release()

    assert response.status_code == 409

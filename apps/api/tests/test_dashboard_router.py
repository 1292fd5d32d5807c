from datetime import datetime, timedelta, timezone

import pytest

from flowaborate.db.enums import CollaborationStatus

S = CollaborationStatus


@pytest.mark.asyncio
async def test_host_dashboard(client, bearer, factory, people):
    now = datetime.now(timezone.utc)
    no_show = factory.collaboration(people, S.SCHEDULED, scheduled_date=now - timedelta(days=2))
    ready = factory.collaboration(people, S.READY)
    editing = factory.collaboration(people, S.EDITING)
    factory.collaboration(people, S.COMPLETED)

    response = await client.get("/dashboard/host", headers=bearer(people.host))

    assert response.status_code == 200
    data = response.json()
    assert [i["collaboration_id"] for i in data["exceptions"]] == [str(no_show.id)]
    assert data["exceptions"][0]["exception"]["type"] == "no_show"
    assert [i["collaboration_id"] for i in data["my_actions"]] == [str(ready.id)]
    assert [i["collaboration_id"] for i in data["waiting"]] == [str(editing.id)]
    assert data["waiting"][0]["guest_name"] == "Grace Guest"


@pytest.mark.asyncio
async def test_host_dashboard_excludes_other_hosts(client, bearer, factory, people):
    factory.collaboration(people, S.READY)
    other_host = factory.profile()

    response = await client.get("/dashboard/host", headers=bearer(other_host))

    assert response.json() == {"exceptions": [], "my_actions": [], "waiting": []}


@pytest.mark.asyncio
async def test_guest_dashboard(client, bearer, factory, people):
    todo = factory.collaboration(people, S.INTAKE_COMPLETED)
    factory.collaboration(people, S.EDITING)
    factory.collaboration(people, S.CANCELLED)

    response = await client.get("/dashboard/guest", headers=bearer(people.guest))

    assert response.status_code == 200
    data = response.json()
    assert [i["collaboration_id"] for i in data["actions"]] == [str(todo.id)]
    assert len(data["waiting"]) == 1
    assert data["waiting"][0]["exception"] is None


@pytest.mark.asyncio
async def test_editor_dashboard(client, bearer, factory, people):
    factory.collaboration(people, S.RECORDED)
    factory.collaboration(people, S.RECORDED, with_editor=False)

    response = await client.get("/dashboard/editor", headers=bearer(people.editor))

    assert len(response.json()["actions"]) == 1


@pytest.mark.asyncio
async def test_unknown_dashboard_role_is_rejected(client, bearer, people):
    response = await client.get("/dashboard/host-ish", headers=bearer(people.host))
    assert response.status_code == 422

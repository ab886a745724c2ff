import pytest
from tests.factories import EventFactory


@pytest.mark.asyncio
async def test_calendar_month(client, gateway, login):
    login()
    gateway.add(
        "events",
        EventFactory.create(title="Meeting", event_date="2025-10-15"),
        EventFactory.create(title="Drive", category="red-hook", event_date="2025-10-03"),
        EventFactory.create(title="Gala", category="unknown", event_date="2025-11-20"),
    )

    response = await client.get("/events", params={"year": 2025, "month": 10})

    assert response.status_code == 200
    data = response.json()
    assert data["days"][:4] == [None, None, None, 1]
    assert data["can_manage"] is False
    assert [e["title"] for e in data["month_events"]] == ["Drive", "Meeting"]
    assert data["month_events"][0]["category_label"] == "Red Hook"
    assert data["events_by_date"]["2025-11-20"][0]["category_color"] == "#718096"


@pytest.mark.asyncio
async def test_leader_creates_event(client, gateway, login):
    leader = login(role="leader")

    response = await client.post(
        "/events",
        json={"title": " Bake sale ", "category": "in-school", "event_date": "2025-12-05"},
    )

    assert response.status_code == 201
    data = response.json()
    assert (data["year"], data["month"], data["can_manage"]) == (2025, 12, True)
    assert data["month_events"][0]["title"] == "Bake sale"
    assert gateway.rows("events")[0]["created_by"] == leader["id"]


@pytest.mark.asyncio
async def test_blank_title_is_rejected(client, login):
    login(role="leader")
    response = await client.post("/events", json={"title": "  ", "event_date": "2025-12-05"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_update_and_delete_event(client, gateway, login):
    login(role="admin")
    event = EventFactory.create()
    gateway.add("events", event)

    updated = await client.patch(
        f"/events/{event['id']}",
        json={"title": "Moved", "category": "mandatory", "event_date": "2025-10-20"},
    )
    assert updated.json()["events_by_date"]["2025-10-20"][0]["title"] == "Moved"

    deleted = await client.delete(f"/events/{event['id']}")
    assert deleted.status_code == 204
    assert gateway.rows("events") == []

    missing = await client.delete(f"/events/{event['id']}")
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_members_cannot_manage_events(client, login):
    login()
    response = await client.post(
        "/events", json={"title": "Party", "event_date": "2025-12-05"}
    )
    assert response.status_code == 403

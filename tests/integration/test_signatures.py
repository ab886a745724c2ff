import pytest
from tests.factories import ServiceHourFactory, add_profile

SIGNATURE = "data:image/png;base64,iVBORw0KGgo="


@pytest.fixture
def signed(gateway):
    ana = add_profile(gateway, first_name="Ana", last_name="Zeller", grade=10)
    ben = add_profile(gateway, first_name="Ben", last_name="Young", grade=12)
    rows = {
        "ana_t1": ServiceHourFactory.create(
            user_id=ana["id"], signature=SIGNATURE, date="2025-10-01"
        ),
        "ben_t2": ServiceHourFactory.create(
            user_id=ben["id"],
            signature=SIGNATURE,
            trimester=2,
            category="red_hook",
            supervisor_name="Coach Lee",
            date="2026-01-20",
        ),
        "orphan": ServiceHourFactory.create(signature=SIGNATURE, date="2025-09-15"),
        "unsigned": ServiceHourFactory.create(user_id=ana["id"]),
        "draft": ServiceHourFactory.create(
            user_id=ana["id"], signature=SIGNATURE, status="in_progress"
        ),
    }
    gateway.add("service_hours", *rows.values())
    return rows


@pytest.mark.asyncio
async def test_review_lists_signed_completed_entries(client, login, signed):
    login(role="admin")

    response = await client.get("/volunteer/signatures")

    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 3
    ids = [item["id"] for item in data["signatures"]]
    # newest service date first
    assert ids == [signed["ben_t2"]["id"], signed["ana_t1"]["id"], signed["orphan"]["id"]]
    assert data["signatures"][0]["category_label"] == "Red Hook"
    assert data["signatures"][2]["student_first_name"] == "Unknown"
    assert data["grades"] == [10, 12]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "params,expected",
    [
        ({"search": "coach"}, ["ben_t2"]),
        ({"search": "zell"}, ["ana_t1"]),
        ({"trimester": 1}, ["ana_t1", "orphan"]),
        ({"category": "red_hook"}, ["ben_t2"]),
        ({"grade": 10}, ["ana_t1"]),
    ],
)
async def test_review_filters(client, login, signed, params, expected):
    login(role="admin")

    response = await client.get("/volunteer/signatures", params=params)

    ids = [item["id"] for item in response.json()["signatures"]]
    assert ids == [signed[key]["id"] for key in expected]


@pytest.mark.asyncio
async def test_admin_deletes_completed_entry(client, gateway, login, signed):
    login(role="admin")

    response = await client.delete(f"/volunteer/signatures/{signed['ana_t1']['id']}")

    assert response.status_code == 200
    assert response.json()["count"] == 2
    assert signed["ana_t1"]["id"] not in [r["id"] for r in gateway.rows("service_hours")]


@pytest.mark.asyncio
async def test_delete_ignores_drafts(client, login, signed):
    login(role="admin")
    response = await client.delete(f"/volunteer/signatures/{signed['draft']['id']}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_leaders_cannot_review_signatures(client, login):
    login(role="leader")
    response = await client.get("/volunteer/signatures")
    assert response.status_code == 403

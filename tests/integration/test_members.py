import pytest
from tests.factories import ServiceHourFactory


@pytest.mark.asyncio
async def test_get_and_update_profile(client, gateway, login):
    me = login(grade=10)

    response = await client.patch(
        "/members/me", json={"first_name": " Ana ", "last_name": "Zeller", "grade": 12}
    )

    assert response.status_code == 200
    assert response.json()["first_name"] == "Ana"
    assert gateway.rows("profiles")[0]["grade"] == 12
    assert (await client.get("/members/me")).json()["id"] == me["id"]


@pytest.mark.asyncio
async def test_grade_out_of_range(client, login):
    login()
    response = await client.patch(
        "/members/me", json={"first_name": "Ana", "last_name": "Zeller", "grade": 13}
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Grade must be between 10 and 12"


@pytest.mark.asyncio
async def test_admin_grade_is_left_alone(client, gateway, login):
    login(role="admin", grade=None)

    response = await client.patch(
        "/members/me", json={"first_name": "Ada", "last_name": "Admin", "grade": 99}
    )

    assert response.status_code == 200
    assert gateway.rows("profiles")[0]["grade"] is None


@pytest.mark.asyncio
async def test_change_password(client, auth_gateway, login):
    me = login()

    mismatch = await client.post(
        "/members/me/password",
        json={"new_password": "secret1", "confirm_password": "secret2"},
    )
    assert mismatch.status_code == 400
    assert mismatch.json()["detail"] == "New passwords do not match"

    changed = await client.post(
        "/members/me/password",
        json={"new_password": "secret1", "confirm_password": "secret1"},
    )
    assert changed.status_code == 204
    assert auth_gateway.passwords == {me["id"]: "secret1"}


@pytest.mark.asyncio
async def test_delete_account_requires_confirmation(client, gateway, login):
    login()

    response = await client.request(
        "DELETE", "/members/me", json={"confirmation": "delete"}
    )

    assert response.status_code == 400
    assert response.json()["detail"] == 'Type "DELETE" to confirm account deletion'
    assert len(gateway.rows("profiles")) == 1


@pytest.mark.asyncio
async def test_delete_account_removes_hours_and_signs_out(
    client, gateway, auth_gateway, login
):
    me = login()
    other = ServiceHourFactory.create()
    gateway.add("service_hours", ServiceHourFactory.create(user_id=me["id"]), other)

    response = await client.request(
        "DELETE", "/members/me", json={"confirmation": "DELETE"}
    )

    assert response.status_code == 204
    assert gateway.rows("profiles") == []
    assert [r["id"] for r in gateway.rows("service_hours")] == [other["id"]]
    assert len(auth_gateway.signed_out) == 1
    # hours go before the profile they belong to
    deletes = [target for kind, target in gateway.calls if kind == "delete"]
    assert deletes == ["service_hours", "profiles"]

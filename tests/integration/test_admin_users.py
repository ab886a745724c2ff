import pytest
from tests.factories import ServiceHourFactory, add_profile


@pytest.fixture
def directory(gateway):
    return {
        "pending": add_profile(gateway, first_name="Pat", last_name="Pending", approved=False),
        "member": add_profile(gateway, first_name="Ben", last_name="Young"),
        "admin": add_profile(gateway, first_name="Other", last_name="Admin", role="admin"),
    }


@pytest.mark.asyncio
async def test_list_and_filter_users(client, login, directory):
    login(role="admin", first_name="Ada")

    everyone = (await client.get("/admin/users")).json()
    pending = (await client.get("/admin/users", params={"filter": "pending"})).json()
    searched = (await client.get("/admin/users", params={"search": "young"})).json()

    assert len(everyone["users"]) == 4
    assert everyone["pending_count"] == 1
    assert [u["id"] for u in pending["users"]] == [directory["pending"]["id"]]
    assert [u["id"] for u in searched["users"]] == [directory["member"]["id"]]


@pytest.mark.asyncio
async def test_approve_and_unapprove(client, gateway, login, directory):
    login(role="admin")

    approved = await client.post(
        "/admin/users/approve", json={"user_ids": [directory["pending"]["id"]]}
    )
    assert approved.json() == {"affected": 1, "message": "Approved 1 user"}
    assert all(p["approved"] for p in gateway.rows("profiles"))

    unapproved = await client.post(
        "/admin/users/unapprove",
        json={"user_ids": [directory["pending"]["id"], directory["member"]["id"]]},
    )
    assert unapproved.json()["message"] == "Unapproved 2 users"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "path,target,message",
    [
        ("/admin/users/unapprove", "self", "You cannot unapprove yourself"),
        (
            "/admin/users/unapprove",
            "admin",
            "You cannot unapprove admins. Admins must be removed instead.",
        ),
        ("/admin/users/remove", "self", "You cannot remove yourself"),
        ("/admin/users/approve", None, "No users selected"),
    ],
)
async def test_self_protection(client, gateway, login, directory, path, target, message):
    me = login(role="admin")
    ids = {"self": [me["id"]], "admin": [directory["admin"]["id"]], None: []}[target]

    response = await client.post(path, json={"user_ids": ids})

    assert response.status_code == 400
    assert response.json()["detail"] == message
    assert not [call for call in gateway.calls if call[0] in ("update", "delete")]


@pytest.mark.asyncio
async def test_promoting_to_admin_needs_confirmation(client, gateway, login, directory):
    login(role="admin")
    member_id = directory["member"]["id"]

    refused = await client.patch(f"/admin/users/{member_id}/role", json={"role": "admin"})
    assert refused.status_code == 400
    assert refused.json()["detail"] == 'You must type "admin" to confirm'

    promoted = await client.patch(
        f"/admin/users/{member_id}/role", json={"role": "admin", "confirmation": "admin"}
    )
    assert promoted.status_code == 200
    assert promoted.json()["role"] == "admin"


@pytest.mark.asyncio
async def test_admin_cannot_demote_self(client, login):
    me = login(role="admin")

    response = await client.patch(f"/admin/users/{me['id']}/role", json={"role": "leader"})

    assert response.status_code == 400
    assert response.json()["detail"] == "You cannot change your own admin role"


@pytest.mark.asyncio
async def test_role_change_for_missing_user(client, login):
    login(role="admin")
    response = await client.patch("/admin/users/nobody/role", json={"role": "leader"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_remove_cascades_to_hours_and_auth_users(client, gateway, login, directory):
    login(role="admin")
    member_id = directory["member"]["id"]
    gateway.add("service_hours", ServiceHourFactory.create(user_id=member_id))

    response = await client.post("/admin/users/remove", json={"user_ids": [member_id]})

    assert response.json() == {"affected": 1, "message": "Removed 1 user"}
    assert gateway.rows("service_hours") == []
    assert member_id not in [p["id"] for p in gateway.rows("profiles")]
    assert gateway.deleted_auth_users == [member_id]


@pytest.mark.asyncio
async def test_remove_single_user(client, gateway, login, directory):
    login(role="admin")

    response = await client.delete(f"/admin/users/{directory['pending']['id']}")

    assert response.status_code == 200
    assert gateway.deleted_auth_users == [directory["pending"]["id"]]


@pytest.mark.asyncio
async def test_leaders_cannot_manage_users(client, login):
    login(role="leader")
    response = await client.get("/admin/users")
    assert response.status_code == 403

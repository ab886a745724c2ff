import datetime as dt

import pytest
from libs.common.datetime_utils import utc_now
from tests.factories import PostFactory, add_profile


@pytest.fixture
def leader(gateway):
    return add_profile(gateway, first_name="Lee", last_name="Leader", role="leader")


@pytest.mark.asyncio
async def test_posts_newest_first_with_authors(client, gateway, login, leader):
    login()
    now = utc_now()
    older = PostFactory.create(
        user_id=leader["id"],
        title="Old",
        created_at=(now - dt.timedelta(days=2)).isoformat(),
    )
    newer = PostFactory.create(
        user_id=leader["id"],
        title="New",
        created_at=(now - dt.timedelta(minutes=5)).isoformat(),
    )
    gateway.add("communications", older, newer)

    response = await client.get("/communications/posts")

    assert response.status_code == 200
    data = response.json()
    assert data["can_manage"] is False
    assert [p["title"] for p in data["posts"]] == ["New", "Old"]
    assert data["posts"][0]["posted_ago"] == "5m ago"
    assert data["posts"][1]["posted_ago"] == "2d ago"
    assert data["posts"][0]["author"]["first_name"] == "Lee"


@pytest.mark.asyncio
async def test_leader_publishes_post(client, gateway, login):
    me = login(role="leader")

    response = await client.post(
        "/communications/posts", json={"title": " Drive ", "description": "Bring cans"}
    )

    assert response.status_code == 201
    post = response.json()["posts"][0]
    assert (post["title"], post["reply_count"]) == ("Drive", 0)
    assert gateway.rows("communications")[0]["user_id"] == me["id"]


@pytest.mark.asyncio
async def test_post_requires_title_and_description(client, login):
    login(role="admin")
    response = await client.post(
        "/communications/posts", json={"title": "Drive", "description": "  "}
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Please fill in both title and description"


@pytest.mark.asyncio
async def test_members_cannot_publish(client, login):
    login()
    response = await client.post(
        "/communications/posts", json={"title": "a", "description": "b"}
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_edit_and_delete_post(client, gateway, login, leader):
    login(role="leader")
    post = PostFactory.create(user_id=leader["id"])
    gateway.add("communications", post)

    edited = await client.patch(
        f"/communications/posts/{post['id']}", json={"title": "Edited", "description": "New"}
    )
    assert edited.json()["posts"][0]["title"] == "Edited"

    deleted = await client.delete(f"/communications/posts/{post['id']}")
    assert deleted.json()["posts"] == []


@pytest.mark.asyncio
async def test_member_replies_append_in_order(client, gateway, login, leader):
    login(first_name="Ana", last_name="Zeller")
    post = PostFactory.create(user_id=leader["id"])
    gateway.add("communications", post)

    await client.post(f"/communications/posts/{post['id']}/replies", json={"content": "first"})
    response = await client.post(
        f"/communications/posts/{post['id']}/replies", json={"content": " second "}
    )

    assert response.status_code == 201
    replies = response.json()["posts"][0]["replies"]
    assert [r["content"] for r in replies] == ["first", "second"]
    assert replies[0]["user_name"] == "Ana Zeller"
    assert ("rpc", "append_communication_reply") in gateway.calls


@pytest.mark.asyncio
async def test_empty_reply_and_missing_post(client, gateway, login):
    login()

    empty = await client.post("/communications/posts/nope/replies", json={"content": " "})
    missing = await client.post("/communications/posts/nope/replies", json={"content": "hi"})

    assert empty.status_code == 400
    assert empty.json()["detail"] == "Reply cannot be empty"
    assert missing.status_code == 404

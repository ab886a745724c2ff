import pytest
from fastapi.testclient import TestClient
from libs.common.realtime import InMemoryChangeFeed, get_change_feed
from starlette.websockets import WebSocketDisconnect
from tests.factories import PostFactory, ServiceHourFactory, add_profile, make_token


@pytest.fixture
def live_client(app):
    with TestClient(app) as client:
        yield client


def _url(view: str, token: str, query: str = "") -> str:
    return f"/api/v1/live/{view}?token={token}{query}"


def test_posts_view_sends_snapshot_then_updates(live_client, gateway, change_feed):
    me = add_profile(gateway)
    gateway.add("communications", PostFactory.create(title="First"))

    with live_client.websocket_connect(_url("posts", make_token(me["id"]))) as ws:
        initial = ws.receive_json()
        assert initial["view"] == "posts"
        assert initial["reason"] == "initial"
        assert [p["title"] for p in initial["data"]["posts"]] == ["First"]

        gateway.add("communications", PostFactory.create(title="Second"))
        live_client.portal.call(change_feed.publish, "communications", "INSERT")

        update = ws.receive_json()
        assert update["reason"] == "communications:INSERT"
        assert len(update["data"]["posts"]) == 2

        ws.send_json({"type": "ping"})
        assert ws.receive_json() == {"type": "pong"}

        ws.send_json({"type": "refresh"})
        assert ws.receive_json()["reason"] == "refresh"


def test_my_hours_view(live_client, gateway):
    me = add_profile(gateway)
    gateway.add("service_hours", ServiceHourFactory.create(user_id=me["id"], hours=4))

    with live_client.websocket_connect(_url("my-hours", make_token(me["id"]))) as ws:
        data = ws.receive_json()["data"]

    assert data["summary"]["overall"] == 4


def test_catalogue_view_reads_filters_from_query(live_client, gateway):
    leader = add_profile(gateway, role="leader", grade=11)
    add_profile(gateway, first_name="Ana", grade=10)

    url = _url("catalogue", make_token(leader["id"]), "&grades=10&trimesters=1")
    with live_client.websocket_connect(url) as ws:
        data = ws.receive_json()["data"]

    assert [row["first_name"] for row in data["rows"]] == ["Ana"]
    assert data["trimester_label"] == "T1"


def test_bad_params_close_the_view(live_client, gateway):
    leader = add_profile(gateway, role="leader")

    url = _url("catalogue", make_token(leader["id"]), "&sort_by=shoe_size")
    with live_client.websocket_connect(url) as ws:
        with pytest.raises(WebSocketDisconnect) as exc:
            ws.receive_json()

    assert exc.value.code == 4400


@pytest.mark.parametrize(
    "view,profile,code",
    [
        ("users", {"role": "member"}, 4003),
        ("my-hours", {"role": "admin"}, 4003),
        ("posts", {"approved": False}, 4003),
        ("gossip", {}, 4004),
    ],
)
def test_views_refuse_the_wrong_audience(live_client, gateway, view, profile, code):
    me = add_profile(gateway, **profile)

    with pytest.raises(WebSocketDisconnect) as exc:
        with live_client.websocket_connect(_url(view, make_token(me["id"]))):
            pass

    assert exc.value.code == code


def test_invalid_token_is_refused(live_client):
    with pytest.raises(WebSocketDisconnect) as exc:
        with live_client.websocket_connect(_url("posts", "not-a-token")):
            pass

    assert exc.value.code == 4001


def test_failed_subscription_releases_earlier_ones(live_client, app, gateway):
    class FlakyFeed(InMemoryChangeFeed):
        async def _open(self, table: str) -> None:
            if table == "profiles":
                raise ConnectionError("realtime unavailable")

    feed = FlakyFeed()
    app.dependency_overrides[get_change_feed] = lambda: feed
    leader = add_profile(gateway, role="leader")
    url = _url("catalogue", make_token(leader["id"]))

    with pytest.raises(ConnectionError):
        with live_client.websocket_connect(url) as ws:
            ws.receive_json()

    assert feed.listener_count("service_hours") == 0
    assert feed.listener_count("profiles") == 0

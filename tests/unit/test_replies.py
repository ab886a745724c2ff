import datetime as dt
import re
from pathlib import Path

import pytest
from fastapi import HTTPException
from libs.auth.models import Profile
from libs.common.datetime_utils import format_relative
from services.communications_service.models import Post, Reply, ReplyLog
from services.communications_service.services.posts import build_reply

NOW = dt.datetime(2025, 10, 15, 12, 0, tzinfo=dt.timezone.utc)


def _reply(content: str) -> Reply:
    return Reply(content=content, user_id="u1", user_name="Ana Zeller", created_at=NOW)


def test_append_returns_new_log():
    first = ReplyLog().append(_reply("one"))
    second = first.append(_reply("two"))

    assert len(first) == 1
    assert [r.content for r in second] == ["one", "two"]


def test_post_loads_replies_from_stored_list():
    post = Post(
        id="p1",
        user_id="u1",
        title="Welcome",
        description="Hello",
        created_at=NOW,
        replies=[_reply("hi").model_dump(mode="json")],
    )
    assert isinstance(post.replies, ReplyLog)
    assert post.replies.replies[0].content == "hi"

    empty = Post(
        id="p2", user_id="u1", title="t", description="d", created_at=NOW, replies=None
    )
    assert len(empty.replies) == 0


def test_build_reply_strips_and_names_author():
    author = Profile(id="u1", first_name="Ana", last_name="Zeller")
    reply = build_reply("  thanks!  ", author, now=NOW)
    assert (reply.content, reply.user_name, reply.created_at) == ("thanks!", "Ana Zeller", NOW)

    with pytest.raises(HTTPException) as exc:
        build_reply("   ", author)
    assert exc.value.detail == "Reply cannot be empty"


@pytest.mark.parametrize(
    "delta,expected",
    [
        (dt.timedelta(seconds=30), "Just now"),
        (dt.timedelta(minutes=5), "5m ago"),
        (dt.timedelta(hours=3), "3h ago"),
        (dt.timedelta(days=2), "2d ago"),
        (dt.timedelta(days=30), "2025-09-15"),
    ],
)
def test_format_relative(delta, expected):
    assert format_relative(NOW - delta, NOW) == expected


def test_reply_function_is_shipped_with_matching_parameters():
    migrations = Path(__file__).resolve().parents[2] / "supabase" / "migrations"
    sql = "\n".join(path.read_text() for path in sorted(migrations.glob("*.sql")))

    match = re.search(r"function public\.append_communication_reply\(([^)]*)\)", sql)

    assert match is not None
    assert [arg.split()[0] for arg in match.group(1).split(",")] == ["post_id", "reply"]
    assert "coalesce(c.replies, '[]'::jsonb) || jsonb_build_array(reply)" in sql


def test_format_relative_accepts_backend_timestamps():
    assert format_relative("2025-10-15T11:55:00Z", NOW) == "5m ago"
    assert format_relative("2025-10-15T09:00:00", NOW) == "3h ago"

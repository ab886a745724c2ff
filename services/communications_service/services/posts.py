"""Post listing and reply appends."""

import datetime as dt
from typing import Optional

from fastapi import HTTPException, status

from libs.auth.models import Profile
from libs.common.datetime_utils import format_relative, utc_now
from libs.common.logging import get_logger
from libs.common.supabase import Order, SupabaseGateway
from services.communications_service.models import Post, Reply, ReplyLog
from services.communications_service.schemas import (
    AuthorResponse,
    PostListResponse,
    PostResponse,
    PostWrite,
    ReplyResponse,
)

logger = get_logger(__name__)

TABLE = "communications"
AUTHOR_COLUMNS = "id, first_name, last_name, role"


def clean_post(payload: PostWrite) -> dict[str, str]:
    title, description = payload.title.strip(), payload.description.strip()
    if not title or not description:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please fill in both title and description",
        )
    return {"title": title, "description": description}


def build_reply(content: str, author: Profile, now: Optional[dt.datetime] = None) -> Reply:
    content = content.strip()
    if not content:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Reply cannot be empty"
        )
    return Reply(
        content=content,
        user_id=author.id,
        user_name=f"{author.first_name or ''} {author.last_name or ''}".strip(),
        created_at=now or utc_now(),
    )


async def append_reply(gateway: SupabaseGateway, post_id: str, reply: Reply) -> ReplyLog:
    """Append server-side so concurrent replies are all kept."""
    result = await gateway.rpc(
        "append_communication_reply",
        {"post_id": post_id, "reply": reply.model_dump(mode="json")},
    )
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    return ReplyLog.from_raw(result)


def _post_response(
    post: Post, author: Optional[dict], now: dt.datetime
) -> PostResponse:
    return PostResponse(
        id=post.id,
        user_id=post.user_id,
        title=post.title,
        description=post.description,
        created_at=post.created_at,
        posted_ago=format_relative(post.created_at, now),
        author=AuthorResponse(**author) if author else None,
        replies=[
            ReplyResponse(
                **reply.model_dump(), posted_ago=format_relative(reply.created_at, now)
            )
            for reply in post.replies
        ],
        reply_count=len(post.replies),
    )


async def load_posts(gateway: SupabaseGateway, can_manage: bool) -> PostListResponse:
    rows = await gateway.select(TABLE, order=[Order("created_at", desc=True)])
    posts = [Post(**row) for row in rows]

    author_ids = sorted({p.user_id for p in posts})
    authors = await gateway.select("profiles", AUTHOR_COLUMNS, in_filters={"id": author_ids})
    by_id = {a["id"]: a for a in authors}

    now = utc_now()
    return PostListResponse(
        posts=[_post_response(p, by_id.get(p.user_id), now) for p in posts],
        can_manage=can_manage,
    )

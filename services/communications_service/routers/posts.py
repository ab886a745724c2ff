"""Chapter posts. Leaders and admins publish; every approved member replies."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from libs.auth.dependencies import get_gateway, require_approved, require_leader
from libs.auth.models import Profile
from libs.common.logging import get_logger
from libs.common.supabase import SupabaseGateway
from services.communications_service.schemas import PostListResponse, PostWrite, ReplyCreate
from services.communications_service.services.posts import (
    TABLE,
    append_reply,
    build_reply,
    clean_post,
    load_posts,
)

logger = get_logger(__name__)
router = APIRouter(prefix="/communications/posts", tags=["communications"])


@router.get("", response_model=PostListResponse)
async def list_posts(
    profile: Annotated[Profile, Depends(require_approved)],
    gateway: Annotated[SupabaseGateway, Depends(get_gateway)],
):
    return await load_posts(gateway, can_manage=profile.can_manage_content)


@router.post("", response_model=PostListResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    payload: PostWrite,
    profile: Annotated[Profile, Depends(require_leader)],
    gateway: Annotated[SupabaseGateway, Depends(get_gateway)],
):
    row = await gateway.insert(
        TABLE, {"user_id": profile.id, **clean_post(payload), "replies": []}
    )
    logger.info("Post created", extra={"extra_fields": {"post_id": row.get("id")}})
    return await load_posts(gateway, can_manage=True)


@router.patch("/{post_id}", response_model=PostListResponse)
async def update_post(
    post_id: str,
    payload: PostWrite,
    _: Annotated[Profile, Depends(require_leader)],
    gateway: Annotated[SupabaseGateway, Depends(get_gateway)],
):
    updated = await gateway.update(TABLE, clean_post(payload), filters={"id": post_id})
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    return await load_posts(gateway, can_manage=True)


@router.delete("/{post_id}", response_model=PostListResponse)
async def delete_post(
    post_id: str,
    _: Annotated[Profile, Depends(require_leader)],
    gateway: Annotated[SupabaseGateway, Depends(get_gateway)],
):
    deleted = await gateway.delete(TABLE, filters={"id": post_id})
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    return await load_posts(gateway, can_manage=True)


@router.post(
    "/{post_id}/replies", response_model=PostListResponse, status_code=status.HTTP_201_CREATED
)
async def create_reply(
    post_id: str,
    payload: ReplyCreate,
    profile: Annotated[Profile, Depends(require_approved)],
    gateway: Annotated[SupabaseGateway, Depends(get_gateway)],
):
    reply = build_reply(payload.content, profile)
    log = await append_reply(gateway, post_id, reply)
    logger.info(
        "Reply appended",
        extra={"extra_fields": {"post_id": post_id, "reply_count": len(log)}},
    )
    return await load_posts(gateway, can_manage=profile.can_manage_content)

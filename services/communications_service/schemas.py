"""Pydantic schemas for the Communications Service."""

import datetime as dt
from typing import Optional

from pydantic import BaseModel

from libs.auth.models import Role


class PostWrite(BaseModel):
    title: str
    description: str


class ReplyCreate(BaseModel):
    content: str


class AuthorResponse(BaseModel):
    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Optional[Role] = None


class ReplyResponse(BaseModel):
    content: str
    user_id: str
    user_name: str
    created_at: dt.datetime
    posted_ago: str


class PostResponse(BaseModel):
    id: str
    user_id: str
    title: str
    description: str
    created_at: dt.datetime
    posted_ago: str
    author: Optional[AuthorResponse] = None
    replies: list[ReplyResponse]
    reply_count: int


class PostListResponse(BaseModel):
    posts: list[PostResponse]
    can_manage: bool

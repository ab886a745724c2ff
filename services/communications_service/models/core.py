"""Posts and their append-only reply logs."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Reply(BaseModel):
    """One reply. Replies are never edited once written."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    content: str
    user_id: str
    user_name: str = ""
    created_at: dt.datetime


@dataclass(frozen=True)
class ReplyLog:
    """Replies of a post in insertion order; appending returns a new log."""

    replies: tuple[Reply, ...] = ()

    @classmethod
    def from_raw(cls, raw: Optional[Iterable[Any]]) -> "ReplyLog":
        return cls(replies=tuple(Reply.model_validate(item) for item in raw or ()))

    def append(self, reply: Reply) -> "ReplyLog":
        return ReplyLog(replies=self.replies + (reply,))

    def __iter__(self) -> Iterator[Reply]:
        return iter(self.replies)

    def __len__(self) -> int:
        return len(self.replies)


class Post(BaseModel):
    """A row of the ``communications`` table."""

    model_config = ConfigDict(extra="ignore")

    id: str
    user_id: str
    title: str
    description: str
    created_at: dt.datetime
    replies: ReplyLog = Field(default_factory=ReplyLog)

    @field_validator("replies", mode="before")
    @classmethod
    def load_replies(cls, v: Any) -> Any:
        if v is None or isinstance(v, (list, tuple)):
            return ReplyLog.from_raw(v)
        return v

"""Communications Service models package."""

from services.communications_service.models.core import Post, Reply, ReplyLog

__all__ = ["Post", "Reply", "ReplyLog"]

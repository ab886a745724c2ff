"""Per-table change feed used to trigger view re-fetches.

Notifications carry only the table and the event type. Listeners re-fetch
what they need; row payloads are never forwarded.
"""

from __future__ import annotations

import asyncio
import inspect
import itertools
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Callable, Optional, Union

from supabase import acreate_client

from libs.common.config import get_settings
from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger

logger = get_logger(__name__)

TABLES = ("events", "communications", "service_hours", "profiles")
EVENT_TYPES = ("INSERT", "UPDATE", "DELETE")


@dataclass(frozen=True)
class ChangeNotification:
    table: str
    event_type: str
    at: datetime = field(default_factory=utc_now)


Listener = Callable[[ChangeNotification], Union[None, Awaitable[None]]]

_ids = itertools.count(1)


@dataclass(frozen=True)
class Subscription:
    table: str
    id: int = field(default_factory=lambda: next(_ids))


class ChangeFeed:
    """Listener registry shared by the feed implementations."""

    def __init__(self) -> None:
        self._listeners: dict[str, dict[int, Listener]] = {}

    def listener_count(self, table: str) -> int:
        return len(self._listeners.get(table, {}))

    async def subscribe(self, table: str, listener: Listener) -> Subscription:
        if table not in TABLES:
            raise ValueError(f"Unknown table: {table}")
        subscription = Subscription(table=table)
        # The listener is registered only once the channel is open.
        if not self._listeners.get(table):
            await self._open(table)
        self._listeners.setdefault(table, {})[subscription.id] = listener
        logger.debug("Subscribed to %s (%d listeners)", table, self.listener_count(table))
        return subscription

    async def unsubscribe(self, subscription: Subscription) -> None:
        listeners = self._listeners.get(subscription.table, {})
        if listeners.pop(subscription.id, None) is None:
            return
        if not listeners:
            self._listeners.pop(subscription.table, None)
            await self._close(subscription.table)

    async def _notify(self, listener: Listener, notification: ChangeNotification) -> None:
        try:
            result = listener(notification)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception(
                "Change listener failed",
                extra={"extra_fields": {"table": notification.table}},
            )

    async def dispatch(self, notification: ChangeNotification) -> None:
        listeners = list(self._listeners.get(notification.table, {}).values())
        await asyncio.gather(
            *(self._notify(listener, notification) for listener in listeners)
        )

    async def _open(self, table: str) -> None:
        pass

    async def _close(self, table: str) -> None:
        pass


class InMemoryChangeFeed(ChangeFeed):
    """Feed driven by explicit ``publish`` calls (tests, local runs)."""

    async def publish(self, table: str, event_type: str = "UPDATE") -> None:
        await self.dispatch(ChangeNotification(table=table, event_type=event_type))


class SupabaseChangeFeed(ChangeFeed):
    """Feed backed by the hosted backend's realtime postgres_changes channels."""

    def __init__(self, url: str, key: str) -> None:
        super().__init__()
        self.url = url
        self.key = key
        self._client: Any = None
        self._channels: dict[str, Any] = {}
        self._lock = asyncio.Lock()

    async def _get_client(self) -> Any:
        if self._client is None:
            self._client = await acreate_client(self.url, self.key)
        return self._client

    async def _open(self, table: str) -> None:
        async with self._lock:
            if table in self._channels:
                return
            client = await self._get_client()
            loop = asyncio.get_running_loop()

            def _on_change(payload: dict) -> None:
                event_type = (
                    payload.get("data", {}).get("type")
                    or payload.get("eventType")
                    or "UPDATE"
                )
                notification = ChangeNotification(table=table, event_type=str(event_type))
                asyncio.run_coroutine_threadsafe(self.dispatch(notification), loop)

            channel = client.channel(f"{table}_changes")
            channel.on_postgres_changes(
                "*", schema="public", table=table, callback=_on_change
            )
            await channel.subscribe()
            self._channels[table] = channel
            logger.info("Realtime channel opened", extra={"extra_fields": {"table": table}})

    async def _close(self, table: str) -> None:
        async with self._lock:
            channel = self._channels.pop(table, None)
            if channel is not None and self._client is not None:
                await self._client.remove_channel(channel)
                logger.info(
                    "Realtime channel closed", extra={"extra_fields": {"table": table}}
                )


_feed: Optional[ChangeFeed] = None


def get_change_feed() -> ChangeFeed:
    """FastAPI dependency returning the process-wide change feed."""
    global _feed
    if _feed is None:
        settings = get_settings()
        # Row-level security hides member tables from anonymous subscribers.
        _feed = SupabaseChangeFeed(
            settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY
        )
    return _feed

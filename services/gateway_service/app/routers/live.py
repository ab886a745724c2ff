"""Live views over WebSocket.

A client opens ``/live/{view}?token=...`` and receives a full snapshot right
away and again after every change to the tables the view reads. Snapshots
are recomputed from scratch, so overlapping notifications are harmless.
"""

from dataclasses import dataclass
from typing import Annotated, Awaitable, Callable, Optional

from fastapi import (
    APIRouter,
    Depends,
    Query,
    WebSocket,
    WebSocketDisconnect,
    WebSocketException,
)
from jose import JWTError
from pydantic import BaseModel, ValidationError
from starlette.datastructures import QueryParams

from libs.auth.dependencies import decode_access_token, load_profile
from libs.auth.models import AuthUser, Profile, Role
from libs.common.datetime_utils import local_today
from libs.common.logging import get_logger
from libs.common.realtime import ChangeFeed, ChangeNotification, get_change_feed
from libs.common.supabase import SupabaseGateway, get_user_client
from services.communications_service.services.posts import load_posts
from services.events_service.services.calendar_view import load_calendar
from services.members_service.models import UserFilter
from services.members_service.services.accounts import load_user_list
from services.volunteer_service.models import HourCategory
from services.volunteer_service.services.queries import (
    catalogue_query,
    load_catalogue,
    load_my_hours,
    load_signatures,
)
from services.volunteer_service.services.roster import SortKey, SortOrder

logger = get_logger(__name__)
router = APIRouter(prefix="/live", tags=["live"])

# Application-defined close codes
UNAUTHORIZED = 4001
FORBIDDEN = 4003
UNKNOWN_VIEW = 4004
BAD_PARAMS = 4400

Loader = Callable[[SupabaseGateway, Profile, QueryParams], Awaitable[BaseModel]]


@dataclass(frozen=True)
class LiveView:
    tables: tuple[str, ...]
    roles: frozenset[Role]
    load: Loader


# ── Snapshot loaders ────────────────────────────────────────────────


def _int_or_none(value: Optional[str]) -> Optional[int]:
    return int(value) if value not in (None, "") else None


def _int_list(params: QueryParams, name: str) -> Optional[list[int]]:
    if name not in params:
        return None
    return [int(v) for v in params.getlist(name) if v != ""]


async def _posts(gateway: SupabaseGateway, profile: Profile, params: QueryParams):
    return await load_posts(gateway, can_manage=profile.can_manage_content)


async def _events(gateway: SupabaseGateway, profile: Profile, params: QueryParams):
    today = local_today()
    return await load_calendar(
        gateway,
        _int_or_none(params.get("year")) or today.year,
        _int_or_none(params.get("month")) or today.month,
        can_manage=profile.can_manage_content,
    )


async def _my_hours(gateway: SupabaseGateway, profile: Profile, params: QueryParams):
    return await load_my_hours(gateway, profile.id)


async def _catalogue(gateway: SupabaseGateway, profile: Profile, params: QueryParams):
    min_hours = params.get("min_hours")
    query = catalogue_query(
        local_today(),
        search=params.get("search", ""),
        grades=_int_list(params, "grades"),
        min_hours=float(min_hours) if min_hours else None,
        trimesters=_int_list(params, "trimesters"),
        sort_by=SortKey(params.get("sort_by", SortKey.NAME.value)),
        sort_order=SortOrder(params.get("sort_order", SortOrder.ASC.value)),
    )
    return await load_catalogue(gateway, query)


async def _signatures(gateway: SupabaseGateway, profile: Profile, params: QueryParams):
    category = params.get("category")
    return await load_signatures(
        gateway,
        search=params.get("search", ""),
        trimester=_int_or_none(params.get("trimester")),
        category=HourCategory(category) if category else None,
        grade=_int_or_none(params.get("grade")),
    )


async def _users(gateway: SupabaseGateway, profile: Profile, params: QueryParams):
    user_filter = UserFilter(params.get("filter", UserFilter.ALL.value))
    return await load_user_list(gateway, user_filter, params.get("search", ""))


ALL_ROLES = frozenset(Role)

VIEWS: dict[str, LiveView] = {
    "posts": LiveView(("communications",), ALL_ROLES, _posts),
    "events": LiveView(("events",), ALL_ROLES, _events),
    "my-hours": LiveView(
        ("service_hours",), frozenset({Role.MEMBER, Role.LEADER}), _my_hours
    ),
    "catalogue": LiveView(
        ("service_hours", "profiles"), frozenset({Role.LEADER, Role.ADMIN}), _catalogue
    ),
    "signatures": LiveView(
        ("service_hours", "profiles"), frozenset({Role.ADMIN}), _signatures
    ),
    "users": LiveView(("profiles",), frozenset({Role.ADMIN}), _users),
}


# ── Dependencies ────────────────────────────────────────────────────


def get_live_user(token: Annotated[str, Query()]) -> AuthUser:
    try:
        return decode_access_token(token)
    except (JWTError, ValidationError):
        raise WebSocketException(code=UNAUTHORIZED, reason="Could not validate credentials")


def get_live_gateway(user: Annotated[AuthUser, Depends(get_live_user)]) -> SupabaseGateway:
    return SupabaseGateway(get_user_client(user.token or ""))


# ── Endpoint ────────────────────────────────────────────────────────


@router.websocket("/{view}")
async def live_view(
    websocket: WebSocket,
    view: str,
    user: Annotated[AuthUser, Depends(get_live_user)],
    gateway: Annotated[SupabaseGateway, Depends(get_live_gateway)],
    feed: Annotated[ChangeFeed, Depends(get_change_feed)],
):
    live = VIEWS.get(view)
    if live is None:
        raise WebSocketException(code=UNKNOWN_VIEW, reason=f"Unknown view: {view}")

    profile = await load_profile(gateway, user.user_id)
    if profile is None or not profile.approved or profile.role not in live.roles:
        raise WebSocketException(
            code=FORBIDDEN, reason="You do not have permission to access this resource."
        )

    params = websocket.query_params

    async def send_snapshot(reason: str) -> None:
        snapshot = await live.load(gateway, profile, params)
        await websocket.send_json(
            {"view": view, "reason": reason, "data": snapshot.model_dump(mode="json")}
        )

    async def on_change(notification: ChangeNotification) -> None:
        await send_snapshot(f"{notification.table}:{notification.event_type}")

    await websocket.accept()
    subscriptions = []
    try:
        for table in live.tables:
            subscriptions.append(await feed.subscribe(table, on_change))
        logger.info(
            "Live view opened",
            extra={"extra_fields": {"view": view, "user_id": user.user_id}},
        )
        try:
            await send_snapshot("initial")
        except (ValueError, ValidationError) as exc:
            await websocket.close(code=BAD_PARAMS, reason=str(exc)[:120])
            return

        while True:
            message = await websocket.receive_json()
            if message.get("type") == "ping":
                await websocket.send_json({"type": "pong"})
            elif message.get("type") == "refresh":
                await send_snapshot("refresh")
    except WebSocketDisconnect:
        pass
    finally:
        for subscription in subscriptions:
            await feed.unsubscribe(subscription)
        logger.info("Live view closed", extra={"extra_fields": {"view": view}})

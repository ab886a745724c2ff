"""Thin async gateway over the hosted Supabase backend.

supabase-py is synchronous, so every call is pushed to a worker thread with
``asyncio.to_thread``. All failures surface as ``BackendError`` so routers can
tell authorization rejections apart from generic backend failures.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from supabase import Client, create_client

from libs.common.config import get_settings
from libs.common.logging import get_logger

logger = get_logger(__name__)

# PostgREST / Postgres codes that mean "row security said no".
_AUTHORIZATION_CODES = {"42501", "PGRST301", "PGRST302"}


class BackendError(Exception):
    """A record, RPC or session operation against the backend failed."""

    def __init__(
        self, operation: str, message: str, status_code: Optional[int] = None
    ):
        super().__init__(f"{operation}: {message}")
        self.operation = operation
        self.message = message
        self.status_code = status_code

    @property
    def is_authorization(self) -> bool:
        return self.status_code in (401, 403)

    @property
    def is_auth_client_error(self) -> bool:
        """The auth API refused the request itself (bad credentials, taken e-mail)."""
        return (
            self.operation.startswith("auth ")
            and self.status_code is not None
            and 400 <= self.status_code < 500
            and not self.is_authorization
        )


def _status_from_exception(exc: Exception) -> Optional[int]:
    status = getattr(exc, "status", None) or getattr(exc, "status_code", None)
    if isinstance(status, int):
        return status
    code = getattr(exc, "code", None)
    if code in _AUTHORIZATION_CODES:
        return 403
    return None


def _message_from_exception(exc: Exception) -> str:
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(exc) or exc.__class__.__name__


async def _run(operation: str, func: Callable[[], Any]) -> Any:
    try:
        return await asyncio.to_thread(func)
    except BackendError:
        raise
    except Exception as exc:
        status_code = _status_from_exception(exc)
        message = _message_from_exception(exc)
        logger.error(
            "Backend operation failed",
            extra={
                "extra_fields": {
                    "operation": operation,
                    "status_code": status_code,
                    "error": message,
                }
            },
        )
        raise BackendError(operation, message, status_code) from exc


# ---------------------------------------------------------------------------
# Clients
# ---------------------------------------------------------------------------


@lru_cache
def get_supabase_client() -> Client:
    """Anon-key client used for sign-up / sign-in."""
    settings = get_settings()
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)


@lru_cache
def get_supabase_admin_client() -> Client:
    """Service-role client for the admin auth API. Never exposed to members."""
    settings = get_settings()
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)


def get_user_client(access_token: str) -> Client:
    """Anon-key client whose table/RPC requests run as the given user."""
    settings = get_settings()
    client = create_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)
    client.postgrest.auth(access_token)
    return client


# ---------------------------------------------------------------------------
# Record operations
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Order:
    column: str
    desc: bool = False


def _apply_filters(
    query: Any,
    filters: Optional[Mapping[str, Any]] = None,
    in_filters: Optional[Mapping[str, Sequence[Any]]] = None,
    not_null: Iterable[str] = (),
) -> Any:
    for column, value in (filters or {}).items():
        query = query.eq(column, value)
    for column, values in (in_filters or {}).items():
        query = query.in_(column, list(values))
    for column in not_null:
        query = query.not_.is_(column, "null")
    return query


class SupabaseGateway:
    """Filtered select / insert / update / delete / rpc against backend tables."""

    def __init__(self, client: Client):
        self.client = client

    async def select(
        self,
        table: str,
        columns: str = "*",
        *,
        filters: Optional[Mapping[str, Any]] = None,
        in_filters: Optional[Mapping[str, Sequence[Any]]] = None,
        not_null: Iterable[str] = (),
        order: Sequence[Order] = (),
    ) -> list[dict]:
        not_null = tuple(not_null)
        if in_filters is not None and any(not v for v in in_filters.values()):
            # PostgREST rejects "in.()"; an empty id set matches nothing.
            return []

        def _query() -> list[dict]:
            query = self.client.table(table).select(columns)
            query = _apply_filters(query, filters, in_filters, not_null)
            for item in order:
                query = query.order(item.column, desc=item.desc)
            return query.execute().data or []

        return await _run(f"select {table}", _query)

    async def select_one(
        self,
        table: str,
        columns: str = "*",
        *,
        filters: Mapping[str, Any],
    ) -> Optional[dict]:
        rows = await self.select(table, columns, filters=filters)
        return rows[0] if rows else None

    async def insert(self, table: str, row: Mapping[str, Any]) -> dict:
        def _query() -> list[dict]:
            return self.client.table(table).insert(dict(row)).execute().data or []

        rows = await _run(f"insert {table}", _query)
        return rows[0] if rows else dict(row)

    async def update(
        self,
        table: str,
        values: Mapping[str, Any],
        *,
        filters: Optional[Mapping[str, Any]] = None,
        in_filters: Optional[Mapping[str, Sequence[Any]]] = None,
    ) -> list[dict]:
        if not filters and not in_filters:
            raise ValueError("update requires at least one filter")
        if in_filters is not None and any(not v for v in in_filters.values()):
            return []

        def _query() -> list[dict]:
            query = self.client.table(table).update(dict(values))
            query = _apply_filters(query, filters, in_filters)
            return query.execute().data or []

        return await _run(f"update {table}", _query)

    async def delete(
        self,
        table: str,
        *,
        filters: Optional[Mapping[str, Any]] = None,
        in_filters: Optional[Mapping[str, Sequence[Any]]] = None,
    ) -> list[dict]:
        if not filters and not in_filters:
            raise ValueError("delete requires at least one filter")
        if in_filters is not None and any(not v for v in in_filters.values()):
            return []

        def _query() -> list[dict]:
            query = _apply_filters(self.client.table(table).delete(), filters, in_filters)
            return query.execute().data or []

        return await _run(f"delete {table}", _query)

    async def rpc(self, name: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        def _query() -> Any:
            return self.client.rpc(name, dict(params or {})).execute().data

        return await _run(f"rpc {name}", _query)


# ---------------------------------------------------------------------------
# Session operations
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SessionTokens:
    access_token: str
    refresh_token: str
    expires_at: Optional[int]
    user_id: str


def _tokens_from_response(response: Any) -> SessionTokens:
    session = getattr(response, "session", None)
    user = getattr(response, "user", None)
    if session is None or user is None:
        raise BackendError("auth", "No session was returned", 401)
    return SessionTokens(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_at=getattr(session, "expires_at", None),
        user_id=str(user.id),
    )


class AuthGateway:
    """Sign-up, sign-in, sign-out, session restore and password updates."""

    def __init__(self, client: Client, admin_client: Client):
        self.client = client
        self.admin_client = admin_client

    async def sign_up(
        self, email: str, password: str, metadata: Mapping[str, Any], redirect_to: str
    ) -> None:
        credentials = {
            "email": email,
            "password": password,
            "options": {"data": dict(metadata), "email_redirect_to": redirect_to},
        }
        await _run("auth sign_up", lambda: self.client.auth.sign_up(credentials))

    async def sign_in(self, email: str, password: str) -> SessionTokens:
        response = await _run(
            "auth sign_in",
            lambda: self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            ),
        )
        return _tokens_from_response(response)

    async def get_user(self, access_token: str) -> Optional[str]:
        """Id of the user owning ``access_token``, or None when it is no longer valid."""
        response = await _run("auth get_user", lambda: self.client.auth.get_user(access_token))
        user = getattr(response, "user", None)
        return str(user.id) if user else None

    async def refresh_session(self, refresh_token: str) -> SessionTokens:
        response = await _run(
            "auth refresh", lambda: self.client.auth.refresh_session(refresh_token)
        )
        return _tokens_from_response(response)

    async def sign_out(self, access_token: str) -> None:
        await _run(
            "auth sign_out", lambda: self.admin_client.auth.admin.sign_out(access_token)
        )

    async def update_password(self, user_id: str, password: str) -> None:
        await _run(
            "auth update_password",
            lambda: self.admin_client.auth.admin.update_user_by_id(
                user_id, {"password": password}
            ),
        )


def get_auth_gateway() -> AuthGateway:
    """FastAPI dependency for session operations."""
    return AuthGateway(get_supabase_client(), get_supabase_admin_client())

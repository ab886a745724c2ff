"""Route access decisions and the session state machine.

Every call evaluates from scratch; nothing here caches a decision. Route
changes and session/profile changes both go back through ``resolve_route``.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Callable, Optional

from libs.auth.models import Profile, Role
from libs.common.logging import get_logger

logger = get_logger(__name__)


class AccessState(str, enum.Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED_UNAPPROVED = "authenticated_unapproved"
    AUTHENTICATED_APPROVED = "authenticated_approved"


LOGIN = "/login"
SIGNUP = "/signup"
ROOT = "/"
PENDING = "/pending"
DASHBOARD = "/dashboard"

PUBLIC_PATHS = frozenset({LOGIN, SIGNUP, ROOT})

ALL_ROLES = frozenset(Role)

# path -> roles allowed once approved
APP_ROUTES: dict[str, frozenset[Role]] = {
    DASHBOARD: ALL_ROLES,
    "/volunteer": frozenset({Role.MEMBER, Role.LEADER}),
    "/calendar": ALL_ROLES,
    "/settings": ALL_ROLES,
    "/members": frozenset({Role.LEADER, Role.ADMIN}),
    "/signatures": frozenset({Role.ADMIN}),
    "/users": frozenset({Role.ADMIN}),
}


@dataclass(frozen=True)
class RouteDecision:
    path: str
    allowed: bool
    redirect_to: Optional[str] = None
    # Session exists but its profile row does not.
    profile_missing: bool = False

    @property
    def target(self) -> str:
        return self.path if self.allowed else (self.redirect_to or self.path)


def _normalize(path: str) -> str:
    path = (path or ROOT).split("?", 1)[0]
    if len(path) > 1:
        path = path.rstrip("/")
    return path or ROOT


def resolve_route(path: str, state: AccessState, role: Optional[Role] = None) -> RouteDecision:
    """Decide whether ``path`` may be shown in ``state``, or where to go instead."""
    path = _normalize(path)

    if state == AccessState.UNAUTHENTICATED:
        if path in PUBLIC_PATHS:
            return RouteDecision(path, allowed=True)
        return RouteDecision(path, allowed=False, redirect_to=LOGIN)

    if state == AccessState.AUTHENTICATING:
        if path in (PENDING, DASHBOARD):
            return RouteDecision(path, allowed=True, profile_missing=True)
        return RouteDecision(path, allowed=False, redirect_to=DASHBOARD)

    if state == AccessState.AUTHENTICATED_UNAPPROVED:
        if path == PENDING:
            return RouteDecision(path, allowed=True)
        return RouteDecision(path, allowed=False, redirect_to=PENDING)

    allowed_roles = APP_ROUTES.get(path)
    if allowed_roles is None or role not in allowed_roles:
        return RouteDecision(path, allowed=False, redirect_to=DASHBOARD)
    return RouteDecision(path, allowed=True)


def state_for(has_session: bool, profile: Optional[Profile]) -> AccessState:
    """Derive the access state from the session and the loaded profile."""
    if not has_session:
        return AccessState.UNAUTHENTICATED
    if profile is None:
        return AccessState.AUTHENTICATING
    if profile.approved:
        return AccessState.AUTHENTICATED_APPROVED
    return AccessState.AUTHENTICATED_UNAPPROVED


Listener = Callable[[AccessState, Optional[Profile]], None]


class SessionTracker:
    """Session lifecycle: sign-in/restore, profile load, sign-out."""

    def __init__(self) -> None:
        self.state = AccessState.UNAUTHENTICATED
        self.profile: Optional[Profile] = None
        self._listeners: list[Listener] = []

    def on_change(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that removes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _set(self, state: AccessState, profile: Optional[Profile]) -> None:
        self.state = state
        self.profile = profile
        logger.debug("Access state -> %s", state.value)
        for listener in list(self._listeners):
            listener(state, profile)

    def sign_in(self) -> None:
        self._set(AccessState.AUTHENTICATING, None)

    def restore(self) -> None:
        self._set(AccessState.AUTHENTICATING, None)

    def profile_loaded(self, profile: Profile) -> None:
        if self.state == AccessState.UNAUTHENTICATED:
            raise RuntimeError("profile loaded without a session")
        self._set(state_for(True, profile), profile)

    def profile_missing(self) -> None:
        if self.state == AccessState.UNAUTHENTICATED:
            raise RuntimeError("profile lookup without a session")
        self._set(AccessState.AUTHENTICATING, None)

    def sign_out(self) -> None:
        self._set(AccessState.UNAUTHENTICATED, None)

    def resolve(self, path: str) -> RouteDecision:
        role = self.profile.role if self.profile else None
        return resolve_route(path, self.state, role)


# ── Sidebar ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class SidebarState:
    is_mobile: bool = False
    mobile_open: bool = False


@dataclass(frozen=True)
class NavLink:
    path: str
    label: str
    active: bool = False


@dataclass(frozen=True)
class Navigation:
    links: list[NavLink] = field(default_factory=list)
    sidebar: SidebarState = field(default_factory=SidebarState)


_NAV_ITEMS: list[tuple[str, str]] = [
    (DASHBOARD, "Dashboard"),
    ("/volunteer", "My Hours"),
    ("/members", "Catalogue"),
    ("/signatures", "Signatures"),
    ("/users", "Users"),
    ("/calendar", "Calendar"),
    ("/settings", "Settings"),
]


def navigation_for(
    role: Role, sidebar: SidebarState = SidebarState(), current_path: str = DASHBOARD
) -> Navigation:
    """Links the sidebar shows for ``role``; Calendar is a mobile-only entry."""
    current_path = _normalize(current_path)
    links = []
    for path, label in _NAV_ITEMS:
        if role not in APP_ROUTES[path]:
            continue
        if path == "/calendar" and not sidebar.is_mobile:
            continue
        links.append(NavLink(path=path, label=label, active=path == current_path))
    return Navigation(links=links, sidebar=sidebar)

import pytest
from libs.auth.access import (
    AccessState,
    SessionTracker,
    SidebarState,
    navigation_for,
    resolve_route,
    state_for,
)
from libs.auth.models import Profile, Role


def _profile(role=Role.MEMBER, approved=True) -> Profile:
    return Profile(id="u1", first_name="Ana", last_name="Zeller", role=role, approved=approved)


@pytest.mark.parametrize("path", ["/login", "/signup", "/"])
def test_public_paths_open_without_session(path):
    decision = resolve_route(path, AccessState.UNAUTHENTICATED)
    assert decision.allowed
    assert decision.target == path


@pytest.mark.parametrize("path", ["/dashboard", "/volunteer", "/users", "/pending"])
def test_private_paths_redirect_to_login(path):
    decision = resolve_route(path, AccessState.UNAUTHENTICATED)
    assert not decision.allowed
    assert decision.redirect_to == "/login"


def test_unapproved_user_is_held_on_pending():
    assert resolve_route("/pending", AccessState.AUTHENTICATED_UNAPPROVED).allowed
    decision = resolve_route("/dashboard", AccessState.AUTHENTICATED_UNAPPROVED, Role.ADMIN)
    assert decision.redirect_to == "/pending"


def test_session_without_profile_flags_missing_profile():
    decision = resolve_route("/dashboard", AccessState.AUTHENTICATING)
    assert decision.allowed and decision.profile_missing
    assert resolve_route("/users", AccessState.AUTHENTICATING).redirect_to == "/dashboard"


@pytest.mark.parametrize(
    "path,role,allowed",
    [
        ("/volunteer", Role.MEMBER, True),
        ("/volunteer", Role.ADMIN, False),
        ("/members", Role.LEADER, True),
        ("/members", Role.MEMBER, False),
        ("/signatures", Role.LEADER, False),
        ("/users", Role.ADMIN, True),
        ("/users", Role.MEMBER, False),
        ("/calendar", Role.MEMBER, True),
        ("/settings/", Role.LEADER, True),
        ("/nowhere", Role.ADMIN, False),
    ],
)
def test_role_gated_routes(path, role, allowed):
    decision = resolve_route(path, AccessState.AUTHENTICATED_APPROVED, role)
    assert decision.allowed is allowed
    if not allowed:
        assert decision.redirect_to == "/dashboard"


def test_state_for():
    assert state_for(False, None) == AccessState.UNAUTHENTICATED
    assert state_for(True, None) == AccessState.AUTHENTICATING
    assert state_for(True, _profile(approved=False)) == AccessState.AUTHENTICATED_UNAPPROVED
    assert state_for(True, _profile()) == AccessState.AUTHENTICATED_APPROVED


def test_tracker_transitions_notify_listeners():
    tracker = SessionTracker()
    seen = []
    unsubscribe = tracker.on_change(lambda state, profile: seen.append(state))

    tracker.sign_in()
    tracker.profile_loaded(_profile(approved=False))
    assert tracker.resolve("/users").redirect_to == "/pending"

    tracker.profile_loaded(_profile(role=Role.ADMIN))
    assert tracker.resolve("/users").allowed

    tracker.sign_out()
    assert tracker.profile is None
    assert seen == [
        AccessState.AUTHENTICATING,
        AccessState.AUTHENTICATED_UNAPPROVED,
        AccessState.AUTHENTICATED_APPROVED,
        AccessState.UNAUTHENTICATED,
    ]

    unsubscribe()
    tracker.restore()
    assert len(seen) == 4


def test_profile_without_session_is_rejected():
    with pytest.raises(RuntimeError):
        SessionTracker().profile_loaded(_profile())


def _paths(navigation):
    return [link.path for link in navigation.links]


def test_navigation_by_role():
    assert _paths(navigation_for(Role.MEMBER)) == ["/dashboard", "/volunteer", "/settings"]
    assert _paths(navigation_for(Role.LEADER)) == [
        "/dashboard",
        "/volunteer",
        "/members",
        "/settings",
    ]
    assert _paths(navigation_for(Role.ADMIN)) == [
        "/dashboard",
        "/members",
        "/signatures",
        "/users",
        "/settings",
    ]


def test_calendar_link_only_on_mobile():
    navigation = navigation_for(
        Role.MEMBER, SidebarState(is_mobile=True, mobile_open=True), current_path="/calendar"
    )
    assert "/calendar" in _paths(navigation)
    assert [link.path for link in navigation.links if link.active] == ["/calendar"]
    assert navigation.sidebar.mobile_open


def test_missing_profile_keeps_session_authenticating():
    tracker = SessionTracker()
    tracker.restore()
    tracker.profile_missing()

    assert tracker.state == AccessState.AUTHENTICATING
    assert tracker.resolve("/pending").profile_missing
    assert tracker.resolve("/calendar").redirect_to == "/dashboard"

"""Serialisation of the access machine for API responses."""

from typing import Optional

from libs.auth.access import Navigation, SidebarState, navigation_for, state_for
from libs.auth.models import Profile
from services.members_service.schemas import (
    NavigationResponse,
    NavLinkResponse,
    SessionStateResponse,
    SidebarResponse,
)


def navigation_response(navigation: Navigation) -> NavigationResponse:
    return NavigationResponse(
        links=[
            NavLinkResponse(path=link.path, label=link.label, active=link.active)
            for link in navigation.links
        ],
        sidebar=SidebarResponse(
            is_mobile=navigation.sidebar.is_mobile,
            mobile_open=navigation.sidebar.mobile_open,
        ),
    )


def session_state(
    profile: Optional[Profile], sidebar: SidebarState = SidebarState()
) -> SessionStateResponse:
    state = state_for(True, profile)
    navigation = None
    if profile is not None and profile.approved:
        navigation = navigation_response(navigation_for(profile.role, sidebar))
    return SessionStateResponse(state=state, profile=profile, navigation=navigation)

from typing import Annotated, List

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from libs.auth.access import SidebarState, navigation_for
from libs.auth.dependencies import get_gateway, require_approved
from libs.auth.models import Profile
from libs.common.datetime_utils import local_today
from libs.common.supabase import SupabaseGateway
from services.communications_service.schemas import PostListResponse
from services.communications_service.services.posts import load_posts
from services.events_service.schemas import EventResponse
from services.events_service.services.calendar_view import event_response, fetch_events
from services.members_service.schemas import NavigationResponse
from services.members_service.services.navigation import navigation_response

router = APIRouter(tags=["dashboard"])

UPCOMING_EVENTS_LIMIT = 5


class DashboardResponse(BaseModel):
    profile: Profile
    posts: PostListResponse
    upcoming_events: List[EventResponse]
    navigation: NavigationResponse


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    profile: Annotated[Profile, Depends(require_approved)],
    gateway: Annotated[SupabaseGateway, Depends(get_gateway)],
    is_mobile: bool = False,
):
    """
    Landing page for every approved role: chapter posts and the next events.
    """
    posts = await load_posts(gateway, can_manage=profile.can_manage_content)

    today = local_today()
    upcoming = [e for e in await fetch_events(gateway) if e.event_date >= today]

    return DashboardResponse(
        profile=profile,
        posts=posts,
        upcoming_events=[event_response(e) for e in upcoming[:UPCOMING_EVENTS_LIMIT]],
        navigation=navigation_response(
            navigation_for(profile.role, SidebarState(is_mobile=is_mobile))
        ),
    )

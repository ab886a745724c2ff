from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from libs.auth.dependencies import get_current_user, get_gateway
from libs.common.rate_limit import limiter
from libs.common.realtime import InMemoryChangeFeed, get_change_feed
from libs.common.supabase import get_auth_gateway
from services.gateway_service.app.main import app as gateway_app
from services.gateway_service.app.routers.live import get_live_gateway
from services.gateway_service.app.routers.navigation import get_optional_gateway
from tests.factories import add_profile, auth_user_for
from tests.fakes import FakeAuthGateway, FakeGateway


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def auth_gateway() -> FakeAuthGateway:
    return FakeAuthGateway()


@pytest.fixture
def change_feed() -> InMemoryChangeFeed:
    return InMemoryChangeFeed()


@pytest.fixture
def app(gateway, auth_gateway, change_feed):
    """
    The composed app with the hosted backend replaced by in-memory fakes.
    """
    gateway_app.dependency_overrides[get_gateway] = lambda: gateway
    gateway_app.dependency_overrides[get_optional_gateway] = lambda: gateway
    gateway_app.dependency_overrides[get_live_gateway] = lambda: gateway
    gateway_app.dependency_overrides[get_auth_gateway] = lambda: auth_gateway
    gateway_app.dependency_overrides[get_change_feed] = lambda: change_feed
    limiter.reset()

    yield gateway_app

    gateway_app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test/api/v1"
    ) as ac:
        yield ac


@pytest.fixture
def login(app, gateway):
    """
    Create a profile and authenticate as it for the rest of the test.

        admin = login(role="admin")
    """

    def _login(**overrides) -> dict:
        profile = add_profile(gateway, **overrides)
        app.dependency_overrides[get_current_user] = lambda: auth_user_for(profile)
        return profile

    return _login

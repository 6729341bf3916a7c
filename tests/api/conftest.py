"""Fixtures for API tests."""

import asyncio

import pytest
from falcon.testing import TestClient

from taskhub.interfaces.api.app import create_app
from taskhub.interfaces.api.middleware.auth import RequestUser
from taskhub.interfaces.api.middleware.request_id import RequestIdMiddleware
from taskhub.main import build_resources

from tests.conftest import build_scenario


class AuthBypassMiddleware:
    """Middleware that sets context.user from the X-Test-User header."""

    async def process_request(self, req, resp):
        user_id = req.get_header("X-Test-User")
        req.context.user = RequestUser(user_id=user_id) if user_id else None


@pytest.fixture
def scenario(fake_uow):
    """Seeded organization; the fakes hold no loop state, so a throwaway loop is fine."""
    return asyncio.run(build_scenario(fake_uow))


@pytest.fixture
def app(uow_factory, role_defaults):
    """Falcon ASGI app over the in-memory unit of work."""
    resources = build_resources(uow_factory, role_defaults)
    return create_app(resources, middleware=[RequestIdMiddleware(), AuthBypassMiddleware()])


@pytest.fixture
def client(app) -> TestClient:
    """Falcon ASGI test client."""
    return TestClient(app)

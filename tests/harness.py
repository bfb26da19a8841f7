"""Test harness for unit, integration and route tests.

Integration tests assume docker-compose services are already running.
Settings are loaded from environment variables (configure via .env or export).
"""

import httpx
import pytest_asyncio

from stagelink.interface.api.app import create_app
from stagelink.util.di import Component
from tests.di import build_test_container


def create_env_fixture(unmock: set[Component] | None = None):
    """Factory for creating test environment fixtures.

    Creates a pytest fixture that:
    - Builds a test container with specified unmocking
    - Yields request-scoped container for service access

    Args:
        unmock: Components to use real implementations for

    Returns:
        Pytest fixture function that yields AsyncContainer

    Usage:
        # Unit tests - everything mocked, no docker needed
        unit_env = create_env_fixture()

        # Integration tests - real persistence, assumes postgres running
        integration_env = create_env_fixture(unmock={"persistence"})

        @pytest.mark.asyncio
        async def test_link(unit_env):
            linker = await unit_env.get(IdentityLinker)
            ...
    """

    @pytest_asyncio.fixture
    async def _test_environment():
        container = build_test_container(unmock=unmock or set())

        async with container() as request_container:
            yield request_container

        await container.close()

    return _test_environment


class ApiEnvironment:
    """App container plus an HTTP client bound to the app."""

    def __init__(self, container, client: httpx.AsyncClient) -> None:
        self.container = container
        self.client = client

    async def get(self, dependency_type):
        """Resolve an APP-scoped dependency shared with the running app."""
        return await self.container.get(dependency_type)


def create_api_fixture(unmock: set[Component] | None = None):
    """Factory for fixtures that drive the API over HTTP.

    The client runs the app in-process, including background tasks, and
    keeps cookies between requests like a browser.
    """

    @pytest_asyncio.fixture
    async def _api_environment():
        container = build_test_container(unmock=unmock or set())
        app = create_app(container)
        transport = httpx.ASGITransport(app=app)

        async with httpx.AsyncClient(
            transport=transport, base_url="http://testserver"
        ) as client:
            yield ApiEnvironment(container, client)

        await container.close()

    return _api_environment

"""Pytest configuration and shared fixtures for assistant-bridge tests.

This module provides common fixtures used across all test modules,
including test app creation and async client setup.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from assistant_bridge import create_app
from assistant_bridge.config import BridgeSettings


@pytest.fixture
def test_settings():
    """Create test settings with a configured agent and short timeouts.

    Returns:
        BridgeSettings: Settings instance configured for testing.
    """
    return BridgeSettings(
        host="127.0.0.1",
        port=8000,
        api_key="test-key",
        base_url="http://remote.test/v1",
        agent_id="asst_test",
        provider="assistant_bridge.providers.calculator:Calculator",
        prompt_timeout_s=5.0,
        poll_interval_s=0.01,
        log_level="DEBUG",
        cors_origins=["*"],
    )


@pytest.fixture
def test_app(test_settings):
    """Create a FastAPI test application instance.

    Args:
        test_settings: Test settings fixture.

    Returns:
        FastAPI: Configured test application.
    """
    return create_app(settings=test_settings)


@pytest_asyncio.fixture
async def async_client(test_app):
    """Create an async HTTP client for testing FastAPI endpoints.

    Args:
        test_app: Test application fixture.

    Yields:
        AsyncClient: Async HTTP client for making test requests.
    """
    # Trigger the lifespan startup manually for tests
    async with test_app.router.lifespan_context(test_app):
        transport = ASGITransport(app=test_app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client

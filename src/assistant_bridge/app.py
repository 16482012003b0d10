"""FastAPI application factory and lifespan management.

This module contains the create_app() factory function that creates and configures
the FastAPI application instance, including lifespan management for startup/shutdown
and router registration.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from assistant_bridge import __version__
from assistant_bridge.capabilities import derive_registry, load_provider_class
from assistant_bridge.config import BridgeSettings
from assistant_bridge.remote import AgentIdentity, AssistantsClient
from assistant_bridge.routers import capabilities, health, sessions
from assistant_bridge.sessions import SessionManager

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for FastAPI application.

    Startup creates the shared remote client, loads the capability provider
    and derives its registry. A SessionManager is only created when an agent
    id is configured. Shutdown closes every live session before the client,
    so no remote thread outlives the server.

    Args:
        app: The FastAPI application instance.

    Yields:
        None: Control is yielded while the app is running.
    """
    settings: BridgeSettings = app.state.settings

    app.state.assistants_client = AssistantsClient(
        api_key=settings.api_key,
        base_url=settings.base_url,
        timeout=settings.request_timeout_s,
    )

    provider_cls = load_provider_class(settings.provider)
    provider = provider_cls()
    app.state.registry = derive_registry(provider_cls)
    logger.info(f"Loaded capability provider {settings.provider}")

    if settings.agent_id:
        app.state.session_manager = SessionManager(
            client=app.state.assistants_client,
            provider=provider,
            agent=AgentIdentity(settings.agent_id),
            timeout=settings.prompt_timeout_s,
            poll_interval=settings.poll_interval_s,
            debug=settings.debug,
        )
    else:
        app.state.session_manager = None
        logger.warning("No agent id configured - sessions are disabled until BRIDGE_AGENT_ID is set")

    yield

    if getattr(app.state, "session_manager", None) is not None:
        await app.state.session_manager.close_all()
    if hasattr(app.state, "assistants_client"):
        await app.state.assistants_client.close()
        logger.info("Assistants client closed")


def create_app(settings: BridgeSettings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional BridgeSettings instance. If not provided,
                  settings will be loaded from environment variables.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    if settings is None:
        from assistant_bridge.dependencies import get_settings

        settings = get_settings()

    app = FastAPI(
        title="assistant-bridge",
        description="Expose local capabilities to a remote assistants service",
        version=__version__,
        lifespan=lifespan,
    )

    # Store settings in app.state for lifespan access
    app.state.settings = settings

    # Note: FastAPI's type hints for add_middleware are overly strict
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(capabilities.router)
    app.include_router(sessions.router)

    return app

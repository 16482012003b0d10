"""Dependency injection providers for FastAPI endpoints.

This module provides FastAPI dependency functions that are used across
multiple routers to inject common dependencies like settings and services.
"""

from functools import lru_cache

from fastapi import HTTPException, Request

from assistant_bridge.capabilities import CapabilityRegistry
from assistant_bridge.config import BridgeSettings
from assistant_bridge.remote import AssistantsClient
from assistant_bridge.sessions import SessionManager


@lru_cache
def get_settings() -> BridgeSettings:
    """Get the application settings instance.

    This function is cached so that the same settings instance is reused
    across all requests. Settings are loaded from environment variables
    with the BRIDGE_ prefix.

    Returns:
        BridgeSettings: The application configuration settings.
    """
    return BridgeSettings()


def get_assistants_client(request: Request) -> AssistantsClient:
    """Get the remote service client from app state.

    Raises:
        HTTPException: If the client is not initialized (503 Service Unavailable).
    """
    if not hasattr(request.app.state, "assistants_client"):
        raise HTTPException(
            status_code=503,
            detail="Assistants client not initialized",
        )
    return request.app.state.assistants_client


def get_registry(request: Request) -> CapabilityRegistry:
    """Get the capability registry of the configured provider.

    Raises:
        HTTPException: If no provider was loaded (503 Service Unavailable).
    """
    registry = getattr(request.app.state, "registry", None)
    if registry is None:
        raise HTTPException(
            status_code=503,
            detail="Capability provider not loaded",
        )
    return registry


def get_session_manager(request: Request) -> SessionManager:
    """Get the SessionManager created at startup.

    The manager only exists when an agent id is configured.

    Raises:
        HTTPException: If no agent id is configured (503 Service Unavailable).
    """
    session_manager = getattr(request.app.state, "session_manager", None)
    if session_manager is None:
        raise HTTPException(
            status_code=503,
            detail="No agent configured; run `assistant-bridge register` and set BRIDGE_AGENT_ID",
        )
    return session_manager

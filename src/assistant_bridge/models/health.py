"""Health check response model."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response model for the health check endpoint.

    Attributes:
        status: Health status indicator ("ok" or "error").
        version: The version of assistant-bridge.
        remote_connected: Whether the remote service is reachable.
        remote_base_url: Base URL of the remote service.
        agent_configured: Whether an agent id is configured for sessions.
    """

    status: str = Field(..., description="Health status of the service")
    version: str = Field(..., description="Version of assistant-bridge")
    remote_connected: bool | None = Field(
        default=None,
        description="Whether the remote assistants service is reachable",
    )
    remote_base_url: str | None = Field(
        default=None,
        description="Base URL of the remote assistants service",
    )
    agent_configured: bool = Field(
        default=False,
        description="Whether an agent id is configured",
    )

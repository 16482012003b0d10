"""Health check endpoint router."""

import logging

from fastapi import APIRouter, Request

from assistant_bridge import __version__
from assistant_bridge.models.health import HealthResponse
from assistant_bridge.remote import AssistantsClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Health check endpoint.

    Returns the current health status and version of assistant-bridge.
    Also checks connectivity to the remote service if the client is initialized.

    Args:
        request: The FastAPI request object.

    Returns:
        HealthResponse: Health status and version information.
    """
    remote_connected = None
    remote_base_url = None

    if hasattr(request.app.state, "assistants_client"):
        client: AssistantsClient = request.app.state.assistants_client
        remote_base_url = client.base_url

        try:
            remote_connected = await client.check_connection()
            logger.debug(f"Remote connectivity check: {remote_connected}")
        except Exception as e:
            logger.warning(f"Remote connectivity check failed: {e}")
            remote_connected = False

    return HealthResponse(
        status="ok",
        version=__version__,
        remote_connected=remote_connected,
        remote_base_url=remote_base_url,
        agent_configured=getattr(request.app.state, "session_manager", None) is not None,
    )

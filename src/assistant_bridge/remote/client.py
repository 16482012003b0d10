"""Async client for the remote assistants service.

This module provides a thin async wrapper around ``httpx.AsyncClient`` for the
calls assistant-bridge needs: creating assistants and threads, posting
messages, starting and polling runs, submitting tool outputs and deleting
threads. The client is meant to be created once and shared; its connection
pool is used by every session.
"""

import logging
from typing import Any

import httpx

from assistant_bridge.errors import RemoteServiceError, TransportFailed
from assistant_bridge.remote.types import (
    CapabilityOutput,
    RunStatus,
    ThreadMessage,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"


class AssistantsClient:
    """Async client for an Assistants-style HTTP/JSON API.

    Every non-2xx response raises RemoteServiceError (with status code and
    response body); every network or IO failure raises TransportFailed.

    Attributes:
        base_url: Base URL of the remote API (without trailing slash)
        _client: The underlying httpx.AsyncClient instance
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        *,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: Bearer token for the remote API
            base_url: Base URL of the remote API
            timeout: Per-request timeout in seconds
            client: Optional pre-built httpx.AsyncClient (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._client = client or httpx.AsyncClient(timeout=timeout)
        logger.info(f"AssistantsClient initialized with base URL: {self.base_url}")

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "OpenAI-Beta": "assistants=v2",
        }

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        logger.debug(f"{method} {url}")
        try:
            response = await self._client.request(method, url, headers=self._headers(), json=json)
        except httpx.HTTPError as e:
            raise TransportFailed(f"{method} {path} failed: {e}") from e

        if not response.is_success:
            raise RemoteServiceError(
                f"{method} {path} failed: HTTP {response.status_code}",
                status_code=response.status_code,
                details=response.text,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise RemoteServiceError(
                f"{method} {path} returned invalid JSON",
                status_code=response.status_code,
                details=response.text,
            ) from e

        if not isinstance(data, dict):
            raise RemoteServiceError(
                f"{method} {path} returned an unexpected payload",
                status_code=response.status_code,
                details=data,
            )
        return data

    @staticmethod
    def _require_id(data: dict[str, Any], what: str) -> str:
        value = data.get("id")
        if not value:
            raise RemoteServiceError(f"Response for {what} has no id", details=data)
        return str(value)

    async def check_connection(self) -> bool:
        """Check whether the remote API is reachable with the configured key.

        Returns:
            bool: True if the API answered successfully, False otherwise
        """
        try:
            await self._request("GET", "/models")
            logger.debug("Remote connection check: successful")
            return True
        except TransportFailed as e:
            logger.warning(f"Remote connection check failed: {e}")
            return False

    async def create_assistant(self, definition: dict[str, Any]) -> str:
        """Create an assistant from an agent definition and return its id."""
        data = await self._request("POST", "/assistants", json=definition)
        return self._require_id(data, "create assistant")

    async def create_thread(self) -> str:
        """Create an empty thread and return its id."""
        data = await self._request("POST", "/threads", json={})
        return self._require_id(data, "create thread")

    async def post_message(self, thread_id: str, content: str, role: str = "user") -> None:
        await self._request(
            "POST",
            f"/threads/{thread_id}/messages",
            json={"role": role, "content": content},
        )

    async def create_run(self, thread_id: str, assistant_id: str) -> str:
        """Start a run of the assistant on the thread and return the run id."""
        data = await self._request(
            "POST",
            f"/threads/{thread_id}/runs",
            json={"assistant_id": assistant_id},
        )
        return self._require_id(data, "create run")

    async def get_run(self, thread_id: str, run_id: str) -> RunStatus:
        data = await self._request("GET", f"/threads/{thread_id}/runs/{run_id}")
        return RunStatus.from_api(data)

    async def submit_tool_outputs(
        self, thread_id: str, run_id: str, outputs: list[CapabilityOutput]
    ) -> None:
        """Submit the outputs of a whole batch of tool calls in one request."""
        await self._request(
            "POST",
            f"/threads/{thread_id}/runs/{run_id}/submit_tool_outputs",
            json={"tool_outputs": [o.to_api() for o in outputs]},
        )

    async def list_messages(self, thread_id: str) -> list[ThreadMessage]:
        """List thread messages in the service's default order (newest first)."""
        data = await self._request("GET", f"/threads/{thread_id}/messages")
        return [ThreadMessage.from_api(m) for m in data.get("data", [])]

    async def delete_thread(self, thread_id: str) -> bool:
        """Delete a thread.

        Returns:
            bool: The ``deleted`` flag of the response
        """
        data = await self._request("DELETE", f"/threads/{thread_id}")
        return bool(data.get("deleted"))

    async def close(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()
        logger.debug("AssistantsClient closed")

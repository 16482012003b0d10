"""AgentSession: one remote conversation with the agent.

This module provides the AgentSession class which handles:
- Opening a remote thread for the conversation
- Sending prompts and waiting for replies (through the RunOrchestrator)
- Deleting the remote thread when the session is closed

Sessions are async context managers; leaving the ``async with`` block always
closes the session so no remote thread is leaked:

    async with await AgentSession.create(client, provider, agent, timeout=60) as session:
        reply = await session.send_prompt("What is 2 + 3?")
"""

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from types import TracebackType
from typing import Any

from assistant_bridge.capabilities.dispatcher import CapabilityDispatcher
from assistant_bridge.errors import (
    AgentError,
    RunFailed,
    SessionCloseFailed,
    SessionCreateFailed,
)
from assistant_bridge.remote.client import AssistantsClient
from assistant_bridge.remote.types import AgentIdentity
from assistant_bridge.services.orchestrator import DEFAULT_POLL_INTERVAL, RunOrchestrator

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class AgentSession:
    """Represents one remote conversation thread.

    The remote thread id stays private to the session; other components
    address sessions by ``session_id``.
    """

    def __init__(
        self,
        thread_id: str,
        client: AssistantsClient,
        provider: Any,
        agent: AgentIdentity,
        timeout: float,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        *,
        dispatcher: CapabilityDispatcher | None = None,
        orchestrator: RunOrchestrator | None = None,
        debug: bool = False,
    ):
        """Initialize an AgentSession around an existing remote thread.

        Use ``AgentSession.create`` to open a new thread.

        Args:
            thread_id: The remote thread id
            client: Client for the remote service
            provider: Provider instance whose capabilities answer tool calls
            agent: Identity of the remote agent
            timeout: Seconds a single prompt may take
            poll_interval: Seconds between run status polls
            dispatcher: Optional pre-built dispatcher
            orchestrator: Optional pre-built orchestrator
            debug: Log capability calls with their arguments
        """
        self.session_id = self.generate_session_id()
        self._thread_id = thread_id
        self.client = client
        self.provider = provider
        self.agent = agent
        self.timeout = timeout
        self.created_at = _now()
        self.updated_at = self.created_at
        self.prompt_count = 0

        self._dispatcher = dispatcher or CapabilityDispatcher(provider, debug=debug)
        self._orchestrator = orchestrator or RunOrchestrator(
            client=client,
            dispatcher=self._dispatcher,
            agent=agent,
            timeout=timeout,
            poll_interval=poll_interval,
        )
        self._lock = asyncio.Lock()
        self._closed = False

    @classmethod
    async def create(
        cls,
        client: AssistantsClient,
        provider: Any,
        agent: AgentIdentity,
        timeout: float,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        *,
        debug: bool = False,
    ) -> "AgentSession":
        """Open a remote thread and return a session for it.

        Raises:
            SessionCreateFailed: If the thread could not be created
        """
        try:
            thread_id = await client.create_thread()
        except AgentError as e:
            raise SessionCreateFailed(f"Failed to create thread: {e}") from e

        session = cls(
            thread_id=thread_id,
            client=client,
            provider=provider,
            agent=agent,
            timeout=timeout,
            poll_interval=poll_interval,
            debug=debug,
        )
        logger.info(f"Created session {session.session_id}")
        return session

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def capability_names(self) -> list[str]:
        return self._dispatcher.registry.names()

    async def send_prompt(self, prompt: str) -> str | None:
        """Send a prompt and wait for the agent's reply.

        Tool calls requested by the agent are executed while waiting. Prompts
        on the same session run one at a time.

        Args:
            prompt: The user prompt (question or follow-up)

        Returns:
            The agent's reply, or None if the run produced no text reply

        Raises:
            RunFailed: If the run fails remotely or the session is closed
            RunTimedOut: If the reply does not arrive within the timeout
            TransportFailed: If communication with the remote service fails
        """
        async with self._lock:
            if self._closed:
                raise RunFailed(f"Session {self.session_id} is closed")

            logger.debug(f"Session {self.session_id}: sending prompt ({len(prompt)} chars)")
            reply = await self._orchestrator.run(self._thread_id, prompt)

            self.prompt_count += 1
            self.updated_at = _now()
            return reply

    async def close(self) -> None:
        """Delete the remote thread.

        Waits for a prompt in flight to finish first. The session cannot be
        used afterwards, even if deletion failed.

        Raises:
            SessionCloseFailed: If the session is already closed, the delete
                                call fails, or deletion is not confirmed
        """
        async with self._lock:
            if self._closed:
                raise SessionCloseFailed(f"Session {self.session_id} is already closed")
            self._closed = True

            try:
                deleted = await self.client.delete_thread(self._thread_id)
            except AgentError as e:
                raise SessionCloseFailed(f"Failed to delete thread: {e}") from e

        if not deleted:
            raise SessionCloseFailed("Delete response was successful but not confirmed as deleted")

        logger.info(f"Closed session {self.session_id}")

    async def __aenter__(self) -> "AgentSession":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._closed:
            return
        try:
            await self.close()
        except SessionCloseFailed:
            if exc is None:
                raise
            # Keep the original error; the close failure is only logged
            logger.error(f"Failed to close session {self.session_id}", exc_info=True)

    @staticmethod
    def generate_session_id() -> str:
        """Generate a new unique session ID.

        Returns:
            10-character hexadecimal string
        """
        return uuid.uuid4().hex[:10]

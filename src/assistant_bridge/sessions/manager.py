"""SessionManager for the live sessions of the HTTP API.

This module provides the SessionManager class which handles:
- Creating sessions against the configured agent and provider
- Looking up and listing live sessions
- Closing single sessions, and all of them on shutdown
"""

import logging
from typing import Any

from assistant_bridge.errors import SessionCloseFailed, SessionNotFoundError
from assistant_bridge.remote.client import AssistantsClient
from assistant_bridge.remote.types import AgentIdentity
from assistant_bridge.services.orchestrator import DEFAULT_POLL_INTERVAL
from assistant_bridge.sessions.session import AgentSession

logger = logging.getLogger(__name__)


class SessionManager:
    """Keeps track of live AgentSessions by session id.

    All sessions share the same client, provider instance and agent identity.
    """

    def __init__(
        self,
        client: AssistantsClient,
        provider: Any,
        agent: AgentIdentity,
        timeout: float,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        *,
        debug: bool = False,
    ):
        """Initialize the SessionManager.

        Args:
            client: Client for the remote service
            provider: Provider instance shared by all sessions
            agent: Identity of the remote agent
            timeout: Seconds a single prompt may take
            poll_interval: Seconds between run status polls
            debug: Log capability calls with their arguments
        """
        self.client = client
        self.provider = provider
        self.agent = agent
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.debug = debug
        self._sessions: dict[str, AgentSession] = {}

    async def create_session(self) -> AgentSession:
        """Create a new session.

        Raises:
            SessionCreateFailed: If the remote thread could not be created
        """
        session = await AgentSession.create(
            client=self.client,
            provider=self.provider,
            agent=self.agent,
            timeout=self.timeout,
            poll_interval=self.poll_interval,
            debug=self.debug,
        )
        self._sessions[session.session_id] = session
        return session

    def get_session(self, session_id: str) -> AgentSession:
        """Get a live session by ID.

        Raises:
            SessionNotFoundError: If no live session has this id
        """
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None

    def list_sessions(self) -> list[AgentSession]:
        """List live sessions, most recently used first."""
        return sorted(self._sessions.values(), key=lambda s: s.updated_at, reverse=True)

    async def close_session(self, session_id: str) -> None:
        """Close a session and forget it.

        The session is removed even if the remote deletion fails.

        Raises:
            SessionNotFoundError: If no live session has this id
            SessionCloseFailed: If the remote thread could not be deleted
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            raise SessionNotFoundError(session_id)
        await session.close()

    async def close_all(self) -> None:
        """Close every live session, logging failures."""
        for session_id in list(self._sessions):
            try:
                await self.close_session(session_id)
            except SessionCloseFailed as e:
                logger.warning(f"Failed to close session {session_id}: {e}")
        logger.info("All sessions closed")

    def __len__(self) -> int:
        return len(self._sessions)

"""Session management for assistant-bridge.

This package provides the AgentSession (one remote conversation) and the
SessionManager that tracks live sessions for the HTTP API.
"""

from assistant_bridge.sessions.manager import SessionManager
from assistant_bridge.sessions.session import AgentSession

__all__ = [
    "AgentSession",
    "SessionManager",
]

"""Client and wire types for the remote assistants service.

This package provides an async client for the subset of the remote API that
assistant-bridge uses, and dataclasses for its responses.
"""

from assistant_bridge.remote.client import AssistantsClient
from assistant_bridge.remote.types import (
    AgentIdentity,
    CapabilityOutput,
    PendingCapabilityCall,
    RunState,
    RunStatus,
    ThreadMessage,
)

__all__ = [
    "AssistantsClient",
    "AgentIdentity",
    "CapabilityOutput",
    "PendingCapabilityCall",
    "RunState",
    "RunStatus",
    "ThreadMessage",
]

"""Services for agent registration and run orchestration.

This package contains the registration publisher (an operator-run
administrative step) and the run orchestrator used by every session.
"""

from assistant_bridge.services.orchestrator import RunOrchestrator
from assistant_bridge.services.registration import (
    build_agent_definition,
    descriptors_from_agent_definition,
    publish,
)

__all__ = [
    "RunOrchestrator",
    "build_agent_definition",
    "descriptors_from_agent_definition",
    "publish",
]

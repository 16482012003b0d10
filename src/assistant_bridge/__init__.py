"""assistant-bridge: expose local capabilities to a remote assistants service.

This package derives a tool schema from decorated provider methods, registers
it as a remote agent, and drives conversations in which the remote agent
calls those tools mid-run.
"""

__version__ = "0.1.0"

from assistant_bridge.app import create_app  # noqa: E402

__all__ = ["create_app", "__version__"]

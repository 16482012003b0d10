"""FastAPI routers for API endpoints.

This package contains all route handlers organized by resource type.
Each router module defines endpoints for a specific domain (health, sessions, capabilities).
"""

from assistant_bridge.routers import capabilities, health, sessions

__all__ = [
    "capabilities",
    "health",
    "sessions",
]

"""Pydantic models for API request and response schemas.

This package contains all Pydantic models used for validating and
serializing API requests and responses across all endpoints.
"""

from assistant_bridge.models.capabilities import (
    CapabilityParameterResponse,
    CapabilityRegistryResponse,
    CapabilityResponse,
)
from assistant_bridge.models.health import HealthResponse
from assistant_bridge.models.sessions import (
    PromptRequest,
    PromptResponse,
    SessionListResponse,
    SessionResponse,
)

__all__ = [
    "CapabilityParameterResponse",
    "CapabilityRegistryResponse",
    "CapabilityResponse",
    "HealthResponse",
    "PromptRequest",
    "PromptResponse",
    "SessionListResponse",
    "SessionResponse",
]

"""Capabilities router exposing the derived capability registry."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from assistant_bridge.capabilities import CapabilityRegistry
from assistant_bridge.dependencies import get_registry
from assistant_bridge.models.capabilities import (
    CapabilityParameterResponse,
    CapabilityRegistryResponse,
    CapabilityResponse,
)
from assistant_bridge.services.registration import build_agent_definition

router = APIRouter(prefix="/api/v1/capabilities", tags=["capabilities"])


@router.get("", response_model=CapabilityRegistryResponse)
async def get_capabilities(
    request: Request,
    registry: Annotated[CapabilityRegistry, Depends(get_registry)],
) -> CapabilityRegistryResponse:
    """Describe the configured provider and its capabilities.

    Includes the agent definition payload so operators can review what
    registration would send.
    """
    settings = request.app.state.settings
    return CapabilityRegistryResponse(
        provider=registry.provider_name,
        instructions=registry.purpose,
        capabilities=[
            CapabilityResponse(
                name=d.name,
                description=d.purpose,
                parameters=[
                    CapabilityParameterResponse(
                        name=p.name,
                        type=p.semantic_type.value,
                        description=p.purpose,
                    )
                    for p in d.parameters
                ],
            )
            for d in registry.capabilities
        ],
        agent_definition=build_agent_definition(registry, settings.model),
    )

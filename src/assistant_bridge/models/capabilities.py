"""Pydantic models for the capabilities endpoint."""

from typing import Any

from pydantic import BaseModel, Field


class CapabilityParameterResponse(BaseModel):
    """A parameter exposed in the capability schema."""

    name: str
    type: str = Field(description="Semantic type: string, integer, number or boolean")
    description: str


class CapabilityResponse(BaseModel):
    """One capability of the provider."""

    name: str
    description: str
    parameters: list[CapabilityParameterResponse]


class CapabilityRegistryResponse(BaseModel):
    """The provider's derived registry and its agent definition."""

    provider: str = Field(description="Provider type name, used as the agent name")
    instructions: str = Field(description="Provider description, used as agent instructions")
    capabilities: list[CapabilityResponse]
    agent_definition: dict[str, Any] = Field(
        description="Payload that `assistant-bridge register` sends to the remote service"
    )

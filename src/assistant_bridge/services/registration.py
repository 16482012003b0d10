"""Agent registration.

Serialises a CapabilityRegistry into the remote agent definition format and
creates the remote agent. Registration is an administrative operation run by
an operator (``assistant-bridge register``), never by application startup:
every call creates a new remote agent, and replaced agents have to be deleted
by hand on the remote side.
"""

import logging
from typing import Any

from assistant_bridge.capabilities.types import (
    CapabilityDescriptor,
    CapabilityParameter,
    CapabilityRegistry,
    SemanticType,
)
from assistant_bridge.errors import RegistrationFailed, RemoteServiceError, TransportFailed
from assistant_bridge.remote.client import AssistantsClient
from assistant_bridge.remote.types import AgentIdentity

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4-1106-preview"


def _semantic_type(value: Any) -> SemanticType:
    """Read a schema type; types outside the four known ones map to string."""
    try:
        return SemanticType(value)
    except ValueError:
        return SemanticType.STRING


def tool_schema(descriptor: CapabilityDescriptor) -> dict[str, Any]:
    """Build the function tool entry for one capability.

    Every emitted parameter is listed as required.
    """
    properties = {
        p.name: {"type": p.semantic_type.value, "description": p.purpose}
        for p in descriptor.parameters
    }
    return {
        "type": "function",
        "function": {
            "name": descriptor.name,
            "description": descriptor.purpose,
            "parameters": {
                "type": "object",
                "properties": properties,
                "required": [p.name for p in descriptor.parameters],
            },
        },
    }


def build_agent_definition(
    registry: CapabilityRegistry, model: str = DEFAULT_MODEL
) -> dict[str, Any]:
    """Build the create-assistant payload for a registry.

    Args:
        registry: The derived capability registry
        model: Remote model the agent should run on

    Returns:
        dict: Payload with name, instructions, model and tools
    """
    return {
        "name": registry.provider_name,
        "instructions": registry.purpose,
        "model": model,
        "tools": [tool_schema(d) for d in registry.capabilities],
    }


def descriptors_from_agent_definition(definition: dict[str, Any]) -> list[CapabilityDescriptor]:
    """Re-derive descriptor values from an agent definition payload.

    The descriptors carry no invoker; they describe, they cannot be dispatched.
    Tools that are not function tools are ignored.
    """
    descriptors: list[CapabilityDescriptor] = []
    for tool in definition.get("tools", []):
        if tool.get("type") != "function":
            continue
        function = tool.get("function", {})
        schema = function.get("parameters") or {}
        parameters = tuple(
            CapabilityParameter(
                name=name,
                semantic_type=_semantic_type(prop.get("type")),
                purpose=prop.get("description", ""),
            )
            for name, prop in (schema.get("properties") or {}).items()
        )
        descriptors.append(
            CapabilityDescriptor(
                name=function.get("name", ""),
                purpose=function.get("description", ""),
                parameters=parameters,
            )
        )
    return descriptors


async def publish(
    client: AssistantsClient,
    registry: CapabilityRegistry,
    model: str = DEFAULT_MODEL,
) -> AgentIdentity:
    """Create the remote agent for a registry.

    Not idempotent: calling it twice creates two remote agents.

    Args:
        client: Client for the remote service
        registry: The derived capability registry
        model: Remote model the agent should run on

    Returns:
        AgentIdentity: The id of the new remote agent

    Raises:
        RegistrationFailed: On any transport failure or non-success response
    """
    definition = build_agent_definition(registry, model)
    logger.info(
        f"Registering agent {registry.provider_name} with {len(registry)} capabilities on model {model}"
    )

    try:
        agent_id = await client.create_assistant(definition)
    except RemoteServiceError as e:
        raise RegistrationFailed(
            f"Failed to register assistant: {e.details}", details=e.details
        ) from e
    except TransportFailed as e:
        raise RegistrationFailed(f"Failed to register assistant: {e}") from e

    logger.info(f"Registered agent {registry.provider_name} as {agent_id}")
    return AgentIdentity(agent_id)

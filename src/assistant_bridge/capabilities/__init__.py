"""Capability declaration, registry derivation and dispatch.

This package turns ``@capability``-decorated methods of a CapabilityProvider
into descriptors for the remote service, and executes the calls the remote
service requests during a run.
"""

from assistant_bridge.capabilities.dispatcher import CapabilityDispatcher
from assistant_bridge.capabilities.provider import (
    CapabilityProvider,
    Param,
    capability,
    load_provider_class,
)
from assistant_bridge.capabilities.registry import derive_registry
from assistant_bridge.capabilities.types import (
    CapabilityDescriptor,
    CapabilityParameter,
    CapabilityRegistry,
    SemanticType,
    semantic_type_for,
)

__all__ = [
    # Declaration
    "CapabilityProvider",
    "Param",
    "capability",
    "load_provider_class",
    # Derivation
    "derive_registry",
    "CapabilityDescriptor",
    "CapabilityParameter",
    "CapabilityRegistry",
    "SemanticType",
    "semantic_type_for",
    # Dispatch
    "CapabilityDispatcher",
]

"""Data types describing capabilities.

This module defines the value objects produced by registry derivation:
parameters, descriptors and the registry itself, plus the fixed mapping from
Python types to the semantic types understood by the remote service.
"""

import numbers
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from typing import Any, Callable


class SemanticType(str, Enum):
    """JSON-schema type of a capability parameter."""

    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"


def semantic_type_for(python_type: Any) -> SemanticType:
    """Map a Python type to its semantic type.

    The mapping is total: anything that is not recognised maps to
    ``SemanticType.STRING``. ``bool`` is checked before the integral types
    since it is a subclass of ``int``.

    Args:
        python_type: The declared Python type of a parameter

    Returns:
        SemanticType: The semantic type for the parameter schema
    """
    if not isinstance(python_type, type):
        return SemanticType.STRING
    if issubclass(python_type, bool):
        return SemanticType.BOOLEAN
    if issubclass(python_type, str):
        return SemanticType.STRING
    if issubclass(python_type, numbers.Integral):
        return SemanticType.INTEGER
    if issubclass(python_type, (numbers.Real, Decimal, Fraction)):
        return SemanticType.NUMBER
    return SemanticType.STRING


@dataclass(frozen=True)
class CapabilityParameter:
    """A purpose-tagged parameter emitted in the capability schema."""

    name: str
    semantic_type: SemanticType
    purpose: str
    python_type: Any = field(default=str, compare=False, repr=False)


# Signature of the invoker generated at derivation time:
# (provider instance, parsed JSON arguments) -> return value or awaitable
Invoker = Callable[[Any, dict[str, Any]], Any]


@dataclass(frozen=True)
class CapabilityDescriptor:
    """One invocable operation exposed to the remote service.

    Attributes:
        name: Exact name the remote service uses in invocation requests
        purpose: Natural-language description of the operation
        parameters: Ordered, purpose-tagged parameters
        invoker: Typed invoker built at derivation (None for descriptors
                 re-derived from a remote payload)
        is_async: True when the underlying method is a coroutine function
    """

    name: str
    purpose: str
    parameters: tuple[CapabilityParameter, ...] = ()
    invoker: Invoker | None = field(default=None, compare=False, repr=False)
    is_async: bool = field(default=False, compare=False, repr=False)

    @property
    def parameter_names(self) -> list[str]:
        return [p.name for p in self.parameters]


@dataclass(frozen=True)
class CapabilityRegistry:
    """All capabilities of one provider type, in declaration order."""

    provider_name: str
    purpose: str
    capabilities: tuple[CapabilityDescriptor, ...] = ()

    def get(self, name: str) -> CapabilityDescriptor | None:
        """Look up a capability by exact, case-sensitive name."""
        for descriptor in self.capabilities:
            if descriptor.name == name:
                return descriptor
        return None

    def names(self) -> list[str]:
        return [d.name for d in self.capabilities]

    def __len__(self) -> int:
        return len(self.capabilities)

"""Capability registry derivation.

Builds a CapabilityRegistry from the ``@capability`` declarations of a
provider class. The result is cached per provider type, so a registry is
derived once no matter how many provider instances or sessions exist.
"""

import inspect
import logging
from functools import lru_cache
from typing import Any, Callable

from assistant_bridge.capabilities.provider import (
    CapabilityProvider,
    CapabilitySpec,
    Param,
    get_capability_spec,
)
from assistant_bridge.capabilities.types import (
    CapabilityDescriptor,
    CapabilityParameter,
    CapabilityRegistry,
    Invoker,
    semantic_type_for,
)
from assistant_bridge.errors import MissingProviderDescription

logger = logging.getLogger(__name__)


def _is_void(fn: Callable[..., Any]) -> bool:
    """A method annotated ``-> None`` has no result and is not a capability."""
    annotations = getattr(fn, "__annotations__", {})
    if "return" not in annotations:
        return False
    return annotations["return"] in (None, type(None), "None")


def _make_invoker(fn: Callable[..., Any], params: tuple[Param, ...]) -> Invoker:
    """Build the uniform invoker for one capability method."""

    def invoke(provider: Any, arguments: dict[str, Any]) -> Any:
        kwargs = {param.name: param.coerce(arguments) for param in params}
        return fn(provider, **kwargs)

    return invoke


def _declared_capabilities(
    provider_cls: type,
) -> dict[str, tuple[Callable[..., Any], CapabilitySpec]]:
    """Collect capability methods in declaration order, base classes first.

    An override keeps the position of the method it overrides. Overriding a
    capability with an undecorated attribute removes it.
    """
    found: dict[str, tuple[Callable[..., Any], CapabilitySpec]] = {}
    for klass in reversed(provider_cls.__mro__):
        if klass is object:
            continue
        for name, attr in vars(klass).items():
            spec = get_capability_spec(attr)
            if spec is None:
                found.pop(name, None)
                continue
            found[name] = (attr, spec)
    return found


def _build_descriptor(
    name: str, fn: Callable[..., Any], spec: CapabilitySpec
) -> CapabilityDescriptor:
    seen: set[str] = set()
    parameters: list[CapabilityParameter] = []

    for param in spec.params:
        if param.name in seen:
            raise ValueError(f"Capability '{name}' declares parameter '{param.name}' twice")
        seen.add(param.name)

        if not param.is_tagged:
            logger.debug(f"Capability '{name}': parameter '{param.name}' has no purpose, not exposed")
            continue

        parameters.append(
            CapabilityParameter(
                name=param.name,
                semantic_type=semantic_type_for(param.python_type),
                purpose=param.purpose.strip(),
                python_type=param.python_type,
            )
        )

    return CapabilityDescriptor(
        name=name,
        purpose=spec.purpose.strip(),
        parameters=tuple(parameters),
        invoker=_make_invoker(fn, spec.params),
        is_async=inspect.iscoroutinefunction(fn),
    )


@lru_cache(maxsize=None)
def derive_registry(provider_cls: type) -> CapabilityRegistry:
    """Derive the capability registry of a provider type.

    A method qualifies as a capability when it is decorated with a non-empty
    purpose and its result is not void.

    Args:
        provider_cls: A CapabilityProvider subclass

    Returns:
        CapabilityRegistry: Provider purpose and descriptors in declaration order

    Raises:
        TypeError: If provider_cls is not a CapabilityProvider subclass
        MissingProviderDescription: If the provider has no description
        ValueError: If parameter names repeat within one capability
    """
    if not isinstance(provider_cls, type) or not issubclass(provider_cls, CapabilityProvider):
        raise TypeError(f"{provider_cls!r} is not a CapabilityProvider subclass")

    description = provider_cls.description
    if not description or not description.strip():
        raise MissingProviderDescription(
            f"Capability provider {provider_cls.__name__} must define a description"
        )

    descriptors: list[CapabilityDescriptor] = []
    for name, (fn, spec) in _declared_capabilities(provider_cls).items():
        if not spec.purpose or not spec.purpose.strip():
            logger.debug(f"Skipping '{name}': capability purpose is empty")
            continue
        if _is_void(fn):
            logger.debug(f"Skipping '{name}': capability has no result")
            continue
        descriptors.append(_build_descriptor(name, fn, spec))

    registry = CapabilityRegistry(
        provider_name=provider_cls.__name__,
        purpose=description.strip(),
        capabilities=tuple(descriptors),
    )
    logger.info(
        f"Derived {len(registry)} capabilities for {registry.provider_name}: "
        f"{', '.join(registry.names())}"
    )
    return registry

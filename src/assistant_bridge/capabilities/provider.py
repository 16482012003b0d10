"""Declaring capability providers.

A capability provider is a subclass of ``CapabilityProvider`` with a
``description`` (its purpose, sent to the remote service as the agent
instructions). Each method that should be callable by the remote service is
decorated with ``@capability``, naming its purpose and its parameters:

    class Calculator(CapabilityProvider):
        description = "You help users with arithmetic."

        @capability(
            "Adds two numbers.",
            Param("a", int, "The first number"),
            Param("b", int, "The second number"),
        )
        def sum(self, a: int, b: int) -> int:
            return a + b

Parameter types are declared explicitly on each ``Param``; nothing is read
from the method signature.
"""

import importlib
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable, ClassVar, TypeVar

from pydantic import TypeAdapter

CAPABILITY_ATTRIBUTE = "__capability__"

F = TypeVar("F", bound=Callable[..., Any])


@lru_cache(maxsize=None)
def _type_adapter(python_type: Any) -> TypeAdapter:
    return TypeAdapter(python_type)


@dataclass(frozen=True)
class Param:
    """Declaration of one capability parameter.

    Attributes:
        name: Argument key in the JSON arguments and keyword name of the method
        python_type: Type the JSON value is validated into
        purpose: Description sent to the remote service. Parameters without a
                 purpose are left out of the schema but still receive their
                 argument (or zero value) on invocation.
    """

    name: str
    python_type: Any = str
    purpose: str | None = None

    @property
    def is_tagged(self) -> bool:
        return bool(self.purpose and self.purpose.strip())

    def zero_value(self) -> Any:
        """Value used when the argument is missing or null."""
        if not isinstance(self.python_type, type):
            return None
        try:
            return self.python_type()
        except Exception:
            return None

    def coerce(self, arguments: dict[str, Any]) -> Any:
        """Read this parameter from the arguments and validate its type.

        Raises:
            pydantic.ValidationError: If the value does not fit the type
        """
        raw = arguments.get(self.name)
        if raw is None:
            return self.zero_value()
        return _type_adapter(self.python_type).validate_python(raw)


@dataclass(frozen=True)
class CapabilitySpec:
    """Declarative entry attached to a method by ``@capability``."""

    purpose: str
    params: tuple[Param, ...] = ()


def capability(purpose: str, *params: Param) -> Callable[[F], F]:
    """Mark a provider method as a capability.

    Args:
        purpose: What the capability does, in natural language
        *params: Parameter declarations in the order they should appear

    Returns:
        A decorator that returns the method unchanged
    """

    def decorator(fn: F) -> F:
        setattr(fn, CAPABILITY_ATTRIBUTE, CapabilitySpec(purpose=purpose, params=params))
        return fn

    return decorator


def get_capability_spec(attr: Any) -> CapabilitySpec | None:
    """Return the capability declaration of a class attribute, if any."""
    if isinstance(attr, (staticmethod, classmethod)):
        return None
    return getattr(attr, CAPABILITY_ATTRIBUTE, None)


class CapabilityProvider:
    """Base class for objects whose methods satisfy capability calls.

    Subclasses must set ``description``; registry derivation fails otherwise.
    Capability bodies may be plain or ``async def`` methods. Plain methods are
    run in a worker thread, so they may block. Bodies shared across sessions
    must do their own locking if they hold mutable state.
    """

    description: ClassVar[str | None] = None


def load_provider_class(path: str) -> type[CapabilityProvider]:
    """Import a provider class from a ``module:ClassName`` path.

    Args:
        path: Import path, e.g. "assistant_bridge.providers.calculator:Calculator"

    Returns:
        The provider class

    Raises:
        ValueError: If the path is malformed
        ImportError: If the module cannot be imported
        TypeError: If the target is not a CapabilityProvider subclass
    """
    module_name, sep, attr_name = path.partition(":")
    if not sep or not module_name or not attr_name:
        raise ValueError(f"Provider path must look like 'module:ClassName', got '{path}'")

    module = importlib.import_module(module_name)
    try:
        target = getattr(module, attr_name)
    except AttributeError as e:
        raise ImportError(f"Module '{module_name}' has no attribute '{attr_name}'") from e

    if not isinstance(target, type) or not issubclass(target, CapabilityProvider):
        raise TypeError(f"'{path}' is not a CapabilityProvider subclass")
    return target

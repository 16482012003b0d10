"""Unit tests for capability registry derivation."""

import pytest

from assistant_bridge.capabilities import (
    CapabilityProvider,
    Param,
    SemanticType,
    capability,
    derive_registry,
    load_provider_class,
)
from assistant_bridge.errors import ErrorKind, MissingProviderDescription
from assistant_bridge.providers import Calculator


class Library(CapabilityProvider):
    description = "  You help people find books.  "

    @capability(
        "Search books by title.",
        Param("title", str, "Part of the title"),
        Param("limit", int, "Maximum number of results"),
    )
    def search(self, title: str, limit: int) -> list[str]:
        return [title][:limit]

    @capability("Count all books.")
    def count(self) -> int:
        return 42

    @capability("Forget everything.")
    def reset(self) -> None:
        pass

    @capability("")
    def untagged(self) -> int:
        return 0

    def helper(self) -> int:
        return 1

    @capability(
        "Check out a book.",
        Param("book_id", str, "The book id"),
        Param("trace", bool),
        Param("express", bool, "Use express checkout"),
    )
    def checkout(self, book_id: str, trace: bool, express: bool) -> dict:
        return {"book_id": book_id, "express": express}


def test_derives_qualifying_capabilities_in_declaration_order():
    """Test that only purpose-tagged, non-void methods become capabilities."""
    registry = derive_registry(Library)

    assert registry.provider_name == "Library"
    assert registry.purpose == "You help people find books."
    assert registry.names() == ["search", "count", "checkout"]


def test_parameters_keep_order_and_types():
    """Test parameter names, types and purposes of a capability."""
    search = derive_registry(Library).get("search")

    assert search is not None
    assert search.purpose == "Search books by title."
    assert [(p.name, p.semantic_type, p.purpose) for p in search.parameters] == [
        ("title", SemanticType.STRING, "Part of the title"),
        ("limit", SemanticType.INTEGER, "Maximum number of results"),
    ]


def test_untagged_parameters_are_excluded():
    """Test that a parameter without a purpose is left out of the schema."""
    checkout = derive_registry(Library).get("checkout")

    assert checkout is not None
    assert checkout.parameter_names == ["book_id", "express"]


def test_capability_without_parameters():
    """Test a capability that takes no arguments."""
    count = derive_registry(Library).get("count")

    assert count is not None
    assert count.parameters == ()


def test_invoker_is_generated():
    """Test that derived descriptors carry a working invoker."""
    search = derive_registry(Library).get("search")

    assert search.invoker(Library(), {"title": "Dune", "limit": 1}) == ["Dune"]
    assert search.is_async is False


def test_async_capability_is_flagged():
    """Test that coroutine methods are recognised."""

    class AsyncProvider(CapabilityProvider):
        description = "Async tools."

        @capability("Ping.")
        async def ping(self) -> str:
            return "pong"

    assert derive_registry(AsyncProvider).get("ping").is_async is True


def test_missing_description_fails():
    """Test that a provider without description always fails."""

    class Nameless(CapabilityProvider):
        @capability("Adds two numbers.", Param("a", int, "a"), Param("b", int, "b"))
        def sum(self, a: int, b: int) -> int:
            return a + b

    with pytest.raises(MissingProviderDescription) as exc_info:
        derive_registry(Nameless)

    assert exc_info.value.kind is ErrorKind.MISSING_PROVIDER_DESCRIPTION


def test_blank_description_fails():
    """Test that a whitespace-only description counts as missing."""

    class Blank(CapabilityProvider):
        description = "   "

    with pytest.raises(MissingProviderDescription):
        derive_registry(Blank)


def test_non_provider_class_fails():
    """Test that only CapabilityProvider subclasses can be derived."""

    class NotAProvider:
        description = "Looks like one."

    with pytest.raises(TypeError):
        derive_registry(NotAProvider)


def test_duplicate_parameter_names_fail():
    """Test that a capability cannot declare a parameter twice."""

    class Duplicated(CapabilityProvider):
        description = "Broken."

        @capability("Echo.", Param("x", str, "x"), Param("x", int, "x again"))
        def echo(self, x: str) -> str:
            return x

    with pytest.raises(ValueError, match="twice"):
        derive_registry(Duplicated)


def test_registry_is_cached_per_type():
    """Test that derivation happens once per provider type."""
    assert derive_registry(Library) is derive_registry(Library)


def test_inherited_capabilities_keep_base_order():
    """Test inheritance: base capabilities first, overrides keep their slot."""

    class Base(CapabilityProvider):
        description = "Base."

        @capability("First.")
        def first(self) -> int:
            return 1

        @capability("Second.")
        def second(self) -> int:
            return 2

    class Child(Base):
        description = "Child."

        @capability("Third.")
        def third(self) -> int:
            return 3

        @capability("First, overridden.")
        def first(self) -> int:
            return 10

        def second(self) -> int:
            return 20

    registry = derive_registry(Child)

    assert registry.names() == ["first", "third"]
    assert registry.get("first").purpose == "First, overridden."
    assert registry.get("first").invoker(Child(), {}) == 10


def test_calculator_sum_capability():
    """Test the bundled provider's sum capability."""
    registry = derive_registry(Calculator)
    sum_capability = registry.get("sum")

    assert "sum" in registry.names()
    assert sum_capability.purpose == "Adds two numbers."
    assert [(p.name, p.semantic_type) for p in sum_capability.parameters] == [
        ("a", SemanticType.INTEGER),
        ("b", SemanticType.INTEGER),
    ]


def test_load_provider_class():
    """Test importing a provider from a module:Class path."""
    assert load_provider_class("assistant_bridge.providers.calculator:Calculator") is Calculator


@pytest.mark.parametrize(
    "path, error",
    [
        ("assistant_bridge.providers.calculator", ValueError),
        (":Calculator", ValueError),
        ("assistant_bridge.providers.calculator:Missing", ImportError),
        ("assistant_bridge.no_such_module:Calculator", ImportError),
        ("assistant_bridge.providers.calculator:math", TypeError),
    ],
)
def test_load_provider_class_errors(path, error):
    """Test malformed and wrong provider paths."""
    with pytest.raises(error):
        load_provider_class(path)

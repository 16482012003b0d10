"""Unit tests for CapabilityDispatcher."""

import json
import logging

import pytest

from assistant_bridge.capabilities import (
    CapabilityDispatcher,
    CapabilityProvider,
    CapabilityRegistry,
    Param,
    capability,
)
from assistant_bridge.capabilities.dispatcher import encode_result, parse_arguments
from assistant_bridge.providers import Calculator
from assistant_bridge.remote import CapabilityOutput, PendingCapabilityCall


class Adder(CapabilityProvider):
    description = "You add numbers."

    @capability(
        "Adds two numbers.",
        Param("a", int, "The first number"),
        Param("b", int, "The second number"),
    )
    def sum(self, a: int, b: int) -> int:
        return a + b


class Toolbox(CapabilityProvider):
    description = "Assorted tools."

    def __init__(self):
        self.calls = []

    @capability("Looks up a parent.", Param("name", str, "The child"))
    def parent(self, name: str) -> str | None:
        self.calls.append(name)
        return None

    @capability("Lists children.", Param("name", str, "The parent"))
    def children(self, name: str) -> list[str]:
        return []

    @capability("Echoes asynchronously.", Param("text", str, "Text to echo"))
    async def echo(self, text: str) -> dict:
        return {"echo": text}

    @capability("Always fails.")
    def broken(self) -> int:
        raise RuntimeError("disk on fire")

    @capability("Returns something JSON cannot hold.")
    def opaque(self) -> object:
        return object()

    @capability(
        "Flags.",
        Param("enabled", bool, "Whether it is on"),
        Param("note", str),
    )
    def flags(self, enabled: bool, note: str) -> list:
        return [enabled, note]


def call(name, arguments="{}", invocation_id="call_1"):
    return PendingCapabilityCall(
        invocation_id=invocation_id, capability_name=name, arguments_json=arguments
    )


@pytest.fixture
def adder_dispatcher():
    """Create a dispatcher for the Adder provider."""
    return CapabilityDispatcher(Adder())


@pytest.fixture
def toolbox():
    """Create a Toolbox provider instance."""
    return Toolbox()


@pytest.fixture
def toolbox_dispatcher(toolbox):
    """Create a dispatcher for the Toolbox provider."""
    return CapabilityDispatcher(toolbox)


@pytest.mark.asyncio
async def test_dispatch_sum(adder_dispatcher):
    """Test a successful call produces the JSON-encoded result."""
    output = await adder_dispatcher.dispatch(call("sum", '{"a":2,"b":3}', "c1"))

    assert output == CapabilityOutput("c1", "5")


@pytest.mark.asyncio
async def test_unknown_capability_is_answered(adder_dispatcher):
    """Test that an unknown name yields the unknown-tool payload."""
    output = await adder_dispatcher.dispatch(call("divide", '{"a":1,"b":0}', "c2"))

    assert output.invocation_id == "c2"
    assert json.loads(output.output) == {"error": "Unknown tool: divide"}


@pytest.mark.asyncio
async def test_names_are_case_sensitive(adder_dispatcher):
    """Test that capability lookup is exact."""
    output = await adder_dispatcher.dispatch(call("Sum", '{"a":1,"b":1}'))

    assert json.loads(output.output) == {"error": "Unknown tool: Sum"}


@pytest.mark.asyncio
async def test_missing_arguments_get_zero_values(adder_dispatcher):
    """Test that missing or null arguments become the type's zero value."""
    output = await adder_dispatcher.dispatch(call("sum", '{"a": 2}'))
    assert output.output == "2"

    output = await adder_dispatcher.dispatch(call("sum", '{"a": null, "b": 7}'))
    assert output.output == "7"


@pytest.mark.asyncio
async def test_empty_arguments_string(adder_dispatcher):
    """Test that an empty arguments string counts as no arguments."""
    output = await adder_dispatcher.dispatch(call("sum", ""))

    assert output.output == "0"


@pytest.mark.asyncio
async def test_numeric_strings_are_coerced(adder_dispatcher):
    """Test lax validation of argument values."""
    output = await adder_dispatcher.dispatch(call("sum", '{"a": "2", "b": 3}'))

    assert output.output == "5"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "arguments",
    ['{"a": 2, "b": ', '[1, 2]', '{"a": "two", "b": 3}'],
)
async def test_bad_arguments_yield_failure_payload(adder_dispatcher, arguments):
    """Test that malformed or mistyped arguments are absorbed."""
    output = await adder_dispatcher.dispatch(call("sum", arguments, "c3"))

    assert output.invocation_id == "c3"
    assert json.loads(output.output)["error"].startswith("Tool sum failed: ")


@pytest.mark.asyncio
async def test_exception_in_capability_is_absorbed(toolbox_dispatcher):
    """Test that a raising capability produces an error payload."""
    output = await toolbox_dispatcher.dispatch(call("broken"))

    assert json.loads(output.output) == {"error": "Tool broken failed: disk on fire"}


@pytest.mark.asyncio
async def test_unserialisable_result_is_absorbed(toolbox_dispatcher):
    """Test that a result JSON cannot encode produces an error payload."""
    output = await toolbox_dispatcher.dispatch(call("opaque"))

    assert json.loads(output.output)["error"].startswith("Tool opaque failed: ")


@pytest.mark.asyncio
async def test_absent_and_empty_results_are_distinct(toolbox_dispatcher, toolbox):
    """Test that None encodes as null and empty collections stay empty."""
    parent = await toolbox_dispatcher.dispatch(call("parent", '{"name": "Ada"}'))
    children = await toolbox_dispatcher.dispatch(call("children", '{"name": "Ada"}'))

    assert parent.output == "null"
    assert children.output == "[]"
    assert toolbox.calls == ["Ada"]


@pytest.mark.asyncio
async def test_async_capability_is_awaited(toolbox_dispatcher):
    """Test coroutine capabilities."""
    output = await toolbox_dispatcher.dispatch(call("echo", '{"text": "héllo"}'))

    assert json.loads(output.output) == {"echo": "héllo"}


@pytest.mark.asyncio
async def test_untagged_parameter_still_receives_argument(toolbox_dispatcher):
    """Test that parameters left out of the schema are still passed."""
    output = await toolbox_dispatcher.dispatch(call("flags", '{"enabled": true, "note": "x"}'))
    assert json.loads(output.output) == [True, "x"]

    output = await toolbox_dispatcher.dispatch(call("flags", "{}"))
    assert json.loads(output.output) == [False, ""]


@pytest.mark.asyncio
async def test_dispatch_batch_answers_every_call():
    """Test one output per call, in order, even when some fail."""
    dispatcher = CapabilityDispatcher(Calculator())
    calls = [
        call("sum", '{"a": 1, "b": 2}', "c1"),
        call("divide", '{"dividend": 1, "divisor": 0}', "c2"),
        call("nope", "{}", "c3"),
        call("square_root", '{"x": -4}', "c4"),
        call("is_prime", '{"n": 7}', "c5"),
    ]

    outputs = await dispatcher.dispatch_batch(calls)

    assert [o.invocation_id for o in outputs] == ["c1", "c2", "c3", "c4", "c5"]
    assert outputs[0].output == "3"
    assert json.loads(outputs[1].output) == {"error": "Tool divide failed: division by zero"}
    assert json.loads(outputs[2].output) == {"error": "Unknown tool: nope"}
    assert outputs[3].output == "null"
    assert outputs[4].output == "true"


@pytest.mark.asyncio
async def test_debug_logs_calls(caplog):
    """Test that debug mode logs each call with flattened arguments."""
    dispatcher = CapabilityDispatcher(Adder(), debug=True)
    caplog.set_level(logging.INFO, logger="assistant_bridge.capabilities.dispatcher")

    await dispatcher.dispatch(call("sum", '{\n"a": 1,\n"b": 2\n}'))

    assert ' ... calling tool: sum - {"a": 1,"b": 2}' in caplog.messages


@pytest.mark.asyncio
async def test_no_call_logging_without_debug(adder_dispatcher, caplog):
    """Test that calls are not logged at INFO by default."""
    caplog.set_level(logging.INFO, logger="assistant_bridge.capabilities.dispatcher")

    await adder_dispatcher.dispatch(call("sum", '{"a": 1, "b": 2}'))

    assert not any("calling tool" in m for m in caplog.messages)


def test_parse_arguments():
    """Test parsing of raw argument strings."""
    assert parse_arguments('{"a": 1}') == {"a": 1}
    assert parse_arguments("  ") == {}
    with pytest.raises(ValueError):
        parse_arguments("[]")


def test_encode_result():
    """Test JSON encoding of typical results."""
    assert encode_result(5) == "5"
    assert encode_result("five") == '"five"'
    assert encode_result(None) == "null"
    assert encode_result({"a": [1, 2.5]}) == '{"a": [1, 2.5]}'


@pytest.mark.asyncio
async def test_explicit_empty_registry_is_kept():
    """Test that an empty registry is not replaced by the provider's own."""
    dispatcher = CapabilityDispatcher(Calculator(), CapabilityRegistry("Calculator", "p", ()))

    output = await dispatcher.dispatch(call("sum", '{"a":2,"b":3}'))

    assert len(dispatcher.registry) == 0
    assert json.loads(output.output) == {"error": "Unknown tool: sum"}

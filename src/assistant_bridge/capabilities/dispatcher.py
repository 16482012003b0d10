"""Capability dispatch.

Resolves a pending tool call to a capability of the provider, invokes it and
encodes the result as the JSON string submitted back to the remote run.

Dispatch never raises: an unknown capability, malformed arguments, an
exception in the capability body or an unserialisable result each produce an
``{"error": ...}`` payload. Every invocation id gets exactly one output, since
one unanswered call would stall the run until it times out.
"""

import asyncio
import json
import logging
from typing import Any, Iterable

from pydantic import TypeAdapter

from assistant_bridge.capabilities.registry import derive_registry
from assistant_bridge.capabilities.types import CapabilityDescriptor, CapabilityRegistry
from assistant_bridge.errors import ErrorKind
from assistant_bridge.remote.types import CapabilityOutput, PendingCapabilityCall

logger = logging.getLogger(__name__)

_RESULT_ADAPTER: TypeAdapter[Any] = TypeAdapter(Any)


def unknown_tool_payload(name: str) -> dict[str, str]:
    return {"error": f"Unknown tool: {name}"}


def failed_tool_payload(name: str, error: BaseException) -> dict[str, str]:
    reason = str(error) or type(error).__name__
    return {"error": f"Tool {name} failed: {reason}"}


def encode_result(result: Any) -> str:
    """Encode a capability result as a JSON string.

    ``None`` encodes as ``null``; dataclasses, pydantic models, datetimes and
    other values pydantic knows how to serialise are converted first.
    """
    return json.dumps(_RESULT_ADAPTER.dump_python(result, mode="json"), ensure_ascii=False)


def parse_arguments(arguments_json: str) -> dict[str, Any]:
    """Parse the raw arguments string of a tool call.

    Raises:
        ValueError: If the string is not a JSON object
    """
    if not arguments_json or not arguments_json.strip():
        return {}
    arguments = json.loads(arguments_json)
    if not isinstance(arguments, dict):
        raise ValueError("arguments must be a JSON object")
    return arguments


class CapabilityDispatcher:
    """Executes pending capability calls against one provider instance.

    Attributes:
        provider: The object whose methods implement the capabilities
        registry: The registry of the provider's type
        debug: Log every call with its raw arguments at INFO level
    """

    def __init__(
        self,
        provider: Any,
        registry: CapabilityRegistry | None = None,
        *,
        debug: bool = False,
    ) -> None:
        self.provider = provider
        self.registry = registry if registry is not None else derive_registry(type(provider))
        self.debug = debug

    async def invoke(self, descriptor: CapabilityDescriptor, arguments: dict[str, Any]) -> Any:
        """Invoke a capability and return its raw result.

        Plain methods run in a worker thread, coroutine methods are awaited.

        Raises:
            Exception: Whatever the capability body or argument validation raises
        """
        if descriptor.invoker is None:
            raise LookupError(f"Capability '{descriptor.name}' has no invoker")
        if descriptor.is_async:
            return await descriptor.invoker(self.provider, arguments)
        return await asyncio.to_thread(descriptor.invoker, self.provider, arguments)

    async def dispatch(self, call: PendingCapabilityCall) -> CapabilityOutput:
        """Answer one pending call. Never raises for capability failures."""
        name = call.capability_name
        if self.debug:
            flat = call.arguments_json.replace("\n", "").replace("\r", "")
            logger.info(f" ... calling tool: {name} - {flat}")

        descriptor = self.registry.get(name)
        if descriptor is None or descriptor.invoker is None:
            logger.warning(f"{ErrorKind.UNKNOWN_CAPABILITY.value}: '{name}' (call {call.invocation_id})")
            return CapabilityOutput(call.invocation_id, json.dumps(unknown_tool_payload(name)))

        try:
            arguments = parse_arguments(call.arguments_json)
            result = await self.invoke(descriptor, arguments)
            output = encode_result(result)
        except Exception as e:
            logger.error(
                f"{ErrorKind.CAPABILITY_INVOCATION_FAILED.value}: '{name}' (call {call.invocation_id}): {e}",
                exc_info=True,
            )
            output = json.dumps(failed_tool_payload(name, e), ensure_ascii=False)

        logger.debug(f"Capability '{name}' answered call {call.invocation_id}")
        return CapabilityOutput(call.invocation_id, output)

    async def dispatch_batch(self, calls: Iterable[PendingCapabilityCall]) -> list[CapabilityOutput]:
        """Answer every call of a batch, in order, one output per call."""
        return [await self.dispatch(call) for call in calls]

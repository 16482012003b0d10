"""Type definitions for the remote assistants service.

This module contains dataclasses for the subset of the remote API used by
assistant-bridge: run status with its pending tool calls, thread messages,
and the identifiers handed between components.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from assistant_bridge.errors import RemoteServiceError

logger = logging.getLogger(__name__)


class RunState(str, Enum):
    """Status of a remote run, as reported by each poll."""

    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    NEEDS_CAPABILITY_EXECUTION = "requires_action"
    CANCELLING = "cancelling"
    COMPLETED = "completed"
    FAILED = "failed"
    EXPIRED = "expired"
    CANCELLED = "cancelled"
    INCOMPLETE = "incomplete"

    @classmethod
    def from_wire(cls, value: str) -> "RunState":
        """Parse a status string; unknown values count as in progress."""
        try:
            return cls(value)
        except ValueError:
            logger.warning(f"Unknown run status '{value}', treating as in progress")
            return cls.IN_PROGRESS

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STATES

    @property
    def is_failure(self) -> bool:
        return self in _TERMINAL_STATES and self is not RunState.COMPLETED


_TERMINAL_STATES = frozenset(
    {
        RunState.COMPLETED,
        RunState.FAILED,
        RunState.EXPIRED,
        RunState.CANCELLED,
        RunState.INCOMPLETE,
    }
)


@dataclass(frozen=True)
class AgentIdentity:
    """Durable id of a registered remote agent (assistant)."""

    remote_agent_id: str

    def __str__(self) -> str:
        return self.remote_agent_id


@dataclass(frozen=True)
class PendingCapabilityCall:
    """A tool call the remote run is waiting on.

    Attributes:
        invocation_id: Remote id correlating the call to its output
        capability_name: Name of the requested capability
        arguments_json: Arguments exactly as sent, a JSON object encoded as a string
    """

    invocation_id: str
    capability_name: str
    arguments_json: str = "{}"

    @staticmethod
    def from_api(data: dict[str, Any]) -> "PendingCapabilityCall":
        function = data.get("function") or {}
        return PendingCapabilityCall(
            invocation_id=data["id"],
            capability_name=function.get("name", ""),
            arguments_json=function.get("arguments") or "{}",
        )


@dataclass(frozen=True)
class CapabilityOutput:
    """The answer to one PendingCapabilityCall."""

    invocation_id: str
    output: str

    def to_api(self) -> dict[str, str]:
        return {"tool_call_id": self.invocation_id, "output": self.output}


@dataclass
class RunStatus:
    """One poll result for a run.

    Attributes:
        run_id: The remote run id
        state: Parsed run state
        status: Raw status string
        pending_calls: Tool calls to answer, only set while the run needs
                       capability execution
        last_error: Error message reported for failed runs
    """

    run_id: str
    state: RunState
    status: str
    pending_calls: list[PendingCapabilityCall] = field(default_factory=list)
    last_error: str | None = None

    @staticmethod
    def from_api(data: dict[str, Any]) -> "RunStatus":
        status = data.get("status", "")
        state = RunState.from_wire(status)

        pending: list[PendingCapabilityCall] = []
        if state is RunState.NEEDS_CAPABILITY_EXECUTION:
            required_action = data.get("required_action") or {}
            submit = required_action.get("submit_tool_outputs") or {}
            try:
                pending = [PendingCapabilityCall.from_api(c) for c in submit.get("tool_calls", [])]
            except (KeyError, TypeError, AttributeError) as e:
                raise RemoteServiceError(
                    f"Run {data.get('id', '')} has a malformed tool call", details=data
                ) from e

        last_error = None
        error_obj = data.get("last_error")
        if isinstance(error_obj, dict):
            last_error = error_obj.get("message") or error_obj.get("code")

        return RunStatus(
            run_id=data.get("id", ""),
            state=state,
            status=status,
            pending_calls=pending,
            last_error=last_error,
        )


@dataclass
class ThreadMessage:
    """A message in a remote thread, reduced to its first text part."""

    message_id: str
    role: str
    text: str | None = None
    created_at: int | None = None

    @staticmethod
    def from_api(data: dict[str, Any]) -> "ThreadMessage":
        text = None
        for part in data.get("content") or []:
            if isinstance(part, dict) and isinstance(part.get("text"), dict):
                text = part["text"].get("value")
                break

        return ThreadMessage(
            message_id=data.get("id", ""),
            role=data.get("role", ""),
            text=text,
            created_at=data.get("created_at"),
        )

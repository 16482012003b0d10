"""Error types raised by assistant-bridge.

Every fatal failure is an ``AgentError`` carrying an ``ErrorKind``. The
original exception, when there is one, is chained with ``raise ... from`` so
callers can inspect ``__cause__`` for diagnostics.

Capability dispatch failures are never raised. They are absorbed into the
conversation as per-call error payloads (see
``assistant_bridge.capabilities.dispatcher``).
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Classification of failures across registration, sessions and runs."""

    MISSING_PROVIDER_DESCRIPTION = "missing_provider_description"
    REGISTRATION_FAILED = "registration_failed"
    SESSION_CREATE_FAILED = "session_create_failed"
    SESSION_CLOSE_FAILED = "session_close_failed"
    TRANSPORT_FAILED = "transport_failed"
    RUN_TIMED_OUT = "run_timed_out"
    RUN_FAILED = "run_failed"
    # Non-fatal: only ever reported inside a tool output payload
    UNKNOWN_CAPABILITY = "unknown_capability"
    CAPABILITY_INVOCATION_FAILED = "capability_invocation_failed"


class AgentError(Exception):
    """Base error for all assistant-bridge failures.

    Attributes:
        kind: The ErrorKind of this failure
    """

    kind: ErrorKind = ErrorKind.RUN_FAILED

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MissingProviderDescription(AgentError):
    """Raised when a capability provider type has no description."""

    kind = ErrorKind.MISSING_PROVIDER_DESCRIPTION


class RegistrationFailed(AgentError):
    """Raised when the remote agent definition could not be created.

    Attributes:
        details: Response body of the failed request, if any
    """

    kind = ErrorKind.REGISTRATION_FAILED

    def __init__(self, message: str, *, details: Any | None = None) -> None:
        super().__init__(message)
        self.details = details


class SessionCreateFailed(AgentError):
    kind = ErrorKind.SESSION_CREATE_FAILED


class SessionCloseFailed(AgentError):
    kind = ErrorKind.SESSION_CLOSE_FAILED


class TransportFailed(AgentError):
    """Raised when a protocol step fails on the network or IO level."""

    kind = ErrorKind.TRANSPORT_FAILED


class RemoteServiceError(TransportFailed):
    """Raised when the remote service answers with a non-success status.

    Attributes:
        status_code: HTTP status code of the response
        details: Response body (text)
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        details: Any | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class RunTimedOut(AgentError):
    """Raised when a run does not finish within the session timeout.

    The remote run is left in whatever state it was in.
    """

    kind = ErrorKind.RUN_TIMED_OUT

    def __init__(self, message: str, *, run_id: str | None = None, timeout: float = 0.0) -> None:
        super().__init__(message)
        self.run_id = run_id
        self.timeout = timeout


class RunFailed(AgentError):
    """Raised when a run ends in a terminal non-success state.

    Attributes:
        status: The remote run status (e.g. "failed", "expired")
        last_error: The error message reported by the remote service, if any
    """

    kind = ErrorKind.RUN_FAILED

    def __init__(
        self,
        message: str,
        *,
        status: str | None = None,
        last_error: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.last_error = last_error


class SessionNotFoundError(LookupError):
    """Raised by the SessionManager for an unknown session id."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session {session_id} not found")
        self.session_id = session_id

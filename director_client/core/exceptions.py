"""
Core Exceptions - Unified error hierarchy for director_client.

Each layer wraps the error raised below it with its own context via
``DirectorError.wrap`` so the error kind survives while the message
accumulates the path of operations that led to it.
"""
from typing import Any, Optional


class DirectorError(Exception):
    """Base exception for all director client errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | {self.details}"
        return self.message

    def wrap(self, context: str) -> "DirectorError":
        """
        Return a copy of this error with ``context`` prefixed to the message.

        The copy keeps the concrete class and all attributes so callers can
        still branch on the error kind. Raise it with ``from`` the original.

        Example:
            >>> err = ParseError("yesterday")
            >>> err.wrap("Finding orphaned VMs").message
            "Finding orphaned VMs: Parsing time 'yesterday'"
        """
        # Bypass __init__: subclasses take different constructor arguments
        wrapped = type(self).__new__(type(self))
        wrapped.__dict__.update(self.__dict__)
        wrapped.message = f"{context}: {self.message}"
        wrapped.details = dict(self.details)
        wrapped.args = (wrapped.message,)
        return wrapped


# =============================================================================
# Request Errors
# =============================================================================

class RequestError(DirectorError):
    """A single HTTP exchange with the director failed."""

    def __init__(
        self,
        message: str,
        path: str = "",
        status_code: Optional[int] = None,
        response: Optional[Any] = None,
        details: dict | None = None,
    ):
        merged = {**(details or {})}
        if path:
            merged.setdefault("path", path)
        if status_code is not None:
            merged.setdefault("status_code", status_code)
        super().__init__(message, merged)
        self.path = path
        self.status_code = status_code
        self.response = response


class TransportError(RequestError):
    """Network or connection failure before a response was received."""

    def __init__(self, method: str, path: str, reason: str):
        super().__init__(
            f"Performing request {method} '{path}': {reason}",
            path=path,
            details={"method": method},
        )
        self.method = method
        self.reason = reason


class DecodeError(RequestError):
    """Response body is not valid JSON or does not match the expected shape."""

    def __init__(self, path: str, reason: str, response: Optional[Any] = None):
        super().__init__(
            f"Unmarshaling director response: {reason}",
            path=path,
            status_code=getattr(response, "status_code", None),
            response=response,
        )
        self.reason = reason


class EndpointError(RequestError):
    """Director answered with a non-successful status code."""

    def __init__(
        self,
        path: str,
        status_code: Optional[int],
        body: str = "",
        response: Optional[Any] = None,
        message: Optional[str] = None,
    ):
        super().__init__(
            message or (
                f"Director responded with non-successful status code "
                f"'{status_code}' response '{body}'"
            ),
            path=path,
            status_code=status_code,
            response=response,
        )
        self.body = body


class NotSupportedError(EndpointError):
    """Endpoint does not exist on this director version (HTTP 404)."""

    def __init__(self, path: str, response: Optional[Any] = None):
        super().__init__(
            path,
            404,
            response=response,
            message=f"Endpoint '{path}' is not supported by this director",
        )


# =============================================================================
# Parse Errors
# =============================================================================

class ParseError(DirectorError):
    """Director timestamp does not match any known format."""

    def __init__(self, raw: str, formats: tuple = ()):
        super().__init__(
            f"Parsing time '{raw}'",
            {"value": raw, "formats": list(formats)},
        )
        self.raw = raw


# =============================================================================
# Task Errors
# =============================================================================

class TaskError(DirectorError):
    """Director task finished in a non-successful state."""

    def __init__(
        self,
        task_id: int,
        state: str,
        description: str = "",
        result: str = "",
        message: Optional[str] = None,
    ):
        super().__init__(
            message or f"Expected task '{task_id}' to succeed but state is '{state}'",
            {"task_id": task_id, "state": state, "description": description, "result": result},
        )
        self.task_id = task_id
        self.state = state
        self.description = description
        self.result = result


class TaskTimeoutError(TaskError):
    """Director task did not reach a terminal state before the deadline."""

    def __init__(self, task_id: int, state: str, timeout_seconds: float):
        super().__init__(
            task_id,
            state,
            message=(
                f"Task '{task_id}' did not finish within {timeout_seconds:g}s "
                f"(last state '{state}')"
            ),
        )
        self.details["timeout"] = timeout_seconds
        self.timeout_seconds = timeout_seconds


class OperationCancelledError(DirectorError):
    """Caller cancelled a long-running operation."""

    def __init__(self, operation: str, task_id: Optional[int] = None):
        details: dict = {"operation": operation}
        if task_id is not None:
            details["task_id"] = task_id
        super().__init__(f"Operation '{operation}' was cancelled", details)
        self.operation = operation
        self.task_id = task_id


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(DirectorError):
    """Invalid client configuration."""
    pass

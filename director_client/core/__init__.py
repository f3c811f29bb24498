"""
director_client core - error hierarchy and interfaces.
"""

from director_client.core.exceptions import (
    ConfigurationError,
    DecodeError,
    DirectorError,
    EndpointError,
    NotSupportedError,
    OperationCancelledError,
    ParseError,
    RequestError,
    TaskError,
    TaskTimeoutError,
    TransportError,
)

__all__ = [
    "ConfigurationError",
    "DecodeError",
    "DirectorError",
    "EndpointError",
    "NotSupportedError",
    "OperationCancelledError",
    "ParseError",
    "RequestError",
    "TaskError",
    "TaskTimeoutError",
    "TransportError",
]

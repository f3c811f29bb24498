"""
director_client - client library for a deployment director's REST API.

Usage:
    from director_client import build_director, DirectorConfig

    director = build_director(DirectorConfig(url="https://10.0.0.6:25555"))
    for vm in director.with_context("deploy-42").orphaned_vms():
        print(vm.cid, vm.orphaned_at)
"""
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("director-client")
except PackageNotFoundError:
    __version__ = "0.1.0"

from director_client.config import DirectorConfig, load_director_config
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
from director_client.core.protocols import AsyncOp, Director, HTTPTransport, SyncOp
from director_client.director.client import Client
from director_client.director.client_request import ClientRequest
from director_client.director.director import DirectorImpl, build_director
from director_client.director.models import (
    CertificateExpiryInfo,
    CleanUp,
    OrphanedVM,
    RawResponse,
    Task,
    TaskState,
)
from director_client.director.task_client_request import TaskClientRequest
from director_client.director.task_reporter import LoggingTaskReporter, TaskReporter
from director_client.director.time_parser import TimeParser
from director_client.director.transport import RequestsTransport

__all__ = [
    # Entry points
    "DirectorImpl",
    "build_director",
    "DirectorConfig",
    "load_director_config",
    # Request layers
    "Client",
    "ClientRequest",
    "TaskClientRequest",
    "RequestsTransport",
    "TimeParser",
    "TaskReporter",
    "LoggingTaskReporter",
    # Protocols
    "AsyncOp",
    "Director",
    "HTTPTransport",
    "SyncOp",
    # Models
    "CertificateExpiryInfo",
    "CleanUp",
    "OrphanedVM",
    "RawResponse",
    "Task",
    "TaskState",
    # Errors
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

"""
Core Protocols - Interfaces between the request layers.

Synchronous and task-based operations are separate capabilities:
``SyncOp`` completes in one request/response exchange, ``AsyncOp`` submits
a director task and blocks until it is terminal.
"""
import threading
from typing import (
    Any,
    BinaryIO,
    Callable,
    List,
    MutableMapping,
    Optional,
    Protocol,
    Tuple,
    runtime_checkable,
)

from director_client.director.models import (
    CertificateExpiryInfo,
    CleanUp,
    OrphanedVM,
    RawResponse,
)

HeaderSetter = Callable[[MutableMapping[str, str]], None]


# =============================================================================
# Transport Protocol
# =============================================================================

@runtime_checkable
class HTTPTransport(Protocol):
    """
    Protocol for the HTTP transport collaborator.

    Executes one verbed exchange. When ``out`` is given and the response is
    successful, the body is streamed into it and the returned body is empty.
    Raises TransportError on connection failures; never raises on status.
    """

    def request(
        self,
        method: str,
        path: str,
        headers: MutableMapping[str, str],
        body: Optional[bytes] = None,
        out: Optional[BinaryIO] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> RawResponse:
        ...


# =============================================================================
# Operation Protocols
# =============================================================================

@runtime_checkable
class SyncOp(Protocol):
    """Operations completed within a single request/response cycle."""

    def get(self, path: str, model: Any) -> Any:
        ...

    def raw_get(
        self,
        path: str,
        out: Optional[BinaryIO] = None,
        set_headers: Optional[HeaderSetter] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> Tuple[bytes, RawResponse]:
        ...

    def raw_put(
        self,
        path: str,
        payload: bytes,
        set_headers: Optional[HeaderSetter] = None,
    ) -> Tuple[bytes, RawResponse]:
        ...

    def raw_post(
        self,
        path: str,
        payload: bytes,
        set_headers: Optional[HeaderSetter] = None,
    ) -> Tuple[bytes, RawResponse]:
        ...

    def raw_delete(self, path: str) -> Tuple[bytes, RawResponse]:
        ...


@runtime_checkable
class AsyncOp(Protocol):
    """Operations the director runs as a background task."""

    def post_result(
        self,
        path: str,
        payload: bytes,
        set_headers: Optional[HeaderSetter] = None,
        *,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> bytes:
        ...


# =============================================================================
# Director Protocol
# =============================================================================

@runtime_checkable
class Director(Protocol):
    """Public surface of the director façade."""

    def with_context(self, context_id: str) -> "Director":
        ...

    def orphaned_vms(self) -> List[OrphanedVM]:
        ...

    def enable_resurrection(self, enabled: bool) -> None:
        ...

    def clean_up(self, all: bool, dry_run: bool) -> CleanUp:
        ...

    def download_resource_unchecked(
        self,
        blobstore_id: str,
        out: BinaryIO,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        ...

    def certificate_expiry(self) -> List[CertificateExpiryInfo]:
        ...

"""
Director façade.

``DirectorImpl`` forwards to a Client. ``with_context`` derives a new façade
whose whole request tree carries a correlation id; the receiver is left as
it was, so scoped and unscoped façades can be used side by side.
"""
import threading
from dataclasses import dataclass
from typing import BinaryIO, List, Optional

from pydantic import TypeAdapter, ValidationError

from director_client.config.loader import load_director_config
from director_client.config.models import DirectorConfig
from director_client.core.exceptions import (
    DecodeError,
    EndpointError,
    NotSupportedError,
    RequestError,
)
from director_client.core.protocols import HTTPTransport
from director_client.director.client import Client
from director_client.director.client_request import ClientRequest
from director_client.director.models import CertificateExpiryInfo, CleanUp, OrphanedVM
from director_client.director.task_client_request import TaskClientRequest
from director_client.director.task_reporter import LoggingTaskReporter, TaskReporter
from director_client.director.transport import RequestsTransport
from director_client.utils.logger import logger

CERTIFICATE_EXPIRY_PATH = "/director/certificate_expiry"


@dataclass(frozen=True)
class DirectorImpl:
    """Context-aware entry point for director operations."""

    client: Client

    def with_context(self, context_id: str) -> "DirectorImpl":
        return DirectorImpl(client=self.client.with_context(context_id))

    def orphaned_vms(self) -> List[OrphanedVM]:
        return self.client.orphaned_vms()

    def enable_resurrection(self, enabled: bool) -> None:
        self.client.enable_resurrection_all(enabled)

    def clean_up(
        self,
        all: bool,
        dry_run: bool,
        *,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> CleanUp:
        return self.client.clean_up(all, dry_run, timeout=timeout, cancel_event=cancel_event)

    def download_resource_unchecked(
        self,
        blobstore_id: str,
        out: BinaryIO,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        self.client.download_resource_unchecked(blobstore_id, out, cancel_event)

    def certificate_expiry(self) -> List[CertificateExpiryInfo]:
        """
        Fetch expiry information for the director's certificates.

        Raises:
            NotSupportedError: Director predates the endpoint (HTTP 404)
            EndpointError: Any other request failure
            DecodeError: Body does not match the expected shape
        """
        try:
            body, response = self.client.client_request.raw_get(CERTIFICATE_EXPIRY_PATH)
        except RequestError as e:
            if e.status_code == 404:
                logger.debug("Director does not expose certificate expiry information")
                raise NotSupportedError(CERTIFICATE_EXPIRY_PATH, e.response).wrap(
                    "Certificate expiry information not supported"
                ) from e
            if isinstance(e, EndpointError):
                raise e.wrap("Getting certificate expiry endpoint error") from e
            raise EndpointError(
                CERTIFICATE_EXPIRY_PATH,
                e.status_code,
                response=e.response,
                message=e.message,
            ).wrap("Getting certificate expiry endpoint error") from e

        try:
            return TypeAdapter(List[CertificateExpiryInfo]).validate_json(body)
        except ValidationError as e:
            raise DecodeError(CERTIFICATE_EXPIRY_PATH, str(e), response).wrap(
                "Getting certificate expiry endpoint error"
            ) from e


def build_director(
    config: Optional[DirectorConfig] = None,
    transport: Optional[HTTPTransport] = None,
    reporter: Optional[TaskReporter] = None,
) -> DirectorImpl:
    """
    Assemble a DirectorImpl from configuration.

    Args:
        config: Director settings (default: loaded from file/environment)
        transport: HTTP transport (default: RequestsTransport for ``config``)
        reporter: Task progress reporter (default: LoggingTaskReporter)

    Returns:
        DirectorImpl, scoped to ``config.context_id`` when one is set
    """
    if config is None:
        config = load_director_config()

    client_request = ClientRequest(transport=transport or RequestsTransport(config))
    task_client_request = TaskClientRequest(
        client_request=client_request,
        reporter=reporter or LoggingTaskReporter(),
        poll_interval=config.task_poll_interval,
        max_wait=config.task_max_wait,
    )
    director = DirectorImpl(client=Client(client_request, task_client_request))

    if config.context_id:
        director = director.with_context(config.context_id)
    return director

"""
Director client - domain operations.

Composes the synchronous ClientRequest and the task-based TaskClientRequest
into the operations callers use. Wire schemas are translated into domain
types here and go no further.
"""
import json
import threading
from dataclasses import dataclass, field
from typing import BinaryIO, List, MutableMapping, Optional
from urllib.parse import quote, urlencode

from director_client.config.constants import CONTENT_TYPE_JSON
from director_client.core.exceptions import DirectorError
from director_client.director.client_request import ClientRequest
from director_client.director.models import CleanUp, OrphanedVM, OrphanedVMResponse
from director_client.director.task_client_request import TaskClientRequest
from director_client.director.time_parser import TimeParser
from director_client.utils.logger import logger


def _json_headers(headers: MutableMapping[str, str]) -> None:
    headers["Content-Type"] = CONTENT_TYPE_JSON


def _bool_param(value: bool) -> str:
    return "true" if value else "false"


@dataclass(frozen=True)
class Client:
    """Domain operations against one director, optionally context-scoped."""

    client_request: ClientRequest
    task_client_request: TaskClientRequest
    time_parser: TimeParser = field(default_factory=TimeParser)

    def with_context(self, context_id: str) -> "Client":
        return Client(
            client_request=self.client_request.with_context(context_id),
            task_client_request=self.task_client_request.with_context(context_id),
            time_parser=self.time_parser,
        )

    def orphaned_vms(self) -> List[OrphanedVM]:
        """
        List VMs no longer tracked by any deployment.

        A single unparsable ``orphaned_at`` fails the whole call.
        """
        try:
            responses = self.client_request.get("/orphaned_vms", List[OrphanedVMResponse])
        except DirectorError as e:
            raise e.wrap("Finding orphaned VMs") from e

        orphaned_vms: List[OrphanedVM] = []
        for r in responses:
            try:
                orphaned_at = self.time_parser.parse(r.orphaned_at)
            except DirectorError as e:
                raise e.wrap(f"Converting orphaned at '{r.orphaned_at}' to time") from e

            orphaned_vms.append(OrphanedVM(
                cid=r.cid,
                deployment_name=r.deployment_name or "",
                instance_name=r.instance_name or "",
                az_name=r.az,
                ip_addresses=list(r.ip_addresses or []),
                orphaned_at=orphaned_at,
            ))

        return orphaned_vms

    def enable_resurrection_all(self, enabled: bool) -> None:
        """Turn VM resurrection on or off for every deployment."""
        payload = json.dumps({"resurrection_paused": not enabled}).encode()

        try:
            self.client_request.raw_put("/resurrection", payload, _json_headers)
        except DirectorError as e:
            raise e.wrap("Changing VM resurrection state for all") from e

    def clean_up(
        self,
        all: bool,
        dry_run: bool,
        *,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> CleanUp:
        """
        Remove unused releases, stemcells, disks and blobs.

        A dry run returns the preview right away. A committed cleanup runs as
        a director task and returns an empty CleanUp once it succeeds.
        """
        if dry_run:
            return self._dry_clean_up(all)

        self._clean_up(all, timeout=timeout, cancel_event=cancel_event)
        return CleanUp()

    def _dry_clean_up(self, all: bool) -> CleanUp:
        path = f"/cleanup/dryrun?{urlencode({'remove_all': _bool_param(all)})}"

        try:
            return self.client_request.get(path, CleanUp)
        except DirectorError as e:
            raise e.wrap("Cleaning up resources") from e

    def _clean_up(
        self,
        all: bool,
        timeout: Optional[float],
        cancel_event: Optional[threading.Event],
    ) -> None:
        payload = json.dumps({"config": {"remove_all": all}}).encode()

        try:
            self.task_client_request.post_result(
                "/cleanup",
                payload,
                _json_headers,
                timeout=timeout,
                cancel_event=cancel_event,
            )
        except DirectorError as e:
            raise e.wrap("Cleaning up resources") from e

    def download_resource_unchecked(
        self,
        blobstore_id: str,
        out: BinaryIO,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        """Stream a blobstore resource into ``out`` without verifying its digest."""
        path = f"/resources/{quote(blobstore_id, safe='')}"

        try:
            self.client_request.raw_get(path, out, None, cancel_event)
        except DirectorError as e:
            raise e.wrap(f"Downloading resource '{blobstore_id}'") from e

        logger.debug(f"Downloaded resource '{blobstore_id}'")

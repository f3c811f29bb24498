"""
requests-based HTTP transport for the director.

One ``requests.Session`` per transport gives connection pooling; the request
layers above only see the ``HTTPTransport`` protocol.
"""
import threading
from typing import BinaryIO, MutableMapping, Optional

import requests

from director_client.config.models import DirectorConfig
from director_client.core.exceptions import OperationCancelledError, TransportError
from director_client.director.models import RawResponse
from director_client.utils.logger import log_prefix, logger
from director_client.utils.security import redact_headers


class BearerAuth(requests.auth.AuthBase):
    """Attach a bearer token to every request."""

    def __init__(self, token: str):
        self.token = token

    def __call__(self, request):
        request.headers["Authorization"] = f"Bearer {self.token}"
        return request


class RequestsTransport:
    """
    HTTP transport backed by a requests.Session.

    Redirects are followed, which turns the director's task-creation
    redirect (302 to /tasks/<id>) into the task JSON itself.
    """

    def __init__(
        self,
        config: DirectorConfig,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize transport.

        Args:
            config: Director connection settings
            session: Optional pre-built session (tests, custom adapters)
        """
        self.config = config
        self.base_url = config.url
        self.session = session or requests.Session()
        self.session.verify = config.verify

        if config.token:
            self.session.auth = BearerAuth(config.token)
        elif config.username and config.password is not None:
            self.session.auth = (config.username, config.password)

    def request(
        self,
        method: str,
        path: str,
        headers: MutableMapping[str, str],
        body: Optional[bytes] = None,
        out: Optional[BinaryIO] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> RawResponse:
        """
        Perform one exchange with the director.

        Args:
            method: HTTP verb
            path: Path relative to the director URL (may contain a query)
            headers: Request headers
            body: Raw request payload
            out: Writable binary stream; successful bodies are streamed into it
            cancel_event: Checked between streamed chunks

        Returns:
            RawResponse (body empty when streamed into ``out``)

        Raises:
            TransportError: On connection, TLS or timeout failures
            OperationCancelledError: If cancel_event is set mid-stream
        """
        url = f"{self.base_url}{path}"
        logger.debug(f"{log_prefix('🌐')} {method} {path} headers={redact_headers(headers)}")

        try:
            response = self.session.request(
                method,
                url,
                headers=dict(headers),
                data=body,
                stream=out is not None,
                timeout=self.config.timeout,
                allow_redirects=True,
            )
        except requests.exceptions.RequestException as e:
            logger.warning(f"{log_prefix('⚠️')} {method} {path} failed: {e}")
            raise TransportError(method, path, str(e)) from e

        try:
            if out is not None and response.ok:
                self._stream(response, out, method, path, cancel_event)
                content = b""
            else:
                content = response.content
        except requests.exceptions.RequestException as e:
            raise TransportError(method, path, f"reading response body: {e}") from e
        finally:
            response.close()

        logger.debug(f"{log_prefix('🌐')} {method} {path} -> {response.status_code}")
        return RawResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=content,
            url=response.url or url,
        )

    def _stream(
        self,
        response: requests.Response,
        out: BinaryIO,
        method: str,
        path: str,
        cancel_event: Optional[threading.Event],
    ) -> None:
        written = 0
        for chunk in response.iter_content(chunk_size=self.config.download_chunk_size):
            if cancel_event is not None and cancel_event.is_set():
                logger.info(f"{log_prefix('🛑')} {method} {path} cancelled after {written} bytes")
                raise OperationCancelledError(f"{method} {path}")
            if chunk:
                out.write(chunk)
                written += len(chunk)
        logger.debug(f"{log_prefix('📥')} {method} {path} streamed {written} bytes")

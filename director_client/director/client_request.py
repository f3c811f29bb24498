"""
Synchronous request executor for the director API.

Every operation here completes in a single request/response exchange.
"""
import json
import threading
from dataclasses import dataclass, replace
from typing import Any, BinaryIO, Dict, Optional, Tuple

from pydantic import TypeAdapter, ValidationError

from director_client.config.constants import CONTEXT_ID_HEADER, MAX_ERROR_BODY_LENGTH
from director_client.core.exceptions import DecodeError, EndpointError
from director_client.core.protocols import HeaderSetter, HTTPTransport
from director_client.director.models import RawResponse
from director_client.utils.logger import context_scope, logger


@dataclass(frozen=True)
class ClientRequest:
    """
    Low-level executor: GET/PUT/POST/DELETE against a director path.

    Immutable; ``with_context`` returns a new request carrying the
    correlation id instead of changing this one.
    """

    transport: HTTPTransport
    context_id: Optional[str] = None

    def with_context(self, context_id: str) -> "ClientRequest":
        return replace(self, context_id=context_id)

    def get(self, path: str, model: Any) -> Any:
        """
        GET ``path`` and decode the JSON body as ``model``.

        Args:
            path: Director path, may include a query string
            model: Pydantic model or type understood by TypeAdapter
                   (e.g. ``list[OrphanedVMResponse]``)

        Raises:
            TransportError: Connection failure
            EndpointError: Non-successful status
            DecodeError: Body is not JSON or does not match ``model``
        """
        body, response = self.raw_get(path)
        return self.decode(path, body, model, response)

    @staticmethod
    def decode(path: str, body: bytes, model: Any, response: Optional[RawResponse] = None) -> Any:
        """Decode a JSON body as ``model``, raising DecodeError on failure."""
        try:
            data = json.loads(body or b"null")
        except ValueError as e:
            raise DecodeError(path, f"invalid JSON: {e}", response) from e

        try:
            return TypeAdapter(model).validate_python(data)
        except ValidationError as e:
            raise DecodeError(path, f"unexpected response shape: {e}", response) from e

    def raw_get(
        self,
        path: str,
        out: Optional[BinaryIO] = None,
        set_headers: Optional[HeaderSetter] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> Tuple[bytes, RawResponse]:
        """
        GET ``path``; stream into ``out`` when given, otherwise buffer.

        The EndpointError raised on a non-successful status carries the
        response so callers can branch on its status code.
        """
        return self._request("GET", path, None, out, set_headers, cancel_event)

    def raw_put(
        self,
        path: str,
        payload: bytes,
        set_headers: Optional[HeaderSetter] = None,
    ) -> Tuple[bytes, RawResponse]:
        return self._request("PUT", path, payload, None, set_headers)

    def raw_post(
        self,
        path: str,
        payload: bytes,
        set_headers: Optional[HeaderSetter] = None,
    ) -> Tuple[bytes, RawResponse]:
        return self._request("POST", path, payload, None, set_headers)

    def raw_delete(self, path: str) -> Tuple[bytes, RawResponse]:
        return self._request("DELETE", path, None, None, None)

    def _request(
        self,
        method: str,
        path: str,
        payload: Optional[bytes],
        out: Optional[BinaryIO],
        set_headers: Optional[HeaderSetter],
        cancel_event: Optional[threading.Event] = None,
    ) -> Tuple[bytes, RawResponse]:
        headers: Dict[str, str] = {}
        if set_headers is not None:
            set_headers(headers)
        if self.context_id:
            headers[CONTEXT_ID_HEADER] = self.context_id

        with context_scope(self.context_id):
            response = self.transport.request(
                method,
                path,
                headers,
                body=payload,
                out=out,
                cancel_event=cancel_event,
            )

            if not response.ok:
                text = response.body[:MAX_ERROR_BODY_LENGTH].decode("utf-8", errors="replace")
                logger.debug(f"{method} {path} returned {response.status_code}")
                raise EndpointError(path, response.status_code, text, response=response)

        return response.body, response

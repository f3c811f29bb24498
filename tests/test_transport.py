"""
Tests for the requests-based transport.
"""
import io
import threading
import unittest
from unittest.mock import MagicMock

import requests

from director_client.config.models import DirectorConfig
from director_client.core.exceptions import OperationCancelledError, TransportError
from director_client.director.transport import BearerAuth, RequestsTransport


def _response(status=200, content=b"", chunks=None, url="https://director:25555/x"):
    response = MagicMock()
    response.status_code = status
    response.ok = 200 <= status < 400
    response.content = content
    response.headers = {"Content-Type": "application/json"}
    response.url = url
    response.iter_content.return_value = iter(chunks or [])
    return response


class TestRequestsTransport(unittest.TestCase):
    """Test cases for RequestsTransport."""

    def setUp(self):
        """Set up test fixtures."""
        self.config = DirectorConfig(url="https://director:25555/", read_timeout=30)
        self.session = MagicMock(spec=requests.Session)
        self.transport = RequestsTransport(self.config, session=self.session)

    def test_buffers_body(self):
        """Test buffered responses return the body."""
        self.session.request.return_value = _response(content=b'{"a": 1}')

        response = self.transport.request("GET", "/info", {"X-Bosh-Context-Id": "abc"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.body, b'{"a": 1}')
        self.session.request.assert_called_once_with(
            "GET",
            "https://director:25555/info",
            headers={"X-Bosh-Context-Id": "abc"},
            data=None,
            stream=False,
            timeout=(10.0, 30.0),
            allow_redirects=True,
        )

    def test_streams_into_writer(self):
        """Test successful bodies are streamed when a writer is given."""
        self.session.request.return_value = _response(chunks=[b"ab", b"", b"cd"])
        out = io.BytesIO()

        response = self.transport.request("GET", "/resources/x", {}, out=out)

        self.assertEqual(out.getvalue(), b"abcd")
        self.assertEqual(response.body, b"")
        self.assertTrue(self.session.request.call_args.kwargs["stream"])

    def test_error_body_is_buffered_even_with_writer(self):
        """Test non-successful responses are not written to the writer."""
        self.session.request.return_value = _response(status=404, content=b"Not found")
        out = io.BytesIO()

        response = self.transport.request("GET", "/resources/x", {}, out=out)

        self.assertEqual(out.getvalue(), b"")
        self.assertEqual(response.body, b"Not found")

    def test_cancel_stops_stream(self):
        """Test the cancel event is honoured between chunks."""
        self.session.request.return_value = _response(chunks=[b"ab", b"cd"])
        cancel = threading.Event()
        cancel.set()

        with self.assertRaises(OperationCancelledError):
            self.transport.request("GET", "/resources/x", {}, out=io.BytesIO(), cancel_event=cancel)

    def test_connection_error_becomes_transport_error(self):
        """Test requests exceptions are translated."""
        self.session.request.side_effect = requests.exceptions.ConnectionError("refused")

        with self.assertRaises(TransportError) as ctx:
            self.transport.request("PUT", "/resurrection", {}, body=b"{}")

        self.assertEqual(ctx.exception.path, "/resurrection")
        self.assertEqual(ctx.exception.method, "PUT")
        self.assertIsNone(ctx.exception.status_code)

    def test_response_is_closed(self):
        """Test the underlying response is always released."""
        response = _response(content=b"x")
        self.session.request.return_value = response

        self.transport.request("GET", "/info", {})

        response.close.assert_called_once()


class TestTransportAuth(unittest.TestCase):
    """Test cases for session authentication and TLS settings."""

    def test_basic_auth(self):
        session = requests.Session()
        RequestsTransport(
            DirectorConfig(url="https://d", username="admin", password="secret"), session=session
        )
        self.assertEqual(session.auth, ("admin", "secret"))

    def test_token_wins_over_basic_auth(self):
        session = requests.Session()
        RequestsTransport(
            DirectorConfig(url="https://d", username="admin", password="secret", token="tok"),
            session=session,
        )
        self.assertIsInstance(session.auth, BearerAuth)

    def test_bearer_auth_sets_header(self):
        request = MagicMock()
        request.headers = {}
        BearerAuth("tok")(request)
        self.assertEqual(request.headers["Authorization"], "Bearer tok")

    def test_verify_settings(self):
        session = requests.Session()
        RequestsTransport(DirectorConfig(url="https://d", ca_cert="/etc/ca.pem"), session=session)
        self.assertEqual(session.verify, "/etc/ca.pem")

        session = requests.Session()
        RequestsTransport(DirectorConfig(url="https://d", verify_tls=False), session=session)
        self.assertFalse(session.verify)

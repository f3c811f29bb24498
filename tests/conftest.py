"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import pytest

from director_client.core.exceptions import OperationCancelledError
from director_client.director.client import Client
from director_client.director.client_request import ClientRequest
from director_client.director.director import DirectorImpl
from director_client.director.models import RawResponse
from director_client.director.task_client_request import TaskClientRequest
from director_client.utils.logger import logger


@dataclass
class RecordedRequest:
    method: str
    path: str
    headers: dict
    body: bytes | None

    def json(self) -> Any:
        return json.loads(self.body)


@dataclass
class FakeTransport:
    """
    In-memory HTTPTransport.

    Responses are queued per (method, path); the last queued response for a
    route is reused once the queue is drained.
    """

    routes: dict = field(default_factory=dict)
    requests: list = field(default_factory=list)

    def add(self, method: str, path: str, status: int = 200, body: Any = b"", headers: dict | None = None):
        if not isinstance(body, bytes):
            body = json.dumps(body).encode()
        self.routes.setdefault((method, path), []).append(
            RawResponse(status_code=status, headers=headers or {}, body=body, url=path)
        )
        return self

    def request(self, method, path, headers, body=None, out=None, cancel_event=None):
        self.requests.append(RecordedRequest(method, path, dict(headers), body))

        queue = self.routes.get((method, path))
        if not queue:
            return RawResponse(status_code=404, body=b"Not found", url=path)
        response = queue.pop(0) if len(queue) > 1 else queue[0]

        if out is not None and response.ok:
            if cancel_event is not None and cancel_event.is_set():
                raise OperationCancelledError(f"{method} {path}")
            out.write(response.body)
            return RawResponse(response.status_code, response.headers, b"", response.url)
        return response

    def paths(self, method: str | None = None) -> list:
        return [r.path for r in self.requests if method is None or r.method == method]

    def last(self, method: str) -> RecordedRequest:
        return [r for r in self.requests if r.method == method][-1]


class RecordingReporter:
    """TaskReporter that remembers every notification."""

    def __init__(self):
        self.events = []

    def task_started(self, task_id):
        self.events.append(("started", task_id))

    def task_state_changed(self, task_id, state):
        self.events.append(("state", task_id, state.value))

    def task_finished(self, task):
        self.events.append(("finished", task.id, task.state.value))


@pytest.fixture
def log_records():
    """Capture loguru records emitted during the test."""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def client_request(transport) -> ClientRequest:
    return ClientRequest(transport=transport)


@pytest.fixture
def task_client_request(client_request, reporter) -> TaskClientRequest:
    return TaskClientRequest(
        client_request=client_request,
        reporter=reporter,
        poll_interval=0.001,
        max_wait=5,
    )


@pytest.fixture
def client(client_request, task_client_request) -> Client:
    return Client(client_request, task_client_request)


@pytest.fixture
def director(client) -> DirectorImpl:
    return DirectorImpl(client=client)


def queue_task(transport: FakeTransport, path: str, task_id: int = 42, states=("processing", "done"), result=b""):
    """Script a task-starting POST followed by the given poll states."""
    transport.add("POST", path, body={"id": task_id, "state": "queued", "description": "task"})
    for state in states:
        transport.add(
            "GET",
            f"/tasks/{task_id}",
            body={"id": task_id, "state": state, "description": "task", "result": "boom" if state == "error" else None},
        )
    transport.add("GET", f"/tasks/{task_id}/output?type=result", body=result)
    transport.add("DELETE", f"/tasks/{task_id}", status=204)
    return transport

"""
Tests for TaskClientRequest (task submission and polling).
"""
import threading
from dataclasses import replace
from itertools import count

import pytest

from conftest import queue_task
from director_client.core.exceptions import (
    EndpointError,
    OperationCancelledError,
    TaskError,
    TaskTimeoutError,
)
from director_client.core.protocols import AsyncOp
from director_client.director.models import TaskState
from director_client.director.task_reporter import LoggingTaskReporter


class TestPostResult:
    """Tests for post_result."""

    def test_returns_result_of_finished_task(self, transport, task_client_request):
        queue_task(transport, "/cleanup", task_id=7, result=b"cleaned")

        result = task_client_request.post_result("/cleanup", b"{}")

        assert result == b"cleaned"
        assert transport.paths("GET") == ["/tasks/7", "/tasks/7", "/tasks/7/output?type=result"]

    def test_passes_payload_and_headers(self, transport, task_client_request):
        queue_task(transport, "/cleanup")

        task_client_request.post_result(
            "/cleanup",
            b'{"config": {}}',
            lambda headers: headers.update({"Content-Type": "application/json"}),
        )

        post = transport.last("POST")
        assert post.body == b'{"config": {}}'
        assert post.headers["Content-Type"] == "application/json"

    @pytest.mark.parametrize("state", ["error", "cancelled", "timeout"])
    def test_failed_task_raises_task_error(self, transport, task_client_request, state):
        queue_task(transport, "/cleanup", task_id=9, states=("processing", state))

        with pytest.raises(TaskError) as exc_info:
            task_client_request.post_result("/cleanup", b"{}")

        assert exc_info.value.task_id == 9
        assert exc_info.value.state == state
        assert not isinstance(exc_info.value, TaskTimeoutError)
        assert "/tasks/9/output?type=result" not in transport.paths()

    def test_error_task_carries_director_result(self, transport, task_client_request):
        queue_task(transport, "/cleanup", states=("error",))

        with pytest.raises(TaskError) as exc_info:
            task_client_request.post_result("/cleanup", b"{}")

        assert exc_info.value.result == "boom"

    def test_rejected_submission_raises_endpoint_error(self, transport, task_client_request):
        transport.add("POST", "/cleanup", status=401, body=b"Not authorized")

        with pytest.raises(EndpointError) as exc_info:
            task_client_request.post_result("/cleanup", b"{}")

        assert exc_info.value.status_code == 401


class TestWaitForCompletion:
    """Tests for deadlines, cancellation and reporting."""

    def test_times_out_when_task_never_finishes(self, transport, task_client_request):
        queue_task(transport, "/cleanup", task_id=3, states=("processing",))
        ticks = count()
        fake = replace(task_client_request, clock=lambda: next(ticks))

        with pytest.raises(TaskTimeoutError) as exc_info:
            fake.post_result("/cleanup", b"{}", timeout=3)

        assert exc_info.value.task_id == 3
        assert exc_info.value.state == "processing"
        assert exc_info.value.timeout_seconds == 3

    def test_default_deadline_is_max_wait(self, transport, task_client_request):
        queue_task(transport, "/cleanup", states=("queued",))
        ticks = count()
        fake = replace(task_client_request, clock=lambda: next(ticks), max_wait=2)

        with pytest.raises(TaskTimeoutError) as exc_info:
            fake.post_result("/cleanup", b"{}")

        assert exc_info.value.timeout_seconds == 2

    def test_cancel_event_cancels_director_task(self, transport, task_client_request):
        queue_task(transport, "/cleanup", task_id=5, states=("processing",))
        cancel = threading.Event()
        cancel.set()

        with pytest.raises(OperationCancelledError) as exc_info:
            task_client_request.post_result("/cleanup", b"{}", cancel_event=cancel)

        assert exc_info.value.task_id == 5
        assert transport.paths("DELETE") == ["/tasks/5"]

    def test_cancellation_still_reported_when_delete_fails(self, transport, task_client_request):
        queue_task(transport, "/cleanup", task_id=5, states=("processing",))
        transport.routes[("DELETE", "/tasks/5")] = []
        cancel = threading.Event()
        cancel.set()

        with pytest.raises(OperationCancelledError):
            task_client_request.post_result("/cleanup", b"{}", cancel_event=cancel)

    def test_reporter_sees_state_changes_once(self, transport, task_client_request, reporter):
        queue_task(transport, "/cleanup", task_id=4, states=("queued", "processing", "processing", "done"))

        task = task_client_request.wait_for_completion(4)

        assert task.state is TaskState.DONE
        assert reporter.events == [
            ("started", 4),
            ("state", 4, "queued"),
            ("state", 4, "processing"),
            ("state", 4, "done"),
            ("finished", 4, "done"),
        ]

    def test_cancel_task(self, transport, task_client_request):
        transport.add("DELETE", "/tasks/11", status=204)

        task_client_request.cancel_task(11)

        assert transport.paths("DELETE") == ["/tasks/11"]

    def test_cancel_task_wraps_errors(self, task_client_request):
        with pytest.raises(EndpointError, match="Cancelling task '12'"):
            task_client_request.cancel_task(12)


class TestContext:
    def test_with_context_tags_every_exchange(self, transport, task_client_request):
        queue_task(transport, "/cleanup")

        task_client_request.with_context("abc").post_result("/cleanup", b"{}")

        assert {r.headers.get("X-Bosh-Context-Id") for r in transport.requests} == {"abc"}

    def test_with_context_keeps_polling_settings(self, task_client_request):
        scoped = task_client_request.with_context("abc")

        assert scoped.poll_interval == task_client_request.poll_interval
        assert scoped.reporter is task_client_request.reporter
        assert task_client_request.client_request.context_id is None

    def test_task_progress_logs_carry_context_id(self, transport, task_client_request, log_records):
        queue_task(transport, "/cleanup", task_id=5)
        scoped = replace(task_client_request, reporter=LoggingTaskReporter()).with_context("abc")

        scoped.post_result("/cleanup", b"{}")

        messages = [r["message"] for r in log_records if r["extra"].get("context_id") == "abc"]
        assert any("Task 5 started" in m for m in messages)
        assert any("Task 5 done" in m for m in messages)


def test_task_client_request_is_async_op(task_client_request):
    assert isinstance(task_client_request, AsyncOp)

"""
Task-based request executor.

The director answers long-running operations with a task handle. This module
submits such operations, follows the task until it is terminal and returns
its result payload.
"""
import threading
import time
from dataclasses import dataclass, field, replace
from typing import Callable, Optional

from director_client.config.constants import DEFAULT_TASK_MAX_WAIT, DEFAULT_TASK_POLL_INTERVAL
from director_client.core.exceptions import (
    DirectorError,
    OperationCancelledError,
    TaskError,
    TaskTimeoutError,
)
from director_client.core.protocols import HeaderSetter
from director_client.director.client_request import ClientRequest
from director_client.director.models import Task, TaskState
from director_client.director.task_reporter import LoggingTaskReporter, TaskReporter
from director_client.utils.logger import context_scope, log_prefix, logger


@dataclass(frozen=True)
class TaskClientRequest:
    """
    Wraps a ClientRequest for operations run as director tasks.

    ``post_result`` blocks the calling thread until the task is terminal,
    the deadline passes or ``cancel_event`` is set. Failed tasks are
    surfaced, never retried.
    """

    client_request: ClientRequest
    reporter: TaskReporter = field(default_factory=LoggingTaskReporter)
    poll_interval: float = DEFAULT_TASK_POLL_INTERVAL
    max_wait: float = DEFAULT_TASK_MAX_WAIT
    clock: Callable[[], float] = time.monotonic

    def with_context(self, context_id: str) -> "TaskClientRequest":
        return replace(self, client_request=self.client_request.with_context(context_id))

    def post_result(
        self,
        path: str,
        payload: bytes,
        set_headers: Optional[HeaderSetter] = None,
        *,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> bytes:
        """
        POST ``payload`` to ``path`` and return the finished task's result.

        Args:
            path: Director path that starts a task
            payload: Raw request body
            set_headers: Optional header mutator
            timeout: Seconds to wait for the task (default: max_wait)
            cancel_event: When set, the director task is cancelled

        Returns:
            Raw bytes of GET /tasks/<id>/output?type=result

        Raises:
            TaskError: Task ended in error/cancelled/timeout state
            TaskTimeoutError: Task was not terminal within ``timeout``
            OperationCancelledError: ``cancel_event`` was set
        """
        body, response = self.client_request.raw_post(path, payload, set_headers)
        task = ClientRequest.decode(path, body, Task, response)

        self.wait_for_completion(task.id, timeout=timeout, cancel_event=cancel_event)

        result, _ = self.client_request.raw_get(f"/tasks/{task.id}/output?type=result")
        return result

    def wait_for_completion(
        self,
        task_id: int,
        *,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> Task:
        """
        Poll GET /tasks/<id> until the task is terminal.

        Returns:
            The finished task (state ``done``)
        """
        with context_scope(self.client_request.context_id):
            return self._poll(task_id, timeout, cancel_event)

    def _poll(
        self,
        task_id: int,
        timeout: Optional[float],
        cancel_event: Optional[threading.Event],
    ) -> Task:
        limit = self.max_wait if timeout is None else timeout
        deadline = self.clock() + limit
        last_state: Optional[TaskState] = None

        self.reporter.task_started(task_id)

        while True:
            task = self.client_request.get(f"/tasks/{task_id}", Task)

            if task.state != last_state:
                self.reporter.task_state_changed(task_id, task.state)
                last_state = task.state

            if task.state.is_terminal:
                self.reporter.task_finished(task)
                if not task.state.is_success:
                    raise TaskError(task.id, task.state.value, task.description, task.result or "")
                return task

            if self.clock() >= deadline:
                logger.warning(f"{log_prefix('⏱️')} Task {task_id} still {task.state.value} after {limit:g}s")
                raise TaskTimeoutError(task_id, task.state.value, limit)

            if cancel_event is not None:
                if cancel_event.wait(self.poll_interval):
                    self._cancel_quietly(task_id)
                    raise OperationCancelledError("waiting for task", task_id)
            else:
                time.sleep(self.poll_interval)

    def cancel_task(self, task_id: int) -> None:
        """Ask the director to cancel a running task."""
        try:
            self.client_request.raw_delete(f"/tasks/{task_id}")
        except DirectorError as e:
            raise e.wrap(f"Cancelling task '{task_id}'") from e

        with context_scope(self.client_request.context_id):
            logger.info(f"{log_prefix('🛑')} Cancellation requested for task {task_id}")

    def _cancel_quietly(self, task_id: int) -> None:
        # The caller is told about the cancellation itself; a failed
        # DELETE only gets logged.
        try:
            self.cancel_task(task_id)
        except DirectorError as e:
            logger.warning(f"{log_prefix('⚠️')} {e}")

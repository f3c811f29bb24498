"""
Task progress reporting.
"""
from typing import Protocol, runtime_checkable

from director_client.director.models import Task, TaskState
from director_client.utils.logger import log_prefix, logger


@runtime_checkable
class TaskReporter(Protocol):
    """Receives lifecycle notifications while a director task is followed."""

    def task_started(self, task_id: int) -> None:
        ...

    def task_state_changed(self, task_id: int, state: TaskState) -> None:
        ...

    def task_finished(self, task: Task) -> None:
        ...


class LoggingTaskReporter:
    """Default reporter: writes task progress to the log."""

    def task_started(self, task_id: int) -> None:
        logger.info(f"{log_prefix('⏳')} Task {task_id} started")

    def task_state_changed(self, task_id: int, state: TaskState) -> None:
        logger.debug(f"{log_prefix('⏳')} Task {task_id} is {state.value}")

    def task_finished(self, task: Task) -> None:
        if task.state.is_success:
            logger.info(f"{log_prefix('✅')} Task {task.id} done")
        else:
            logger.warning(f"{log_prefix('❌')} Task {task.id} {task.state.value}: {task.result or ''}")

"""Waiting for server tasks to finish.

This module provides the TaskWaiter class, which polls a task source until every
requested task has completed, a task source call fails, or a deadline passes.

Example usage:
    >>> from taskwait.lib.octopus.client import OctopusClient
    >>> from taskwait.lib.tasks.callbacks import server_tasks_callback, task_details_callback
    >>> from taskwait.lib.tasks.wait import wait
    >>>
    >>> client = OctopusClient("https://octopus.example.com", api_key="API-XXXX")
    >>> wait(
    ...     ["ServerTasks-1"],
    ...     timeout=600,
    ...     show_progress=True,
    ...     get_server_tasks=server_tasks_callback(client),
    ...     get_task_details=task_details_callback(client),
    ... )

Error Handling:
    Every failure is raised as a subclass of WaitError:

    - NoTasksProvidedError / ProgressRequiresSingleTaskError: invalid input, raised before any request
    - NoTasksFoundError: the task source knows none of the requested tasks
    - SnapshotFetchError: the task source failed, on the first fetch or any later poll
    - TasksFailedError: one or more tasks finished unsuccessfully
    - WaitTimeoutError: the deadline passed while tasks were still pending

    Failures while fetching activity logs for progress output are logged and skipped.
"""

import asyncio
import functools
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Iterable, Optional, Sequence

from taskwait.lib.exceptions import (
    NoTasksFoundError,
    NoTasksProvidedError,
    ProgressRequiresSingleTaskError,
    SnapshotFetchError,
    TasksFailedError,
    WaitTimeoutError,
)
from taskwait.lib.logging.context import format_raised_exception_info_as_dict
from taskwait.lib.tasks.callbacks import ServerTasksCallback, TaskDetailsCallback
from taskwait.lib.tasks.constants import DEFAULT_TIMEOUT_SECONDS, POLL_INTERVAL_SECONDS
from taskwait.lib.tasks.presenter import TaskOutputFormatter
from taskwait.models.enums.task_status import TaskStatus
from taskwait.view_models.task import Task, TaskDetails

logger = logging.getLogger(__name__)


class TaskWaiter:
    """Waits on a fixed set of server tasks for a single invocation.

    State is owned by the instance and never shared:

    - pending_task_ids: tasks not yet completed. Only the polling task changes it.
    - failed_task_ids: tasks which completed unsuccessfully, in the order they were seen.
    - rendered_activities: activity log entries already printed in a terminal state.
    - executor: the single thread blocking task source calls run on. It is shut down without
      waiting when :py:meth:`wait` returns, so a call still in flight at the deadline is abandoned.

    A waiter should not be reused once :py:meth:`wait` has returned or raised.
    """

    def __init__(
        self,
        task_ids: Sequence[str],
        get_server_tasks: ServerTasksCallback,
        get_task_details: TaskDetailsCallback,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        show_progress: bool = False,
        formatter: Optional[TaskOutputFormatter] = None,
    ):
        self.task_ids = list(dict.fromkeys(task_ids))
        self.get_server_tasks = get_server_tasks
        self.get_task_details = get_task_details
        self.timeout = timeout
        self.show_progress = show_progress
        self.formatter = formatter if formatter is not None else TaskOutputFormatter()

        self.pending_task_ids: set[str] = set()
        self.failed_task_ids: list[str] = []
        self.rendered_activities: dict[str, bool] = {}
        self.executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="taskwait-fetch")

        self.context: dict[str, Any] = {}
        self.save_to_context({"task_ids": self.task_ids, "timeout": timeout, "show_progress": show_progress})

    def save_to_context(self, ctx: dict) -> dict[str, Any]:
        for k, v in ctx.items():
            self.context[k] = v

        return self.context

    def logging_context(self) -> dict[str, Any]:
        return self.context

    async def wait(self) -> None:
        """Block until every task has completed.

        Raises:
            WaitError: See the module documentation for the specific subclasses.
        """
        try:
            await self._wait()
        finally:
            self.executor.shutdown(wait=False, cancel_futures=True)

    async def _wait(self) -> None:
        if not self.task_ids:
            raise NoTasksProvidedError()

        if self.show_progress and len(self.task_ids) > 1:
            raise ProgressRequiresSingleTaskError()

        tasks = await self._fetch_tasks(self.task_ids)
        if not tasks:
            logger.error(msg="The task source returned no server tasks.", extra=self.logging_context())
            raise NoTasksFoundError()

        for task in tasks:
            status = task.status
            if status is TaskStatus.PENDING:
                self.pending_task_ids.add(task.id)
            elif status is TaskStatus.FAILED:
                self.failed_task_ids.append(task.id)

            self.formatter.print_task_info(task)

        self._save_progress_to_context()

        if not self.pending_task_ids:
            if self.failed_task_ids:
                logger.info(msg="Server tasks had already failed.", extra=self.logging_context())
                raise TasksFailedError(self.failed_task_ids)

            logger.info(msg="Server tasks had already completed.", extra=self.logging_context())
            return

        logger.info(msg=f"Waiting on {len(self.pending_task_ids)} pending server tasks.", extra=self.logging_context())

        polling = asyncio.create_task(self._poll())
        try:
            # On expiry the polling task is cancelled at its next suspension point.
            await asyncio.wait_for(polling, timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(msg="Timed out waiting on pending server tasks.", extra=self.logging_context())
            raise WaitTimeoutError() from None

        logger.info(msg="All server tasks completed.", extra=self.logging_context())

    async def _poll(self) -> None:
        iteration = 0

        while self.pending_task_ids:
            await asyncio.sleep(POLL_INTERVAL_SECONDS)

            iteration += 1
            self.save_to_context({"poll_iteration": iteration})
            logger.debug(msg="Polling pending server tasks.", extra=self.logging_context())

            tasks = await self._fetch_tasks(self.pending_task_ids)
            for task in tasks:
                if self.show_progress:
                    await self._print_progress(task)

                if task.status is TaskStatus.PENDING or task.id not in self.pending_task_ids:
                    continue

                if task.status is TaskStatus.FAILED:
                    self.failed_task_ids.append(task.id)

                self.formatter.print_task_info(task)
                self.pending_task_ids.discard(task.id)

            self._save_progress_to_context()

        if self.failed_task_ids:
            logger.info(msg="One or more server tasks failed.", extra=self.logging_context())
            raise TasksFailedError(self.failed_task_ids)

    async def _print_progress(self, task: Task) -> None:
        details = await self._fetch_details(task.id)
        if details is None:
            return

        for activity in details.activity_logs:
            self.formatter.print_activity_element(activity, 0, self.rendered_activities)

    async def _fetch_tasks(self, task_ids: Iterable[str]) -> list[Task]:
        blocking = functools.partial(self.get_server_tasks, list(task_ids))
        loop = asyncio.get_running_loop()

        try:
            return await loop.run_in_executor(self.executor, blocking)
        except Exception as e:
            logger.error(
                msg="Failed to fetch server tasks. No further polling will occur.",
                extra={**self.logging_context(), **format_raised_exception_info_as_dict(e)},
            )
            raise SnapshotFetchError(e) from e

    async def _fetch_details(self, task_id: str) -> Optional[TaskDetails]:
        blocking = functools.partial(self.get_task_details, task_id)
        loop = asyncio.get_running_loop()

        try:
            return await loop.run_in_executor(self.executor, blocking)
        except Exception as e:
            logger.debug(
                msg=f"Skipped progress output for server task {task_id}. Could not fetch task details.",
                extra={**self.logging_context(), **format_raised_exception_info_as_dict(e)},
            )
            return None

    def _save_progress_to_context(self) -> None:
        self.save_to_context(
            {"pending_task_ids": sorted(self.pending_task_ids), "failed_task_ids": list(self.failed_task_ids)}
        )


async def wait_for_tasks(
    task_ids: Sequence[str],
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    show_progress: bool = False,
    *,
    get_server_tasks: ServerTasksCallback,
    get_task_details: TaskDetailsCallback,
    formatter: Optional[TaskOutputFormatter] = None,
) -> None:
    waiter = TaskWaiter(
        task_ids,
        get_server_tasks,
        get_task_details,
        timeout=timeout,
        show_progress=show_progress,
        formatter=formatter,
    )
    await waiter.wait()


def wait(
    task_ids: Sequence[str],
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    show_progress: bool = False,
    *,
    get_server_tasks: ServerTasksCallback,
    get_task_details: TaskDetailsCallback,
    formatter: Optional[TaskOutputFormatter] = None,
) -> None:
    """Synchronous entry point for :py:func:`wait_for_tasks`."""
    asyncio.run(
        wait_for_tasks(
            task_ids,
            timeout,
            show_progress,
            get_server_tasks=get_server_tasks,
            get_task_details=get_task_details,
            formatter=formatter,
        )
    )

"""
Exceptions raised while waiting on server tasks.

Every failure the waiter reports derives from :class:`WaitError`, so callers can
surface a single message per invocation.
"""

from typing import Sequence


class WaitError(Exception):
    """Base exception for task wait operations."""

    pass


## Input errors


class NoTasksProvidedError(WaitError):
    """No server task IDs were supplied."""

    def __init__(self, message: str = "no server task IDs provided, at least one is required"):
        super().__init__(message)


class ProgressRequiresSingleTaskError(WaitError):
    """Progress output was requested while waiting on more than one task."""

    def __init__(self, message: str = "--progress flag is only supported when waiting for a single task"):
        super().__init__(message)


## Upstream errors


class NoTasksFoundError(WaitError):
    """The task source returned nothing for a non-empty request."""

    def __init__(self, message: str = "no server tasks found"):
        super().__init__(message)


class SnapshotFetchError(WaitError):
    """Fetching task snapshots failed. The underlying transport error is kept as the cause."""

    def __init__(self, cause: BaseException):
        super().__init__(str(cause))
        self.cause = cause


## Outcome errors


class TasksFailedError(WaitError):
    """One or more tasks reached a terminal, unsuccessful state."""

    def __init__(self, task_ids: Sequence[str]):
        self.task_ids = list(task_ids)
        super().__init__(f"One or more deployment tasks failed: {', '.join(self.task_ids)}")


class WaitTimeoutError(WaitError):
    """The deadline elapsed while tasks were still pending."""

    def __init__(self, message: str = "timeout while waiting for pending tasks"):
        super().__init__(message)

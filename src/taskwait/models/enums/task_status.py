"""
Task and activity related enums.
"""

from enum import Enum


class TaskStatus(str, Enum):
    """Completion status of a server task, as seen by the waiter."""

    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class TaskState(str, Enum):
    """Lifecycle state reported by the server for a task."""

    QUEUED = "Queued"
    EXECUTING = "Executing"
    CANCELLING = "Cancelling"
    SUCCESS = "Success"
    FAILED = "Failed"
    CANCELED = "Canceled"
    TIMED_OUT = "TimedOut"


class ActivityStatus(str, Enum):
    """Status of a single entry in a task's activity log."""

    PENDING = "Pending"
    RUNNING = "Running"
    SUCCESS = "Success"
    SUCCESS_WITH_WARNING = "SuccessWithWarning"
    FAILED = "Failed"
    SKIPPED = "Skipped"
    CANCELED = "Canceled"

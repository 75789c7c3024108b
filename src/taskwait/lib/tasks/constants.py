from taskwait.models.enums.task_status import ActivityStatus, TaskState

POLL_INTERVAL_SECONDS = 5
"""Fixed delay between polls of the task source."""

DEFAULT_TIMEOUT_SECONDS = 600
"""Default time to wait for pending tasks before giving up."""

TERMINAL_ACTIVITY_STATUSES = [
    ActivityStatus.SUCCESS,
    ActivityStatus.SUCCESS_WITH_WARNING,
    ActivityStatus.FAILED,
    ActivityStatus.SKIPPED,
    ActivityStatus.CANCELED,
]
"""Activity statuses after which an activity log entry no longer changes."""

SUCCESSFUL_TASK_STATES = [TaskState.SUCCESS]
"""Task states rendered as successful."""

UNSUCCESSFUL_TASK_STATES = [TaskState.FAILED, TaskState.CANCELED, TaskState.TIMED_OUT]
"""Task states rendered as unsuccessful."""

# See https://docs.pydantic.dev/latest/concepts/postponed_annotations/#self-referencing-or-recursive-models
from __future__ import annotations

from datetime import datetime
from typing import Optional

from taskwait.lib.tasks.constants import TERMINAL_ACTIVITY_STATUSES
from taskwait.models.enums.task_status import TaskStatus
from taskwait.view_models.base.base import BaseModel


class Task(BaseModel):
    """
    A point in time snapshot of a server task.

    Only ``id`` is required. The server omits ``IsCompleted`` and ``FinishedSuccessfully``
    for some task types, so both are optional and interpreted through :py:attr:`status`.
    """

    id: str
    name: Optional[str] = None
    description: Optional[str] = None
    state: Optional[str] = None
    is_completed: Optional[bool] = None
    finished_successfully: Optional[bool] = None
    has_warnings_or_errors: Optional[bool] = None
    error_message: Optional[str] = None
    duration: Optional[str] = None
    queue_time: Optional[datetime] = None
    start_time: Optional[datetime] = None
    completed_time: Optional[datetime] = None

    @property
    def status(self) -> TaskStatus:
        if not self.is_completed:
            return TaskStatus.PENDING

        # A completed task which does not report success either way is not counted as a failure.
        if self.finished_successfully is False:
            return TaskStatus.FAILED

        return TaskStatus.SUCCEEDED


class ActivityLogElement(BaseModel):
    category: Optional[str] = None
    message_text: Optional[str] = None
    detail: Optional[str] = None
    occurred_at: Optional[datetime] = None


class ActivityElement(BaseModel):
    id: str
    name: Optional[str] = None
    status: Optional[str] = None
    progress_percentage: Optional[int] = None
    progress_message: Optional[str] = None
    show_at_summary_level: Optional[bool] = None
    started: Optional[datetime] = None
    ended: Optional[datetime] = None
    children: list[ActivityElement] = []
    log_elements: list[ActivityLogElement] = []

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_ACTIVITY_STATUSES


class TaskProgress(BaseModel):
    progress_percentage: Optional[int] = None
    estimated_time_remaining: Optional[str] = None


class TaskDetails(BaseModel):
    task: Optional[Task] = None
    activity_logs: list[ActivityElement] = []
    progress: Optional[TaskProgress] = None

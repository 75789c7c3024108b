"""Rendering of task snapshots and activity logs while waiting on server tasks.

The formatter writes plain lines to an output stream. Activity log entries whose
status is terminal are recorded in a caller owned table, so repeated polls of the
same task print each finished branch exactly once.
"""

import logging
import sys
from typing import Optional, TextIO

import click

from taskwait.lib.tasks.constants import SUCCESSFUL_TASK_STATES, UNSUCCESSFUL_TASK_STATES
from taskwait.view_models.task import ActivityElement, Task

logger = logging.getLogger(__name__)

INDENT = "  "


class TaskOutputFormatter:
    def __init__(self, out: Optional[TextIO] = None):
        self.out = out if out is not None else sys.stdout

    def _write(self, line: str) -> None:
        try:
            click.echo(line, file=self.out)
        except OSError as e:
            logger.warning(msg=f"Could not write task output: {e}")

    def print_task_info(self, task: Task) -> None:
        label = task.description or task.name or task.id
        state = task.state or task.status.value

        if state in SUCCESSFUL_TASK_STATES:
            colour = "green"
        elif state in UNSUCCESSFUL_TASK_STATES:
            colour = "red"
        else:
            colour = "yellow"

        self._write(f"{label}: {click.style(state, fg=colour)}")

    def print_activity_element(self, element: ActivityElement, depth: int, rendered: dict[str, bool]) -> None:
        """
        Print an activity log entry and its children.

        Args:
            element (ActivityElement): The entry to print.
            depth (int): Indentation level of the entry.
            rendered (dict[str, bool]): Entries already printed in a terminal state, keyed by ID.
                Entries found here are skipped along with their children. Updated in place.
        """
        if rendered.get(element.id):
            return

        line = f"{INDENT * depth}{element.name or element.id}: {element.status or 'Pending'}"
        if not element.is_terminal:
            if element.progress_percentage is not None:
                line += f" ({element.progress_percentage}%)"
            if element.progress_message:
                line += f" - {element.progress_message}"
        self._write(line)

        for child in element.children:
            self.print_activity_element(child, depth + 1, rendered)

        if element.is_terminal:
            for log_element in element.log_elements:
                if log_element.message_text:
                    self._write(f"{INDENT * (depth + 1)}{log_element.message_text}")

            rendered[element.id] = True

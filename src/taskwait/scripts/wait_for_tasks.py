import logging

import click

from taskwait.lib.exceptions import WaitError
from taskwait.lib.octopus.client import OctopusClient
from taskwait.lib.tasks.callbacks import server_tasks_callback, task_details_callback
from taskwait.lib.tasks.constants import DEFAULT_TIMEOUT_SECONDS
from taskwait.lib.tasks.wait import wait
from taskwait.scripts.environment import with_octopus_client

logger = logging.getLogger(__name__)


def read_values_from_pipe() -> list[str]:
    """
    Read whitespace separated values from stdin when it is piped. Returns nothing for an interactive terminal.
    """
    stdin = click.get_text_stream("stdin")
    if stdin.isatty():
        return []

    return stdin.read().split()


@click.command()
@with_octopus_client
@click.argument("task_ids", nargs=-1)
@click.option(
    "--timeout",
    type=click.IntRange(min=0),
    default=DEFAULT_TIMEOUT_SECONDS,
    show_default=True,
    help="Duration to wait (in seconds) before stopping execution",
)
@click.option("--progress", "show_progress", is_flag=True, default=False, help="Show detailed progress of the tasks")
def wait_for_tasks(client: OctopusClient, task_ids: tuple[str, ...], timeout: int, show_progress: bool) -> None:
    """
    Wait for a provided list of server task(s) to finish.

    Task IDs may be given as arguments, piped on stdin, or both.
    """
    all_task_ids = [*task_ids, *read_values_from_pipe()]
    logger.debug(f"Waiting on server tasks: {', '.join(all_task_ids)}")

    try:
        wait(
            all_task_ids,
            timeout,
            show_progress,
            get_server_tasks=server_tasks_callback(client),
            get_task_details=task_details_callback(client),
        )
    except WaitError as e:
        raise click.ClickException(str(e)) from e


if __name__ == "__main__":
    wait_for_tasks()

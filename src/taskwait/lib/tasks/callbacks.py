from typing import Callable, Sequence

from taskwait.lib.octopus.client import OctopusClient
from taskwait.view_models.task import Task, TaskDetails

ServerTasksCallback = Callable[[Sequence[str]], list[Task]]
TaskDetailsCallback = Callable[[str], TaskDetails]


def server_tasks_callback(client: OctopusClient) -> ServerTasksCallback:
    def get_server_tasks(task_ids: Sequence[str]) -> list[Task]:
        return client.get_tasks(task_ids)

    return get_server_tasks


def task_details_callback(client: OctopusClient) -> TaskDetailsCallback:
    def get_task_details(task_id: str) -> TaskDetails:
        return client.get_task_details(task_id)

    return get_task_details

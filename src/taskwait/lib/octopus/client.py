import logging
from typing import Any, Optional, Sequence

import requests
from requests.adapters import HTTPAdapter, Retry

from taskwait.lib.octopus.constants import (
    API_KEY_HEADER,
    NEXT_PAGE_LINK,
    OCTOPUS_API_KEY,
    OCTOPUS_REQUEST_TIMEOUT,
    OCTOPUS_SPACE,
    OCTOPUS_URL,
)
from taskwait.view_models.task import Task, TaskDetails

logger = logging.getLogger(__name__)


class OctopusClient:
    """
    A class to read server task state from the Octopus Deploy REST API.

    See: https://octopus.com/docs/octopus-rest-api
    """

    url: str
    space_id: str
    timeout: int

    def __init__(
        self,
        url: str = OCTOPUS_URL,
        api_key: str = OCTOPUS_API_KEY,
        space_id: str = OCTOPUS_SPACE,
        timeout: int = OCTOPUS_REQUEST_TIMEOUT,
    ):
        if not url:
            raise ValueError("An Octopus server URL must be provided or set with the OCTOPUS_URL environment variable.")

        self.url = url.rstrip("/")
        self.space_id = space_id
        self.timeout = timeout

        retries = Retry(total=5, backoff_factor=0.25, status_forcelist=[500, 502, 503, 504])
        self.session = requests.Session()
        self.session.mount("https://", HTTPAdapter(max_retries=retries))
        self.session.mount("http://", HTTPAdapter(max_retries=retries))
        self.session.headers.update({API_KEY_HEADER: api_key, "Accept": "application/json"})

    def _get(self, path_or_url: str, params: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        url = path_or_url if path_or_url.startswith("http") else f"{self.url}{path_or_url}"

        resp = self.session.get(url, params=params, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def get_tasks(self, task_ids: Sequence[str]) -> list[Task]:
        """
        Fetch the current state of the given server tasks.

        The tasks endpoint is paginated. Every page is read by following the ``Page.Next``
        link of each response until the server stops returning one.

        Args:
            task_ids (Sequence[str]): Identifiers of the server tasks to fetch.

        Returns:
            list[Task]: Snapshots for each task known to the server. Unknown IDs are omitted.

        Raises:
            requests.HTTPError: If any page request fails or returns an error status code.
        """
        logger.debug(
            msg=f"Fetching {len(task_ids)} server tasks.", extra={"task_ids": list(task_ids), "space_id": self.space_id}
        )

        page = self._get(f"/api/{self.space_id}/tasks", params={"ids": ",".join(task_ids)})
        tasks = [Task.model_validate(item) for item in page.get("Items", [])]

        next_page = (page.get("Links") or {}).get(NEXT_PAGE_LINK)
        while next_page:
            logger.debug(msg=f"Following next page of server tasks: {next_page}")
            page = self._get(next_page)
            tasks.extend(Task.model_validate(item) for item in page.get("Items", []))
            next_page = (page.get("Links") or {}).get(NEXT_PAGE_LINK)

        logger.debug(msg=f"Fetched {len(tasks)} server tasks.", extra={"space_id": self.space_id})
        return tasks

    def get_task_details(self, task_id: str) -> TaskDetails:
        """
        Fetch a server task together with its nested activity log.

        Args:
            task_id (str): Identifier of the server task.

        Returns:
            TaskDetails: The task snapshot and its activity log tree.

        Raises:
            requests.HTTPError: If the request fails or returns an error status code.
        """
        logger.debug(msg=f"Fetching details for server task {task_id}.", extra={"space_id": self.space_id})

        details = self._get(f"/api/{self.space_id}/tasks/{task_id}/details")
        return TaskDetails.model_validate(details)

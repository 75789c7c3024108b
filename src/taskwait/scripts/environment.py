"""
Environment setup for scripts.
"""

import logging
from functools import wraps

import click

from taskwait.lib.octopus.client import OctopusClient
from taskwait.lib.octopus.constants import OCTOPUS_API_KEY, OCTOPUS_SPACE, OCTOPUS_URL

logger = logging.getLogger(__name__)


def with_octopus_client(command=None):
    """
    Decorator to provide an Octopus API client to a *command*.

    The *command* callable must be a :py:class:`click.Command` instance.

    Three new options are added to the *command* (``--server``, ``--api-key`` and
    ``--space``), each defaulting to its environment variable. The decorated *command*
    is called with a ``client`` keyword argument holding an
    :py:class:`~taskwait.lib.octopus.client.OctopusClient` built from them.

    >>> @click.command
    ... @with_octopus_client
    ... def cmd(client: OctopusClient):
    ...     pass
    """

    def decorator(command):
        @click.option(
            "--server",
            help="Octopus server URL (defaults to $OCTOPUS_URL)",
            default=OCTOPUS_URL,
        )
        @click.option(
            "--api-key",
            help="Octopus API key (defaults to $OCTOPUS_API_KEY)",
            default=OCTOPUS_API_KEY,
        )
        @click.option(
            "--space",
            help="Octopus space ID (defaults to $OCTOPUS_SPACE)",
            default=OCTOPUS_SPACE,
            show_default=True,
        )
        @wraps(command)
        def decorated(*args, server, api_key, space, **kwargs):
            try:
                client = OctopusClient(server, api_key=api_key, space_id=space)
            except ValueError as error:
                raise click.UsageError(str(error)) from None

            kwargs["client"] = client

            try:
                command(*args, **kwargs)

            # Already reported to the user by click.
            except click.ClickException:
                raise

            except Exception as error:
                logger.error(f"Aborting with error: {error}")
                raise error from None

        return decorated

    return decorator(command) if command else decorator

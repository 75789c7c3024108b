import io
import sys
from unittest import mock

import pytest

from taskwait.lib.tasks.presenter import TaskOutputFormatter

sys.path.append(".")


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def formatter(output):
    return TaskOutputFormatter(output)


@pytest.fixture
def fast_polling():
    """Shorten the fixed poll interval so polling tests run quickly."""
    with mock.patch("taskwait.lib.tasks.wait.POLL_INTERVAL_SECONDS", 0.01):
        yield

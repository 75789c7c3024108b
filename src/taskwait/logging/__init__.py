import logging
import logging.config
import os
import sys

from .config import load_stock_config

LOG_CONFIG = os.environ.get("LOG_CONFIG")


def configure():
    """
    Configures logging for taskwait.

    A stock configuration is loaded from the ``taskwait/logging/configurations/*.yaml``
    files, chosen based on the value of ``LOG_CONFIG``.

    Python library warnings are captured and logged at the ``WARNING`` level.
    Uncaught exceptions are logged at the ``CRITICAL`` level before they cause
    the process to exit.

    Log records are written to stderr. Stdout is reserved for task and progress output.
    """
    stock_config = load_stock_config(LOG_CONFIG if LOG_CONFIG else "default")
    logging.config.dictConfig(stock_config)

    # Log library API warnings.
    logging.captureWarnings(True)

    # Log any uncaught exceptions which are about to cause process exit.
    sys.excepthook = lambda *args: logging.getLogger().critical("Uncaught exception:", exc_info=args)  # type: ignore

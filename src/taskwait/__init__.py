import logging as module_logging

import taskwait.logging as application_logging

application_logging.configure()
logger = module_logging.getLogger(__name__)

__project__ = "taskwait"
__version__ = "2025.1.0"

logger.debug(f"taskwait {__version__}")

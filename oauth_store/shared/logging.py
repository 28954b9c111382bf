# oauth_store/shared/logging.py

import logging

# Below DEBUG: per-call tracing of every proxied store operation.
VERBOSE = 5
logging.addLevelName(VERBOSE, "VERBOSE")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(settings) -> None:
    """Single logging configuration for the service and the provisioning command."""
    if settings.DEBUG:
        level = logging.DEBUG
    else:
        level = logging.getLevelName(settings.LOG_LEVEL)
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)

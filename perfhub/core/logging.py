import logging
import sys
from typing import Optional, TextIO

LOGGER_NAME = "perfhub"
LOG_FORMAT = "%(asctime)s level=%(levelname)s module=%(module)s %(message)s"


def setup_logger(log_level: str = "INFO", stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Return the shared ``perfhub`` logger writing key=value lines.

    Lines go to ``stream`` (stdout by default). Calling it again re-binds the
    single handler, so the CLI can move logging to stderr and lower the
    verbosity after the modules have configured it at import time.
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))
    logger.addHandler(handler)
    return logger

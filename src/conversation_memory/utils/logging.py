"""
loguru setup for applications embedding the conversation memory core.

The library modules only ever call 'loguru.logger'; sinks are the concern of
whoever owns the process. 'configure_logging' is the single place that owns
them, and only the host application calls it.
"""

import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)


def configure_logging(level: str = "INFO") -> int:
    """Replace all loguru sinks with a single stderr sink at 'level'. Returns the sink id."""
    logger.remove()
    return logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT)

"""Logging setup for the connector bootstrap."""

import sys

from loguru import logger


def configure_logging(debug: bool = False) -> None:
    """Replace the default loguru sink with a stderr sink.

    Args:
        debug: Log at DEBUG level instead of INFO.
    """
    logger.remove()
    if debug:
        logger.add(sys.stderr, level="DEBUG")
    else:
        logger.add(sys.stderr, level="INFO")

    if debug:
        logger.debug("[INIT] Debug logging enabled")

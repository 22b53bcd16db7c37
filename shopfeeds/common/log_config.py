"""
Logging Configuration

Feed runs are batch jobs (often in CI), so log lines carry a timestamp.
Output goes to stderr to keep stdout clean for the feed summaries.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """
    Configure the ``shopfeeds`` logger.

    Args:
        verbose: If True, set level to DEBUG
        quiet: If True, set level to WARNING
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    logger = logging.getLogger("shopfeeds")
    logger.setLevel(level)
    logger.handlers.clear()
    logger.addHandler(handler)

    # requests/urllib3 log every connection at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)

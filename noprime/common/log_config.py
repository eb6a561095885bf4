"""
Logging Configuration

Sets up the ``noprime`` logger tree. Reports go to stdout, so log lines
go to stderr (and optionally to a file for long link-check runs).

Environment:
    NOPRIME_LOG_LEVEL  Level name used when neither --verbose nor --quiet
                       is given (e.g. DEBUG, WARNING). Defaults to INFO.
"""

import logging
import os
import sys
from typing import Optional

LOG_FORMAT = "%(levelname)-8s %(name)s: %(message)s"
FILE_LOG_FORMAT = "%(asctime)s " + LOG_FORMAT


def _resolve_level(verbose: bool, quiet: bool) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING

    name = os.getenv("NOPRIME_LOG_LEVEL", "").strip().upper()
    level = logging.getLevelName(name) if name else logging.INFO
    # getLevelName returns a string for unknown names
    return level if isinstance(level, int) else logging.INFO


def setup_logging(verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None) -> None:
    """
    Configure the ``noprime`` logger.

    Args:
        verbose: DEBUG level (wins over quiet)
        quiet: WARNING level
        log_file: Also append records to this file
    """
    logger = logging.getLogger("noprime")
    logger.setLevel(_resolve_level(verbose, quiet))

    # Repeated calls replace handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
        logger.addHandler(file_handler)

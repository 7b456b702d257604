"""Logging setup for csvload.

Modules log through ``logging.getLogger(__name__)``; the CLI calls
``setup_logging`` once before running the pipeline.
"""

import logging
import sys
from typing import Optional, Union

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbose: bool = False, level: Optional[Union[int, str]] = None) -> None:
    """Configure the root logger.

    Safe to call more than once; existing handlers are replaced.

    Args:
        verbose: If True, log at DEBUG, otherwise WARNING
        level: Optional explicit level name or number (overridden by verbose)
    """
    if verbose:
        log_level = logging.DEBUG
    elif level is None:
        log_level = logging.WARNING
    elif isinstance(level, str):
        log_level = logging.getLevelName(level.upper())
        if not isinstance(log_level, int):
            log_level = logging.WARNING
    else:
        log_level = level

    # stderr keeps the progress line on stdout readable
    logging.basicConfig(
        level=log_level,
        format=DEFAULT_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,
    )

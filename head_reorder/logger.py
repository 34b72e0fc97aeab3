"""
Package-wide logging for head_reorder.

Every module logs through a child of the "head_reorder" logger, so one
call to setup_logger() controls the level and destination of all of them.
"""

import logging
import sys
from typing import Optional


def setup_logger(
    name: str = "head_reorder",
    level: int = logging.INFO,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Attach handlers to the package logger, or re-level it if already set up.

    Records go to stderr and, when log_file is given, also to that file.
    Calling this again (e.g. from the CLI's --verbose) only changes the
    level; it never stacks a second set of handlers.

    Args:
        name: Logger to configure
        level: Threshold for the logger and each of its handlers
        log_file: Extra file destination

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    logger.setLevel(level)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    # stdout is reserved for reordered HTML and JSON reports
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setLevel(level)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


logger = setup_logger()


def get_module_logger(module_name: str) -> logging.Logger:
    """Logger for one module, named head_reorder.<module_name>."""
    return logging.getLogger(f"head_reorder.{module_name}")

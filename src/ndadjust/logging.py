"""Centralized logging configuration."""

import sys

from loguru import logger


def setup_logger(verbose: bool = False) -> None:
    """Route ndadjust's loguru records to stderr.

    Args:
        verbose: If True, set log level to DEBUG; otherwise INFO.
    """
    logger.remove()
    logger.add(
        sys.stderr,
        colorize=True,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>",
        level="DEBUG" if verbose else "INFO",
    )
    logger.enable("ndadjust")

"""Logging setup using loguru."""

import sys

from loguru import logger

LOG_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}"


def init_logging(verbose: bool = False, sink=None) -> None:
    """Replace loguru's default handler with a single console sink."""
    logger.remove()
    logger.add(
        sink if sink is not None else sys.stderr,
        level="DEBUG" if verbose else "INFO",
        format=LOG_FORMAT,
        backtrace=False,
        diagnose=False,
    )


def short_id(value: str) -> str:
    """First 8 characters of an id, for display."""
    return value[:8]

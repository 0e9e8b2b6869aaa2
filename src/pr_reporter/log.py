"""Logging setup for the command line."""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def normalize_log_level(level: str | None) -> tuple[str, bool]:
    """
    Normalize a log level name.

    Returns:
        The level name and whether the input had to be replaced with INFO
    """
    if not level:
        return "INFO", True
    normalized = level.strip().upper()
    if normalized == "WARN":
        normalized = "WARNING"
    if normalized in LOG_LEVELS:
        return normalized, False
    return "INFO", True


def configure_logging(level: str | None, console: Console | None = None) -> str:
    """
    Route ``pr_reporter`` logs through a rich handler.

    Args:
        level: Log level name
        console: Console to log to (stderr when omitted)

    Returns:
        The level actually applied
    """
    normalized, invalid = normalize_log_level(level)

    logger = logging.getLogger("pr_reporter")
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(normalized)

    if invalid and level:
        logger.warning("Invalid log level %r, using %s", level, normalized)
    return normalized
